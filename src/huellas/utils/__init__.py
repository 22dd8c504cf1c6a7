"""Utility modules for Huellas.

Provides:
- text: html_escape for element and attribute content
- logger: get_logger for logging
"""

from huellas.utils.logger import get_logger
from huellas.utils.text import html_escape

__all__ = [
    "get_logger",
    "html_escape",
]
