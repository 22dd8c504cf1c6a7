"""Exception classes for Huellas.

Provides standardized exceptions for error handling throughout Huellas.

Only contract violations raise. Duplicate or unused footnote definitions are
ordinary input and never produce an error.
"""

from __future__ import annotations


class HuellasError(Exception):
    """Base exception for all Huellas errors.
    
    Subclass this for specific error categories.
    """

    pass


class CompileError(HuellasError):
    """Error while compiling an event stream to HTML.
    
    Raised when the compiler or one of its extensions finds the event
    stream in a state the tokenizer never produces.
    """

    def __init__(self, message: str, lineno: int | None = None) -> None:
        """Initialize compile error with optional location.
        
        Args:
            message: Error description
            lineno: Line number of the offending token (1-indexed)
        """
        self.message = message
        self.lineno = lineno

        location = f" (line {lineno})" if lineno else ""
        super().__init__(f"{message}{location}")


class FootnoteStateError(CompileError):
    """Footnote bookkeeping is internally inconsistent.
    
    Raised when a definition exits with no label on the label stack, when a
    call has no call record, or when a called label has no stored definition.
    These are unrecoverable: they mean the event stream was not produced by a
    conforming tokenizer.
    """

    pass


class BufferNestingError(CompileError):
    """Output buffering was not strictly nested.
    
    Raised when ``resume()`` is called with no side buffer open, or when a
    compile ends with side buffers still open.
    """

    pass
