"""Property-based tests for footnote numbering using Hypothesis.

These tests verify invariants that should hold for any sequence of calls:
1. Footnotes are numbered and listed in first-call order
2. Every call gets exactly one back-reference
3. Output is deterministic
4. No calls means no section
"""

import re

from hypothesis import given, settings
from hypothesis import strategies as st

from huellas import compile_html

LABELS = ["a", "b", "c", "note"]

# Call labels in mixed case; definitions are always lower case
call_labels = st.sampled_from(LABELS).flatmap(
    lambda label: st.sampled_from([label, label.upper(), label.capitalize()])
)
call_lists = st.lists(call_labels, max_size=12)
definition_orders = st.permutations(LABELS)


def build_source(calls: list[str], definitions: list[str]) -> str:
    paragraph = "x" + "".join(f" [^{label}]" for label in calls)
    defs = "\n\n".join(f"[^{label}]: Body {label}." for label in definitions)
    return f"{paragraph}\n\n{defs}\n"


def first_seen(calls: list[str]) -> list[str]:
    seen: list[str] = []
    for label in calls:
        if label.lower() not in seen:
            seen.append(label.lower())
    return seen


class TestFootnoteOrderProperties:
    """Numbering follows calls, never definitions."""

    @given(calls=call_lists, definitions=definition_orders)
    @settings(max_examples=100)
    def test_list_items_in_first_call_order(
        self, calls: list[str], definitions: list[str]
    ) -> None:
        html = compile_html(build_source(calls, definitions))
        ids = re.findall(r'<li id="user-content-fn-([^"]+)">', html)
        assert ids == first_seen(calls)

    @given(calls=call_lists, definitions=definition_orders)
    @settings(max_examples=100)
    def test_call_numbers_match_first_seen_position(
        self, calls: list[str], definitions: list[str]
    ) -> None:
        html = compile_html(build_source(calls, definitions))
        order = first_seen(calls)
        numbers = [
            int(n)
            for n in re.findall(r'aria-describedby="footnote-label">(\d+)</a></sup>', html)
        ]
        assert numbers == [order.index(label.lower()) + 1 for label in calls]


class TestBackReferenceProperties:
    """One back-reference per call, with unique anchors."""

    @given(calls=call_lists, definitions=definition_orders)
    @settings(max_examples=100)
    def test_back_reference_count_equals_call_count(
        self, calls: list[str], definitions: list[str]
    ) -> None:
        html = compile_html(build_source(calls, definitions))
        assert html.count('class="data-footnote-backref"') == len(calls)

    @given(calls=call_lists, definitions=definition_orders)
    @settings(max_examples=100)
    def test_call_anchor_ids_unique(self, calls: list[str], definitions: list[str]) -> None:
        html = compile_html(build_source(calls, definitions))
        anchors = re.findall(r'id="(user-content-fnref-[^"]+)"', html)
        assert len(anchors) == len(calls)
        assert len(set(anchors)) == len(anchors)

    @given(calls=call_lists, definitions=definition_orders)
    @settings(max_examples=100)
    def test_every_back_reference_targets_a_call(
        self, calls: list[str], definitions: list[str]
    ) -> None:
        html = compile_html(build_source(calls, definitions))
        anchors = set(re.findall(r'id="(user-content-fnref-[^"]+)"', html))
        targets = re.findall(r'href="#(user-content-fnref-[^"]+)"', html)
        assert set(targets) == anchors


class TestSectionProperties:
    """Section presence and determinism."""

    @given(calls=call_lists, definitions=definition_orders)
    @settings(max_examples=50)
    def test_deterministic(self, calls: list[str], definitions: list[str]) -> None:
        source = build_source(calls, definitions)
        assert compile_html(source) == compile_html(source)

    @given(calls=call_lists, definitions=definition_orders)
    @settings(max_examples=50)
    def test_section_iff_calls(self, calls: list[str], definitions: list[str]) -> None:
        html = compile_html(build_source(calls, definitions))
        assert html.count("<section") == (1 if calls else 0)

    @given(text=st.text(alphabet=st.sampled_from("ab[]^: \n\t\r"), max_size=60))
    @settings(max_examples=200)
    def test_never_crashes(self, text: str) -> None:
        html = compile_html(text)
        assert html.count("<section") <= 1
