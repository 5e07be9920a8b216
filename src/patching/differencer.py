"""Line splitting and edit scripts between two texts."""

import re
from collections.abc import Sequence
from difflib import SequenceMatcher

from .models import Delta, EditScript, TextBuffer

LINE_BOUNDARY = re.compile(r"\r\n|\r|\n")

# difflib opcode -> delta kind
_OPCODE_KINDS = {"insert": "insert", "delete": "delete", "replace": "change"}


def split_lines(text: str) -> TextBuffer:
    """
    Split text into lines without their terminators.

    "\\r\\n", "\\r" and "\\n" all end a line. A terminator at the very end does
    not start an extra empty line, so "a\\nb\\n" and "a\\nb" both give
    ("a", "b"). Nothing else is trimmed.

    Args:
        text: Decoded text

    Returns:
        Tuple of lines
    """
    if not text:
        return ()

    lines = LINE_BOUNDARY.split(text)
    if lines[-1] == "":
        lines.pop()
    return tuple(lines)


def compute_edit_script(old_lines: Sequence[str], new_lines: Sequence[str]) -> EditScript:
    """
    Compute the deltas turning old_lines into new_lines.

    Delegates to difflib.SequenceMatcher with autojunk disabled, so frequent
    lines (blank lines, closing braces) are still matched and the same input
    always yields the same delta boundaries.

    Args:
        old_lines: Lines of the source text
        new_lines: Lines of the target text

    Returns:
        Ordered deltas; empty when the sequences are identical
    """
    matcher = SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    return tuple(
        Delta(
            kind=_OPCODE_KINDS[tag],
            old_start=i1,
            old_end=i2,
            new_start=j1,
            new_end=j2,
        )
        for tag, i1, i2, j1, j2 in matcher.get_opcodes()
        if tag != "equal"
    )


def apply_edit_script(
    old_lines: Sequence[str], new_lines: Sequence[str], script: EditScript
) -> list[str]:
    """Rebuild the target lines from old_lines and the deltas of script."""
    result: list[str] = []
    cursor = 0
    for delta in script:
        result.extend(old_lines[cursor : delta.old_start])
        result.extend(new_lines[delta.new_start : delta.new_end])
        cursor = delta.old_end
    result.extend(old_lines[cursor:])
    return result
