"""
Parse unified patches and apply them to the old text.

This is the client half of a patch decision: given the old text and an
accepted patch, rebuild the new text. Every context and removed line is
checked against the old text, so a patch built for another source fails
instead of producing garbage.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .differencer import split_lines
from .errors import HashMismatchError, PatchApplyError, PatchFormatError
from .hasher import fingerprint, verify
from .models import Fingerprint

HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


@dataclass(frozen=True)
class Hunk:
    """One hunk, with the 1-based ranges from its header."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: tuple[str, ...]


@dataclass(frozen=True)
class ParsedPatch:
    source_label: str
    target_label: str
    hunks: tuple[Hunk, ...]


def _count(group: str | None) -> int:
    return 1 if group is None else int(group)


def parse_patch(text: str) -> ParsedPatch:
    """
    Parse unified diff text.

    Hunk bodies are read by the line counts in their headers, so removed
    lines that themselves start with "--" are not mistaken for headers.

    Args:
        text: Patch text as produced by format_unified

    Returns:
        ParsedPatch

    Raises:
        PatchFormatError: If headers are missing or a hunk is malformed
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    if len(lines) < 2 or not lines[0].startswith("--- ") or not lines[1].startswith("+++ "):
        raise PatchFormatError("Patch must start with '--- ' and '+++ ' header lines")

    hunks: list[Hunk] = []
    i = 2
    while i < len(lines):
        match = HUNK_HEADER.match(lines[i])
        if match is None:
            raise PatchFormatError(f"Expected hunk header at line {i + 1}: {lines[i]!r}")

        old_start, new_start = int(match.group(1)), int(match.group(3))
        old_count, new_count = _count(match.group(2)), _count(match.group(4))
        i += 1

        body: list[str] = []
        old_seen = new_seen = 0
        while old_seen < old_count or new_seen < new_count:
            if i >= len(lines):
                raise PatchFormatError(f"Hunk at line {i} is truncated")

            line = lines[i]
            prefix = line[:1]
            if line.startswith("\\"):
                # "\ No newline at end of file"
                i += 1
                continue
            if prefix in (" ", ""):
                old_seen += 1
                new_seen += 1
            elif prefix == "-":
                old_seen += 1
            elif prefix == "+":
                new_seen += 1
            else:
                raise PatchFormatError(f"Unexpected line {i + 1} in hunk: {line!r}")

            if old_seen > old_count or new_seen > new_count:
                raise PatchFormatError(f"Hunk body at line {i + 1} exceeds its header counts")

            body.append(line)
            i += 1

        hunks.append(
            Hunk(
                old_start=old_start,
                old_count=old_count,
                new_start=new_start,
                new_count=new_count,
                lines=tuple(body),
            )
        )

    return ParsedPatch(
        source_label=lines[0][4:],
        target_label=lines[1][4:],
        hunks=tuple(hunks),
    )


def is_valid_patch(text: str) -> bool:
    """Check whether text parses as a unified patch."""
    try:
        parse_patch(text)
    except PatchFormatError:
        return False
    return True


def apply_to_lines(old_lines: Sequence[str], patch: ParsedPatch) -> list[str]:
    """
    Apply parsed hunks to a sequence of lines.

    Raises:
        PatchApplyError: If hunks overlap, fall outside the text, or their
            context/removed lines differ from old_lines
    """
    result: list[str] = []
    cursor = 0

    for hunk in patch.hunks:
        # An empty old range names the line it follows
        start = hunk.old_start - 1 if hunk.old_count > 0 else hunk.old_start
        if start < cursor or start > len(old_lines):
            raise PatchApplyError(f"Hunk at old line {hunk.old_start} is out of order or range")

        result.extend(old_lines[cursor:start])
        pos = start

        for line in hunk.lines:
            prefix, content = (line[:1], line[1:]) if line else (" ", "")
            if prefix == "+":
                result.append(content)
                continue

            if pos >= len(old_lines) or old_lines[pos] != content:
                actual = old_lines[pos] if pos < len(old_lines) else None
                raise PatchApplyError(
                    f"Line {pos + 1} does not match patch: expected {content!r}, found {actual!r}"
                )
            if prefix == " ":
                result.append(content)
            pos += 1

        cursor = pos

    result.extend(old_lines[cursor:])
    return result


def apply_patch(
    old_text: str,
    patch_text: str,
    expected_source_hash: str | Fingerprint | None = None,
) -> str:
    """
    Rebuild the new text from the old text and a patch.

    Args:
        old_text: Source version the patch was generated against
        patch_text: Unified patch
        expected_source_hash: Fingerprint the old text must match, if given

    Returns:
        New lines joined with "\\n"

    Raises:
        HashMismatchError: If old_text does not match expected_source_hash
        PatchFormatError: If the patch is malformed
        PatchApplyError: If the patch does not fit old_text
    """
    if expected_source_hash is not None and not verify(old_text, expected_source_hash):
        raise HashMismatchError(str(expected_source_hash), str(fingerprint(old_text)))

    patch = parse_patch(patch_text)
    return "\n".join(apply_to_lines(split_lines(old_text), patch))
