"""Unified diff rendering of an edit script."""

from collections.abc import Sequence

from common.constants import DEFAULT_CONTEXT_LINES, SOURCE_LABEL, TARGET_LABEL

from .models import Delta, EditScript


def format_range(start: int, stop: int) -> str:
    """
    Format a half-open, 0-based line range for a hunk header.

    Follows GNU diff: "3" for a single line, "3,4" for several, and
    "2,0" for an empty range that sits after line 2.
    """
    beginning = start + 1
    length = stop - start
    if length == 1:
        return f"{beginning}"
    if not length:
        beginning -= 1
    return f"{beginning},{length}"


def group_hunks(script: EditScript, context_lines: int) -> list[list[Delta]]:
    """
    Group deltas whose context windows touch or overlap.

    Two neighbouring deltas share a hunk when at most 2 * context_lines
    unchanged lines separate them.
    """
    hunks: list[list[Delta]] = []
    for delta in script:
        if hunks and delta.old_start - hunks[-1][-1].old_end <= 2 * context_lines:
            hunks[-1].append(delta)
        else:
            hunks.append([delta])
    return hunks


def _render_hunk(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    deltas: list[Delta],
    context_lines: int,
) -> list[str]:
    first, last = deltas[0], deltas[-1]

    old_lo = max(0, first.old_start - context_lines)
    old_hi = min(len(old_lines), last.old_end + context_lines)
    # Context lines are unchanged, so they shift the new range one for one
    new_lo = first.new_start - (first.old_start - old_lo)
    new_hi = last.new_end + (old_hi - last.old_end)

    out = [f"@@ -{format_range(old_lo, old_hi)} +{format_range(new_lo, new_hi)} @@"]

    cursor = old_lo
    for delta in deltas:
        out.extend(f" {line}" for line in old_lines[cursor : delta.old_start])
        out.extend(f"-{line}" for line in old_lines[delta.old_start : delta.old_end])
        out.extend(f"+{line}" for line in new_lines[delta.new_start : delta.new_end])
        cursor = delta.old_end
    out.extend(f" {line}" for line in old_lines[cursor:old_hi])

    return out


def format_unified(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    script: EditScript,
    context_lines: int = DEFAULT_CONTEXT_LINES,
    source_label: str = SOURCE_LABEL,
    target_label: str = TARGET_LABEL,
) -> str:
    """
    Render an edit script as unified diff text.

    The two header lines are always present, so an empty script renders
    as just "--- old" and "+++ new". Lines are joined with "\\n" and no
    trailing newline is added.

    Args:
        old_lines: Lines of the source text
        new_lines: Lines of the target text
        script: Deltas from compute_edit_script
        context_lines: Unchanged lines kept on each side of a change
        source_label: Name of the source side in the header
        target_label: Name of the target side in the header

    Returns:
        Patch text

    Raises:
        ValueError: If context_lines is negative
    """
    if context_lines < 0:
        raise ValueError(f"context_lines must be >= 0, got {context_lines}")

    out = [f"--- {source_label}", f"+++ {target_label}"]
    for deltas in group_hunks(script, context_lines):
        out.extend(_render_hunk(old_lines, new_lines, deltas, context_lines))

    return "\n".join(out)
