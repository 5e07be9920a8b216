"""Tests for parsing and applying unified patches."""

import random

import pytest

from patching.applier import apply_patch, apply_to_lines, is_valid_patch, parse_patch
from patching.differencer import compute_edit_script, split_lines
from patching.errors import HashMismatchError, PatchApplyError, PatchFormatError
from patching.formatter import format_unified
from patching.hasher import fingerprint


def make_patch(old_text, new_text, context_lines=3):
    old_lines, new_lines = split_lines(old_text), split_lines(new_text)
    script = compute_edit_script(old_lines, new_lines)
    return format_unified(old_lines, new_lines, script, context_lines=context_lines)


def random_edit(rng, lines):
    """Apply a handful of random insert/delete/change edits to a list of lines."""
    lines = list(lines)
    for _ in range(rng.randint(1, 6)):
        op = rng.choice(["insert", "delete", "change"])
        pos = rng.randint(0, len(lines))
        if op == "insert" or not lines:
            lines[pos:pos] = [f"new {rng.randint(0, 999)}" for _ in range(rng.randint(1, 3))]
        elif op == "delete":
            pos = min(pos, len(lines) - 1)
            del lines[pos : pos + rng.randint(1, 3)]
        else:
            pos = min(pos, len(lines) - 1)
            lines[pos] = f"changed {rng.randint(0, 999)}"
    return lines


class TestParsePatch:
    """Tests for parse_patch()."""

    def test_headers_and_hunks(self):
        """Test labels, ranges and body lines."""
        parsed = parse_patch("--- old\n+++ new\n@@ -1,3 +1,3 @@\n a\n-b\n+B\n c")
        assert parsed.source_label == "old"
        assert parsed.target_label == "new"
        assert len(parsed.hunks) == 1
        hunk = parsed.hunks[0]
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (1, 3, 1, 3)
        assert hunk.lines == (" a", "-b", "+B", " c")

    def test_omitted_counts_default_to_one(self):
        """Test "@@ -1 +1 @@" headers."""
        hunk = parse_patch("--- old\n+++ new\n@@ -1 +1 @@\n-a\n+b").hunks[0]
        assert hunk.old_count == 1
        assert hunk.new_count == 1

    def test_headers_only(self):
        """Test that a no-op patch parses to zero hunks."""
        assert parse_patch("--- old\n+++ new").hunks == ()

    def test_removed_line_that_looks_like_a_header(self):
        """Test that body lines are read by count, not by prefix."""
        patch = make_patch("-- comment\nx\n", "x\n")
        assert "--- comment" in patch.split("\n")[3:]
        assert apply_patch("-- comment\nx\n", patch) == "x"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "+++ new\n--- old",
            "--- old\n+++ new\nnot a hunk",
            "--- old\n+++ new\n@@ -1,2 +1,2 @@\n a",
            "--- old\n+++ new\n@@ -1 +1 @@\n a\n b",
            "--- old\n+++ new\n@@ -1 +1 @@\n*a",
        ],
    )
    def test_malformed(self, text):
        """Test that malformed patches raise PatchFormatError."""
        with pytest.raises(PatchFormatError):
            parse_patch(text)
        assert not is_valid_patch(text)

    def test_is_valid_patch(self):
        assert is_valid_patch(make_patch("a\nb\n", "a\nc\n"))


class TestApplyPatch:
    """Tests for apply_patch()."""

    def test_simple_change(self):
        """Test applying a single change."""
        assert apply_patch("a\nb\nc\n", make_patch("a\nb\nc\n", "a\nB\nc\n")) == "a\nB\nc"

    def test_insert_into_empty_source(self):
        assert apply_patch("", make_patch("", "hello\nworld")) == "hello\nworld"

    def test_delete_everything(self):
        assert apply_patch("a\nb", make_patch("a\nb", "")) == ""

    def test_no_op_patch(self):
        assert apply_patch("a\nb\n", make_patch("a\nb\n", "a\nb\n")) == "a\nb"

    def test_expected_hash_accepted(self):
        """Test that a matching source fingerprint passes."""
        old = "a\nb\n"
        patch = make_patch(old, "a\nc\n")
        assert apply_patch(old, patch, expected_source_hash=str(fingerprint(old))) == "a\nc"

    def test_expected_hash_mismatch(self):
        """Test that a different source is refused before patching."""
        patch = make_patch("a\nb\n", "a\nc\n")
        with pytest.raises(HashMismatchError) as exc_info:
            apply_patch("a\nb\nextra\n", patch, expected_source_hash=fingerprint("a\nb\n"))
        assert exc_info.value.expected == str(fingerprint("a\nb\n"))

    def test_context_mismatch(self):
        """Test that a patch for another source fails."""
        patch = make_patch("a\nb\nc\n", "a\nB\nc\n")
        with pytest.raises(PatchApplyError):
            apply_patch("a\nX\nc\n", patch)

    def test_hunk_beyond_end_of_text(self):
        """Test that hunks past the source length fail."""
        patch = "--- old\n+++ new\n@@ -5 +5 @@\n-e\n+E"
        with pytest.raises(PatchApplyError):
            apply_patch("a\nb\n", patch)

    def test_multiple_hunks(self):
        """Test applying hunks far apart."""
        old_lines = [f"line {i}" for i in range(40)]
        new_lines = list(old_lines)
        new_lines[1] = "first"
        new_lines[35] = "second"
        old, new = "\n".join(old_lines), "\n".join(new_lines)
        patch = make_patch(old, new)
        assert len(parse_patch(patch).hunks) == 2
        assert apply_patch(old, patch) == new


class TestRoundTrip:
    """Applying a generated patch reproduces the new lines."""

    @pytest.mark.parametrize("seed", range(40))
    def test_random_edits(self, seed):
        """Test round-trip over random edit sequences."""
        rng = random.Random(seed)
        old_lines = [f"line {i % 7}" for i in range(rng.randint(0, 40))]
        new_lines = random_edit(rng, old_lines)
        context = rng.choice([0, 1, 3])

        script = compute_edit_script(old_lines, new_lines)
        patch = format_unified(old_lines, new_lines, script, context_lines=context)

        assert apply_to_lines(old_lines, parse_patch(patch)) == new_lines
