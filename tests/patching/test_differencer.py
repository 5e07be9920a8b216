"""Tests for line splitting and edit scripts."""

from patching.differencer import apply_edit_script, compute_edit_script, split_lines
from patching.models import Delta


class TestSplitLines:
    """Tests for split_lines()."""

    def test_empty_text(self):
        """Test that empty text has no lines."""
        assert split_lines("") == ()

    def test_trailing_newline_adds_no_line(self):
        """Test that a final terminator does not create an empty line."""
        assert split_lines("a\nb\n") == ("a", "b")
        assert split_lines("a\nb") == ("a", "b")

    def test_all_terminators(self):
        """Test CRLF, CR and LF boundaries."""
        assert split_lines("a\r\nb\rc\nd") == ("a", "b", "c", "d")

    def test_blank_lines_and_whitespace_kept(self):
        """Test that content is not trimmed or merged."""
        assert split_lines("  a \n\n\tb\n") == ("  a ", "", "\tb")

    def test_single_newline(self):
        """Test that a lone newline is one empty line."""
        assert split_lines("\n") == ("",)

    def test_returns_tuple(self):
        """Test that the buffer is immutable."""
        assert isinstance(split_lines("a\nb"), tuple)


class TestComputeEditScript:
    """Tests for compute_edit_script()."""

    def test_identical_sequences(self):
        """Test that identical input gives an empty script."""
        lines = ("a", "b", "c")
        assert compute_edit_script(lines, lines) == ()

    def test_both_empty(self):
        """Test that two empty buffers give an empty script."""
        assert compute_edit_script((), ()) == ()

    def test_empty_old_is_single_insert(self):
        """Test insert-all delta for an empty source."""
        assert compute_edit_script((), ("x", "y")) == (Delta("insert", 0, 0, 0, 2),)

    def test_empty_new_is_single_delete(self):
        """Test delete-all delta for an empty target."""
        assert compute_edit_script(("x", "y"), ()) == (Delta("delete", 0, 2, 0, 0),)

    def test_change_in_the_middle(self):
        """Test that a replaced line is a change delta."""
        script = compute_edit_script(("a", "b", "c"), ("a", "B", "c"))
        assert script == (Delta("change", 1, 2, 1, 2),)

    def test_separate_edits(self):
        """Test that distinct edits are distinct deltas, in order."""
        old = ("a", "b", "c", "d", "e")
        new = ("a", "x", "b", "c", "e")
        script = compute_edit_script(old, new)
        assert [d.kind for d in script] == ["insert", "delete"]
        assert script[0].old_start < script[1].old_start

    def test_frequent_lines_still_match(self):
        """Test that repeated lines are not treated as junk."""
        old = tuple(["}"] * 300 + ["tail"])
        new = tuple(["}"] * 300 + ["TAIL"])
        assert compute_edit_script(old, new) == (Delta("change", 300, 301, 300, 301),)

    def test_deterministic(self):
        """Test that the same input yields the same deltas."""
        old = tuple(f"line {i}" for i in range(50))
        new = tuple(f"line {i}" for i in range(0, 50, 2))
        assert compute_edit_script(old, new) == compute_edit_script(old, new)


class TestApplyEditScript:
    """Tests for apply_edit_script()."""

    def test_rebuilds_target(self):
        """Test that applying the script reproduces the new lines."""
        old = ("a", "b", "c", "d")
        new = ("z", "a", "c", "d", "e")
        script = compute_edit_script(old, new)
        assert apply_edit_script(old, new, script) == list(new)
