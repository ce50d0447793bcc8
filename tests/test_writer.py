"""Tests for the indented writer."""

from __future__ import annotations

import pytest

from apidoc2md.writer import IndentedWriter


class TestWrite:
    """Tests for write and write_line."""

    def test_concatenates_text(self) -> None:
        """Consecutive writes land on the same line."""
        writer = IndentedWriter()
        writer.write("a")
        writer.write_line("b")

        assert writer.get_text() == "ab\n"
        assert writer.at_start_of_line

    def test_str_matches_get_text(self) -> None:
        """str() returns the accumulated text."""
        writer = IndentedWriter()
        writer.write("hello")

        assert str(writer) == "hello"
        assert not writer.at_start_of_line


class TestIndentation:
    """Tests for scoped indentation."""

    def test_prefixes_every_line(self) -> None:
        """Each line written inside the scope starts with the prefix."""
        writer = IndentedWriter()
        with writer.indented("> "):
            writer.write("one\ntwo")
            writer.ensure_new_line()

        assert writer.get_text() == "> one\n> two\n"

    def test_blank_lines_keep_stripped_prefix(self) -> None:
        """Blank lines inside a blockquote scope are a bare '>'."""
        writer = IndentedWriter()
        with writer.indented("> "):
            writer.write_line("a")
            writer.write_line()
            writer.write_line("b")

        assert writer.get_text() == "> a\n>\n> b\n"

    def test_nested_prefixes_accumulate(self) -> None:
        """Nested scopes concatenate their prefixes."""
        writer = IndentedWriter()
        with writer.indented("> "):
            with writer.indented("  "):
                writer.write_line("deep")

        assert writer.get_text() == ">   deep\n"

    def test_prefix_popped_after_exception(self) -> None:
        """The indentation is restored even when the body raises."""
        writer = IndentedWriter()
        with pytest.raises(RuntimeError):
            with writer.indented("  "):
                raise RuntimeError("boom")

        assert writer.indent_prefix == ""


class TestLineSeparation:
    """Tests for ensure_new_line and ensure_skipped_line."""

    def test_ensure_new_line_is_idempotent(self) -> None:
        """Only one newline is added however often it is called."""
        writer = IndentedWriter()
        writer.write("a")
        writer.ensure_new_line()
        writer.ensure_new_line()

        assert writer.get_text() == "a\n"

    def test_skipped_line_noop_on_empty_buffer(self) -> None:
        """Nothing is written at the very top of the output."""
        writer = IndentedWriter()
        writer.ensure_skipped_line()

        assert writer.get_text() == ""

    def test_skipped_line_is_idempotent(self) -> None:
        """Exactly one blank line separates blocks."""
        writer = IndentedWriter()
        writer.write("a")
        writer.ensure_skipped_line()
        writer.ensure_skipped_line()
        writer.write("b")

        assert writer.get_text() == "a\n\nb"
