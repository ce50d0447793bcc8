"""Text sink with indentation tracking used by the Markdown emitter."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator


class IndentedWriter:
    """Accumulate text, prefixing every line with the current indentation.

    Indentation is pushed with :meth:`indented`, which always pops on exit even
    when the nested emission raises. Blank lines get the right-stripped prefix,
    so a blank line inside a ``"> "`` scope stays part of the blockquote.
    """

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._indent_stack: list[str] = []
        self._at_start_of_line = True
        self._line_has_content = False
        self._previous_line_blank = False

    @property
    def at_start_of_line(self) -> bool:
        return self._at_start_of_line

    @property
    def indent_prefix(self) -> str:
        return "".join(self._indent_stack)

    @contextmanager
    def indented(self, prefix: str = "  ") -> Iterator[None]:
        self._indent_stack.append(prefix)
        try:
            yield
        finally:
            self._indent_stack.pop()

    def write(self, text: str) -> None:
        for index, line in enumerate(text.split("\n")):
            if index > 0:
                self._write_new_line()
            if line:
                if self._at_start_of_line:
                    self._chunks.append(self.indent_prefix)
                    self._at_start_of_line = False
                self._chunks.append(line)
                self._line_has_content = True

    def write_line(self, text: str = "") -> None:
        self.write(text)
        self._write_new_line()

    def ensure_new_line(self) -> None:
        if not self._at_start_of_line:
            self._write_new_line()

    def ensure_skipped_line(self) -> None:
        """Make sure the next text starts after a blank line (no-op at the top)."""
        self.ensure_new_line()
        if self._chunks and not self._previous_line_blank:
            self._write_new_line()

    def get_text(self) -> str:
        return "".join(self._chunks)

    def __str__(self) -> str:
        return self.get_text()

    def _write_new_line(self) -> None:
        if self._at_start_of_line:
            blank_prefix = self.indent_prefix.rstrip()
            if blank_prefix:
                self._chunks.append(blank_prefix)
        self._chunks.append("\n")
        self._previous_line_blank = not self._line_has_content
        self._line_has_content = False
        self._at_start_of_line = True
