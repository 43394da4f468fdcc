# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source text lookup for spans.

`span_to_snippet` is strict and raises `SnippetError`; the trimming helpers
are lenient and hand back the input span when no text is available, so rules
can call them without guarding every step.
"""

from __future__ import annotations

from typing import Callable, Dict, Tuple

from boundadvisor.core.span import Span
from boundadvisor.errors import SnippetError, snippet_error


class SourceMap:
	"""Owns the text of every file spans may point into."""

	def __init__(self) -> None:
		self._files: Dict[str, str] = {}

	def add_file(self, name: str, text: str) -> str:
		self._files[name] = text
		return name

	def file_text(self, name: str) -> str | None:
		return self._files.get(name)

	def span_to_snippet(self, span: Span) -> str:
		if span.is_dummy() or span.file is None:
			raise snippet_error("dummy span has no source text")
		text = self._files.get(span.file)
		if text is None:
			raise snippet_error(f"no source text for file '{span.file}'", file=span.file)
		if span.lo < 0 or span.lo > span.hi or span.hi > len(text):
			raise snippet_error(
				f"span {span.lo}..{span.hi} is outside of '{span.file}' ({len(text)} chars)",
				file=span.file,
			)
		return text[span.lo : span.hi]

	def _snippet_or_none(self, span: Span) -> str | None:
		try:
			return self.span_to_snippet(span)
		except SnippetError:
			return None

	def span_take_while(self, span: Span, pred: Callable[[str], bool]) -> Span:
		"""Shrink `span` to its longest prefix whose characters satisfy `pred`."""
		snippet = self._snippet_or_none(span)
		if snippet is None:
			return span
		offset = 0
		for ch in snippet:
			if not pred(ch):
				break
			offset += 1
		return span.with_hi(span.lo + offset)

	def span_until_non_whitespace(self, span: Span) -> Span:
		"""
		Cover the first token of `span` and the whitespace after it.

		`move |_| {}` gives `move `, `|_| {}` gives `|_| ` and `|_|` gives the
		whole span.
		"""
		seen_ws = False

		def _take(ch: str) -> bool:
			nonlocal seen_ws
			if not seen_ws and ch.isspace():
				seen_ws = True
			return not seen_ws or ch.isspace()

		return self.span_take_while(span, _take)

	def span_through_char(self, span: Span, ch: str) -> Span:
		"""Extend from the start of `span` through the first `ch`, if any."""
		snippet = self._snippet_or_none(span)
		if snippet is not None:
			idx = snippet.find(ch)
			if idx >= 0:
				return span.with_hi(span.lo + idx + len(ch))
		return span

	def span_until_char(self, span: Span, ch: str) -> Span:
		"""Cut `span` right before the first `ch` (trailing whitespace dropped)."""
		snippet = self._snippet_or_none(span)
		if snippet is None:
			return span
		head = snippet.split(ch, 1)[0].rstrip()
		if head and "\n" not in head:
			return span.with_hi(span.lo + len(head))
		return span

	def def_span(self, span: Span) -> Span:
		"""The signature part of a definition: everything before its `{`."""
		return self.span_until_char(span, "{")

	def end_point(self, span: Span) -> Span:
		"""The last character of `span`."""
		return span.with_lo(max(span.hi - 1, span.lo))

	def lookup_line_col(self, span: Span) -> Tuple[int, int]:
		"""1-based line/column of the start of `span` (0, 0 when unknown)."""
		if span.file is None:
			return (0, 0)
		text = self._files.get(span.file)
		if text is None or span.lo > len(text):
			return (0, 0)
		before = text[: span.lo]
		line = before.count("\n") + 1
		col = span.lo - (before.rfind("\n") + 1) + 1
		return (line, col)


__all__ = ["SourceMap"]
