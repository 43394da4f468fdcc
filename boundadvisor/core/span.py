# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Offset-based source spans used by diagnostics and suggestions.

A Span addresses a half-open character range `[lo, hi)` inside one file known
to the SourceMap. Spans produced by macro expansion or compiler desugaring
carry a mark so suggestion rules can stay away from code the user did not
write.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (file plus character offsets)."""

	file: Optional[str] = None
	lo: int = 0
	hi: int = 0
	expansion: bool = False
	desugaring: Optional[str] = None

	def is_dummy(self) -> bool:
		return self.file is None and self.lo == 0 and self.hi == 0

	def is_empty(self) -> bool:
		return self.lo == self.hi

	def from_expansion(self) -> bool:
		return self.expansion

	def overlaps(self, other: "Span") -> bool:
		if self.file != other.file:
			return False
		return self.lo < other.hi and other.lo < self.hi

	def contains(self, other: "Span") -> bool:
		return self.file == other.file and self.lo <= other.lo and other.hi <= self.hi

	def shrink_to_hi(self) -> "Span":
		return replace(self, lo=self.hi)

	def with_lo(self, lo: int) -> "Span":
		return replace(self, lo=lo)

	def with_hi(self, hi: int) -> "Span":
		return replace(self, hi=hi)

	def to(self, end: "Span") -> "Span":
		"""Span from the start of `self` to the end of `end`."""
		return replace(self, lo=min(self.lo, end.lo), hi=max(self.hi, end.hi))


DUMMY_SP = Span()


__all__ = ["Span", "DUMMY_SP"]
