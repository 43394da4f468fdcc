# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic structure populated by the advisor.

The advisor only fills data: a primary message, labeled spans, child
notes/helps and ordered code suggestions. Rendering (line wrapping, colors,
snippet windows) belongs to whoever consumes `Diagnostic.to_dict()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from .span import Span

E_UNSATISFIED_BOUND = "E_UNSATISFIED_BOUND"
E_UNBOXED_DYN_RETURN = "E_UNBOXED_DYN_RETURN"
E_ARG_COUNT_MISMATCH = "E_ARG_COUNT_MISMATCH"
E_CLOSURE_ARG_MISMATCH = "E_CLOSURE_ARG_MISMATCH"


class Applicability(Enum):
	"""How confident a suggestion is."""

	MACHINE_APPLICABLE = "machine-applicable"
	HAS_PLACEHOLDERS = "has-placeholders"
	MAYBE_INCORRECT = "maybe-incorrect"
	UNSPECIFIED = "unspecified"


class SuggestionStyle(Enum):
	SHOW_CODE = "show-code"
	HIDE_CODE_INLINE = "hide-code-inline"  # short form: message only


@dataclass(frozen=True)
class SpanLabel:
	span: Span
	label: str


@dataclass
class MultiSpan:
	"""One or more primary spans plus labeled secondary spans."""

	primary_spans: List[Span] = field(default_factory=list)
	labels: List[SpanLabel] = field(default_factory=list)

	@classmethod
	def from_span(cls, span: Span) -> "MultiSpan":
		return cls(primary_spans=[span])

	def push_span_label(self, span: Span, label: str) -> None:
		self.labels.append(SpanLabel(span=span, label=label))

	def primary_span(self) -> Optional[Span]:
		return self.primary_spans[0] if self.primary_spans else None

	def to_dict(self) -> dict[str, Any]:
		return {
			"primary": [_span_dict(sp) for sp in self.primary_spans],
			"labels": [{"span": _span_dict(lbl.span), "label": lbl.label} for lbl in self.labels],
		}


@dataclass
class SubDiagnostic:
	"""A child `note` or `help`, optionally anchored to spans."""

	level: str
	message: str
	span: MultiSpan = field(default_factory=MultiSpan)


@dataclass(frozen=True)
class SubstitutionPart:
	span: Span
	snippet: str


@dataclass
class CodeSuggestion:
	"""A suggested edit; multi-part suggestions apply all parts together."""

	parts: List[SubstitutionPart]
	message: str
	applicability: Applicability
	style: SuggestionStyle = SuggestionStyle.SHOW_CODE


def _span_dict(span: Span) -> dict[str, Any]:
	return {"file": span.file, "lo": span.lo, "hi": span.hi}


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic built incrementally by the advisor."""

	message: str
	code: str | None = None
	phase: str | None = "typecheck"
	severity: str = "error"
	span: MultiSpan = field(default_factory=MultiSpan)
	children: List[SubDiagnostic] = field(default_factory=list)
	suggestions: List[CodeSuggestion] = field(default_factory=list)

	@classmethod
	def error(cls, span: Span, message: str, *, code: str | None = None) -> "Diagnostic":
		return cls(message=message, code=code, span=MultiSpan.from_span(span))

	# Framing

	def set_primary_message(self, message: str) -> "Diagnostic":
		self.message = message
		return self

	def set_code(self, code: str) -> "Diagnostic":
		self.code = code
		return self

	def clear_code(self) -> "Diagnostic":
		self.code = None
		return self

	def set_span(self, span: MultiSpan) -> "Diagnostic":
		self.span = span
		return self

	def primary_span(self) -> Optional[Span]:
		return self.span.primary_span()

	# Labels and children

	def span_label(self, span: Span, label: str) -> "Diagnostic":
		self.span.push_span_label(span, label)
		return self

	def note(self, message: str) -> "Diagnostic":
		self.children.append(SubDiagnostic(level="note", message=message))
		return self

	def help(self, message: str) -> "Diagnostic":
		self.children.append(SubDiagnostic(level="help", message=message))
		return self

	def span_note(self, span: Span | MultiSpan, message: str) -> "Diagnostic":
		self.children.append(SubDiagnostic(level="note", message=message, span=_as_multispan(span)))
		return self

	def span_help(self, span: Span | MultiSpan, message: str) -> "Diagnostic":
		self.children.append(SubDiagnostic(level="help", message=message, span=_as_multispan(span)))
		return self

	# Suggestions

	def span_suggestion(
		self,
		span: Span,
		message: str,
		suggestion: str,
		applicability: Applicability,
	) -> "Diagnostic":
		self.suggestions.append(
			CodeSuggestion(parts=[SubstitutionPart(span, suggestion)], message=message, applicability=applicability)
		)
		return self

	def span_suggestion_short(
		self,
		span: Span,
		message: str,
		suggestion: str,
		applicability: Applicability,
	) -> "Diagnostic":
		self.suggestions.append(
			CodeSuggestion(
				parts=[SubstitutionPart(span, suggestion)],
				message=message,
				applicability=applicability,
				style=SuggestionStyle.HIDE_CODE_INLINE,
			)
		)
		return self

	def multipart_suggestion(
		self,
		message: str,
		parts: Iterable[Tuple[Span, str]],
		applicability: Applicability,
	) -> "Diagnostic":
		self.suggestions.append(
			CodeSuggestion(
				parts=[SubstitutionPart(sp, text) for sp, text in parts],
				message=message,
				applicability=applicability,
			)
		)
		return self

	# Inspection helpers (mostly for renderers and tests)

	@property
	def notes(self) -> List[str]:
		return [c.message for c in self.children if c.level == "note"]

	@property
	def helps(self) -> List[str]:
		return [c.message for c in self.children if c.level == "help"]

	@property
	def labels(self) -> List[SpanLabel]:
		return list(self.span.labels)

	def to_dict(self) -> dict[str, Any]:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"span": self.span.to_dict(),
			"children": [
				{"level": c.level, "message": c.message, "span": c.span.to_dict()} for c in self.children
			],
			"suggestions": [
				{
					"message": s.message,
					"applicability": s.applicability.value,
					"style": s.style.value,
					"parts": [{"span": _span_dict(p.span), "snippet": p.snippet} for p in s.parts],
				}
				for s in self.suggestions
			],
		}


def _as_multispan(span: Span | MultiSpan) -> MultiSpan:
	if isinstance(span, MultiSpan):
		return span
	return MultiSpan.from_span(span)


__all__ = [
	"Applicability",
	"SuggestionStyle",
	"SpanLabel",
	"MultiSpan",
	"SubDiagnostic",
	"SubstitutionPart",
	"CodeSuggestion",
	"Diagnostic",
	"E_UNSATISFIED_BOUND",
	"E_UNBOXED_DYN_RETURN",
	"E_ARG_COUNT_MISMATCH",
	"E_CLOSURE_ARG_MISMATCH",
]
