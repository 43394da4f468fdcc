# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AdvisorError(Exception):
	"""
	A structured error raised by advisor collaborators.

	Most advisor entry points never let these escape: a rule that hits a
	`SnippetError` or an `EvaluationOverflow` simply declines. Only
	`InternalConsistencyError` is meant to reach the caller.
	"""

	reason_code: str
	message: str

	def __str__(self) -> str:
		return f"[{self.reason_code}] {self.message}"

	def to_dict(self) -> dict[str, Any]:
		return {"reason_code": self.reason_code, "message": self.message}


@dataclass(frozen=True)
class SnippetError(AdvisorError):
	"""Source text for a span is unavailable (dummy span, unknown file, out of range)."""

	file: str | None = None


@dataclass(frozen=True)
class EvaluationOverflow(AdvisorError):
	"""The solver hit its recursion limit while evaluating an obligation."""


@dataclass(frozen=True)
class InternalConsistencyError(AdvisorError):
	"""A caller broke a contract (e.g. passed a node that is not fn-like)."""


def snippet_error(message: str, *, file: str | None = None) -> SnippetError:
	return SnippetError(reason_code="E_SNIPPET_UNAVAILABLE", message=message, file=file)


def internal_error(message: str) -> InternalConsistencyError:
	return InternalConsistencyError(reason_code="E_INTERNAL", message=message)


__all__ = [
	"AdvisorError",
	"SnippetError",
	"EvaluationOverflow",
	"InternalConsistencyError",
	"snippet_error",
	"internal_error",
]
