# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Interface to the checker's trait solver.

The advisor never decides satisfiability itself; every "would this hold?"
question goes through a `Solver`.
"""

from __future__ import annotations

from enum import IntEnum
from typing import List, Protocol

from boundadvisor.core.def_id import DefId
from boundadvisor.traits.obligation import Obligation


class EvaluationResult(IntEnum):
	"""Outcome of evaluating an obligation, ordered from best to worst."""

	OK = 0
	OK_MODULO_REGIONS = 1  # holds if lifetime constraints are ignored
	AMBIG = 2  # depends on inference variables not known yet
	UNKNOWN = 3  # hit a cycle; the answer depends on the enclosing goal
	RECURSIVE = 4
	ERR = 5

	def may_apply(self) -> bool:
		return self <= EvaluationResult.UNKNOWN

	def must_apply_modulo_regions(self) -> bool:
		return self <= EvaluationResult.OK_MODULO_REGIONS

	def must_apply_considering_regions(self) -> bool:
		return self is EvaluationResult.OK


class Solver(Protocol):
	def evaluate_obligation(self, obligation: Obligation) -> EvaluationResult:
		"""
		Evaluate `obligation` in its own parameter environment.

		May raise `EvaluationOverflow` when the recursion limit is reached.
		"""
		...

	def object_safety_violations(self, trait_def_id: DefId) -> List[str]:
		"""Reasons `dyn Trait` cannot exist; empty when the trait is object safe."""
		...


__all__ = ["EvaluationResult", "Solver"]
