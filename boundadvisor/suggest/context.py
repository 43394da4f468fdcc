# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Read-only context for one advisor invocation.

Everything the rules consult is reachable from here and passed explicitly:
the type table, the syntax-tree store, source text, the solver, session
configuration and the inference results of the function being checked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from boundadvisor.config import SessionConfig
from boundadvisor.core.def_id import DefId
from boundadvisor.core.source_map import SourceMap
from boundadvisor.core.type_subst import freshen_params, resolve_vars
from boundadvisor.core.types_core import TypeId, TypeTable, has_infer_types, type_to_str
from boundadvisor.errors import EvaluationOverflow
from boundadvisor.hir.map import HirStore
from boundadvisor.traits.evaluate import EvaluationResult, Solver
from boundadvisor.traits.obligation import (
	Obligation,
	ObligationCause,
	ParamEnv,
	TraitPredicate,
	TraitRef,
)
from boundadvisor.typeck import TypeckResults

logger = logging.getLogger(__name__)


@dataclass
class AdvisorContext:
	table: TypeTable
	tree: HirStore
	source_map: SourceMap
	solver: Solver
	session: SessionConfig = field(default_factory=SessionConfig)
	in_progress_tables: Optional[TypeckResults] = None  # the function being checked right now
	typeck_tables: Mapping[DefId, TypeckResults] = field(default_factory=dict)  # finished functions
	inferred: Mapping[int, TypeId] = field(default_factory=dict)  # resolved inference variables

	# Types

	def resolve_vars_if_possible(self, ty: TypeId) -> TypeId:
		return resolve_vars(self.table, ty, self.inferred)

	def resolve_trait_ref(self, trait_ref: TraitRef) -> TraitRef:
		return TraitRef(
			def_id=trait_ref.def_id,
			self_ty=self.resolve_vars_if_possible(trait_ref.self_ty),
			args=tuple(self.resolve_vars_if_possible(a) for a in trait_ref.args),
		)

	def trait_ref_has_infer_types(self, trait_ref: TraitRef) -> bool:
		return any(has_infer_types(self.table, t) for t in (trait_ref.self_ty, *trait_ref.args))

	def ty_to_string(self, ty: TypeId) -> str:
		return type_to_str(self.table, ty)

	def typeck_tables_of(self, def_id: DefId) -> TypeckResults:
		"""Finished results for the function owning `def_id` (empty when unknown)."""
		root = self.tree.closure_base_def_id(def_id)
		tables = self.typeck_tables.get(root)
		if tables is None:
			return TypeckResults(local_id_root=root)
		return tables

	# Solver

	def evaluate_obligation(self, obligation: Obligation) -> Optional[EvaluationResult]:
		"""Evaluate `obligation`; None when the solver overflowed."""
		try:
			return self.solver.evaluate_obligation(obligation)
		except EvaluationOverflow as exc:
			logger.debug("evaluate_obligation: overflow on %r: %s", obligation.predicate, exc)
			return None

	def evaluate_obligation_no_overflow(self, obligation: Obligation) -> EvaluationResult:
		result = self.evaluate_obligation(obligation)
		if result is None:
			return EvaluationResult.ERR
		return result

	def predicate_may_hold(self, obligation: Obligation) -> bool:
		return self.evaluate_obligation_no_overflow(obligation).may_apply()

	def predicate_must_hold_modulo_regions(self, obligation: Obligation) -> bool:
		return self.evaluate_obligation_no_overflow(obligation).must_apply_modulo_regions()

	def freshen_trait_ref(self, trait_ref: TraitRef) -> TraitRef:
		"""Each type parameter of `trait_ref` becomes one inference variable."""
		fresh: Dict[TypeId, TypeId] = {}
		return TraitRef(
			def_id=trait_ref.def_id,
			self_ty=freshen_params(self.table, trait_ref.self_ty, fresh),
			args=tuple(freshen_params(self.table, a, fresh) for a in trait_ref.args),
		)

	def predicate_can_apply(self, param_env: ParamEnv, trait_ref: TraitRef) -> bool:
		"""Could `trait_ref` hold for some instantiation of its type parameters?"""
		cleaned = self.freshen_trait_ref(trait_ref)
		obligation = Obligation(ObligationCause.dummy(), param_env, TraitPredicate(cleaned))
		return self.predicate_may_hold(obligation)

	# Session

	def is_diagnostic_item(self, name: str, def_id: DefId) -> bool:
		return self.session.is_diagnostic_item(name, def_id)


__all__ = ["AdvisorContext"]
