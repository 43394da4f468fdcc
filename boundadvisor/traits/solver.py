# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
In-memory reference solver.

`ImplWorld` answers `T: Trait` from a list of impls. An impl's target type may
mention type parameters; those act as pattern variables bound during
matching, and the impl's `requires` are then proved recursively for the bound
types. Caller bounds from the obligation's `ParamEnv` count as proved,
`dyn Trait` implements its own traits, and an optional `Sized` trait is
answered structurally.

This is deliberately small: enough to drive the advisor's "would this
variant hold?" checks, not a real trait solver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Mapping, Optional, Set, Tuple

from boundadvisor.core.def_id import DefId
from boundadvisor.core.type_subst import apply_subst
from boundadvisor.core.types_core import RegionKind, TypeId, TypeKind, TypeTable
from boundadvisor.errors import EvaluationOverflow
from boundadvisor.traits.evaluate import EvaluationResult
from boundadvisor.traits.obligation import Obligation, ParamEnv, TraitPredicate


class ProofStatus(Enum):
	PROVED = auto()
	PROVED_MODULO_REGIONS = auto()
	REFUTED = auto()
	UNKNOWN = auto()
	AMBIGUOUS = auto()


_STATUS_TO_RESULT = {
	ProofStatus.PROVED: EvaluationResult.OK,
	ProofStatus.PROVED_MODULO_REGIONS: EvaluationResult.OK_MODULO_REGIONS,
	ProofStatus.AMBIGUOUS: EvaluationResult.AMBIG,
	ProofStatus.UNKNOWN: EvaluationResult.UNKNOWN,
	ProofStatus.REFUTED: EvaluationResult.ERR,
}


@dataclass(frozen=True)
class ImplDef:
	"""`impl<params> trait for target where requires`."""

	trait: DefId
	target: TypeId
	requires: Tuple[Tuple[DefId, TypeId], ...] = ()


class _Match(Enum):
	YES = auto()
	NO = auto()
	AMBIGUOUS = auto()


@dataclass
class _Unifier:
	table: TypeTable
	bindings: Dict[str, TypeId] = field(default_factory=dict)
	regions_ignored: bool = False

	def unify(self, pattern: TypeId, actual: TypeId) -> _Match:
		if pattern == actual:
			return _Match.YES
		pdef = self.table.get(pattern)
		adef = self.table.get(actual)
		if pdef.kind is TypeKind.PARAM:
			bound = self.bindings.get(pdef.name)
			if bound is None:
				self.bindings[pdef.name] = actual
				return _Match.YES
			if bound == actual:
				return _Match.YES
			return _Match.AMBIGUOUS if adef.kind is TypeKind.INFER else _Match.NO
		if adef.kind is TypeKind.INFER:
			return _Match.AMBIGUOUS
		if pdef.kind is not adef.kind:
			return _Match.NO
		if pdef.kind is TypeKind.REF:
			if pdef.ref_mut != adef.ref_mut:
				return _Match.NO
			if pdef.region is not None and pdef.region.kind is RegionKind.STATIC and pdef.region != adef.region:
				self.regions_ignored = True
		if pdef.kind is TypeKind.DYNAMIC and pdef.bounds != adef.bounds:
			return _Match.NO
		if pdef.kind in (TypeKind.ADT, TypeKind.CLOSURE, TypeKind.FNDEF, TypeKind.GENERATOR, TypeKind.OPAQUE, TypeKind.PROJECTION):
			if pdef.def_id != adef.def_id:
				return _Match.NO
		if pdef.kind is TypeKind.PROJECTION and pdef.name != adef.name:
			return _Match.NO
		if pdef.kind is TypeKind.SCALAR and pdef.name != adef.name:
			return _Match.NO
		if len(pdef.param_types) != len(adef.param_types):
			return _Match.NO
		result = _Match.YES
		for p, a in zip(pdef.param_types, adef.param_types):
			sub = self.unify(p, a)
			if sub is _Match.NO:
				return _Match.NO
			if sub is _Match.AMBIGUOUS:
				result = _Match.AMBIGUOUS
		return result


class ImplWorld:
	"""Impl table implementing the `Solver` protocol."""

	def __init__(
		self,
		table: TypeTable,
		*,
		sized_trait: Optional[DefId] = None,
		recursion_limit: int = 64,
	) -> None:
		self.table = table
		self.sized_trait = sized_trait
		self.recursion_limit = recursion_limit
		self.impls: List[ImplDef] = []
		self.non_object_safe: Dict[DefId, List[str]] = {}

	def add_impl(
		self,
		trait: DefId,
		target: TypeId,
		requires: Tuple[Tuple[DefId, TypeId], ...] = (),
	) -> ImplDef:
		impl = ImplDef(trait=trait, target=target, requires=tuple(requires))
		self.impls.append(impl)
		return impl

	def mark_not_object_safe(self, trait: DefId, reason: str) -> None:
		self.non_object_safe.setdefault(trait, []).append(reason)

	# Solver protocol

	def object_safety_violations(self, trait_def_id: DefId) -> List[str]:
		return list(self.non_object_safe.get(trait_def_id, []))

	def evaluate_obligation(self, obligation: Obligation) -> EvaluationResult:
		predicate = obligation.predicate
		if not isinstance(predicate, TraitPredicate):
			# outlives/projection predicates are not modelled
			return EvaluationResult.AMBIG
		trait_ref = predicate.trait_ref
		status = self.prove(
			trait_ref.def_id,
			trait_ref.self_ty,
			obligation.param_env,
			depth=obligation.recursion_depth,
			in_progress=set(),
		)
		return _STATUS_TO_RESULT[status]

	# Proof search

	def prove(
		self,
		trait: DefId,
		ty: TypeId,
		env: ParamEnv,
		*,
		depth: int,
		in_progress: Set[Tuple[DefId, TypeId]],
	) -> ProofStatus:
		if depth > self.recursion_limit:
			raise EvaluationOverflow(
				reason_code="E_OVERFLOW",
				message=f"overflow evaluating the requirement for `{trait.name}`",
			)
		td = self.table.get(ty)
		if td.kind is TypeKind.INFER:
			return ProofStatus.AMBIGUOUS
		if td.kind is TypeKind.ERROR:
			return ProofStatus.PROVED
		for bound in env.caller_bounds:
			if bound.def_id == trait and bound.self_ty == ty:
				return ProofStatus.PROVED
		if trait == self.sized_trait:
			if td.kind in (TypeKind.STR, TypeKind.SLICE, TypeKind.DYNAMIC):
				return ProofStatus.REFUTED
			return ProofStatus.PROVED
		if td.kind is TypeKind.DYNAMIC and trait in td.bounds:
			return ProofStatus.PROVED
		if td.kind is TypeKind.OPAQUE and trait in td.bounds:
			return ProofStatus.PROVED

		key = (trait, ty)
		if key in in_progress:
			return ProofStatus.UNKNOWN
		in_progress.add(key)
		try:
			return self._prove_from_impls(trait, ty, env, depth=depth, in_progress=in_progress)
		finally:
			in_progress.remove(key)

	def _prove_from_impls(
		self,
		trait: DefId,
		ty: TypeId,
		env: ParamEnv,
		*,
		depth: int,
		in_progress: Set[Tuple[DefId, TypeId]],
	) -> ProofStatus:
		applicable: List[ProofStatus] = []
		ambiguous = False
		unknown = False
		for impl in self.impls:
			if impl.trait != trait:
				continue
			unifier = _Unifier(self.table)
			matched = unifier.unify(impl.target, ty)
			if matched is _Match.NO:
				continue
			if matched is _Match.AMBIGUOUS:
				ambiguous = True
				continue
			req_status = self._prove_requires(impl, unifier.bindings, env, depth=depth, in_progress=in_progress)
			if req_status is ProofStatus.REFUTED:
				continue
			if req_status is ProofStatus.AMBIGUOUS:
				ambiguous = True
				continue
			if req_status is ProofStatus.UNKNOWN:
				unknown = True
				continue
			if unifier.regions_ignored:
				req_status = ProofStatus.PROVED_MODULO_REGIONS
			applicable.append(req_status)

		if len(applicable) == 1:
			return applicable[0]
		if len(applicable) > 1:
			return ProofStatus.AMBIGUOUS
		if ambiguous:
			return ProofStatus.AMBIGUOUS
		if unknown:
			return ProofStatus.UNKNOWN
		return ProofStatus.REFUTED

	def _prove_requires(
		self,
		impl: ImplDef,
		bindings: Mapping[str, TypeId],
		env: ParamEnv,
		*,
		depth: int,
		in_progress: Set[Tuple[DefId, TypeId]],
	) -> ProofStatus:
		status = ProofStatus.PROVED
		for req_trait, req_ty in impl.requires:
			subject = apply_subst(self.table, req_ty, bindings)
			res = self.prove(req_trait, subject, env, depth=depth + 1, in_progress=in_progress)
			if res is ProofStatus.REFUTED:
				return res
			if res in (ProofStatus.AMBIGUOUS, ProofStatus.UNKNOWN):
				status = res
			elif res is ProofStatus.PROVED_MODULO_REGIONS and status is ProofStatus.PROVED:
				status = res
		return status


__all__ = ["ImplWorld", "ImplDef", "ProofStatus"]
