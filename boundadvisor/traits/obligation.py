# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Obligations and the record of why they exist.

An obligation says "this type must implement this trait". Its cause code is
a closed catalog of frozen dataclasses; the two derived variants wrap a
`DerivedCause` that points back at the obligation they were forwarded from,
forming a strictly backward chain ending in a leaf code.

Everything here is immutable. The advisor reads obligations and builds new
ones (with a different self type or a dummy cause); it never edits them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional, Tuple, Union

from boundadvisor.core.def_id import DefId, def_path_str
from boundadvisor.core.span import DUMMY_SP, Span
from boundadvisor.core.types_core import Region, TypeId, TypeTable, type_to_str
from boundadvisor.hir.nodes import NodeId


@dataclass(frozen=True)
class TraitRef:
	"""`self_ty: Trait<args>`."""

	def_id: DefId
	self_ty: TypeId
	args: Tuple[TypeId, ...] = ()

	def with_self_ty(self, self_ty: TypeId) -> "TraitRef":
		return replace(self, self_ty=self_ty)

	def print_only_trait_path(self, table: TypeTable) -> str:
		path = def_path_str(self.def_id)
		if not self.args:
			return path
		return f"{path}<{', '.join(type_to_str(table, a) for a in self.args)}>"

	def to_predicate_str(self, table: TypeTable) -> str:
		return f"{type_to_str(table, self.self_ty)}: {self.print_only_trait_path(table)}"


@dataclass(frozen=True)
class ParamEnv:
	"""Bounds assumed to hold (where-clauses of the enclosing item)."""

	caller_bounds: Tuple[TraitRef, ...] = ()

	@classmethod
	def empty(cls) -> "ParamEnv":
		return cls()


# Cause codes

class CauseCode:
	"""Base of the cause-code catalog below."""


@dataclass(frozen=True)
class MiscObligation(CauseCode):
	pass


@dataclass(frozen=True)
class ExprAssignable(CauseCode):
	pass


@dataclass(frozen=True)
class MatchExpressionArm(CauseCode):
	arm_span: Span = DUMMY_SP


@dataclass(frozen=True)
class Pattern(CauseCode):
	span: Optional[Span] = None


@dataclass(frozen=True)
class IfExpression(CauseCode):
	then_span: Span = DUMMY_SP


@dataclass(frozen=True)
class IfExpressionWithNoElse(CauseCode):
	pass


@dataclass(frozen=True)
class MainFunctionType(CauseCode):
	pass


@dataclass(frozen=True)
class StartFunctionType(CauseCode):
	pass


@dataclass(frozen=True)
class IntrinsicType(CauseCode):
	pass


@dataclass(frozen=True)
class MethodReceiver(CauseCode):
	pass


@dataclass(frozen=True)
class ReturnNoExpression(CauseCode):
	pass


@dataclass(frozen=True)
class ReturnType(CauseCode):
	pass


@dataclass(frozen=True)
class ReturnValue(CauseCode):
	node: NodeId = 0


@dataclass(frozen=True)
class BlockTailExpression(CauseCode):
	node: NodeId = 0


@dataclass(frozen=True)
class SliceOrArrayElem(CauseCode):
	pass


@dataclass(frozen=True)
class TupleElem(CauseCode):
	pass


@dataclass(frozen=True)
class ProjectionWf(CauseCode):
	projection: str = ""


@dataclass(frozen=True)
class ReferenceOutlivesReferent(CauseCode):
	ref_ty: TypeId = 0


@dataclass(frozen=True)
class ObjectTypeBound(CauseCode):
	object_ty: TypeId = 0
	region: Optional[Region] = None


@dataclass(frozen=True)
class ItemObligation(CauseCode):
	item: DefId = field(default_factory=lambda: DefId("main", "?"))


@dataclass(frozen=True)
class BindingObligation(CauseCode):
	item: DefId = field(default_factory=lambda: DefId("main", "?"))
	span: Span = DUMMY_SP


@dataclass(frozen=True)
class ObjectCastObligation(CauseCode):
	object_ty: TypeId = 0


@dataclass(frozen=True)
class Coercion(CauseCode):
	source: TypeId = 0
	target: TypeId = 0


@dataclass(frozen=True)
class RepeatVec(CauseCode):
	suggest_const_in_array_repeat: bool = False


@dataclass(frozen=True)
class VariableType(CauseCode):
	node: NodeId = 0  # the binding pattern of the `let`


@dataclass(frozen=True)
class SizedArgumentType(CauseCode):
	pass


@dataclass(frozen=True)
class SizedReturnType(CauseCode):
	pass


@dataclass(frozen=True)
class SizedYieldType(CauseCode):
	pass


@dataclass(frozen=True)
class AssignmentLhsSized(CauseCode):
	pass


@dataclass(frozen=True)
class TupleInitializerSized(CauseCode):
	pass


@dataclass(frozen=True)
class StructInitializerSized(CauseCode):
	pass


class AdtKind(Enum):
	STRUCT = auto()
	UNION = auto()
	ENUM = auto()


@dataclass(frozen=True)
class FieldSized(CauseCode):
	adt_kind: AdtKind = AdtKind.STRUCT
	last: bool = False  # last field of a packed struct


@dataclass(frozen=True)
class ConstSized(CauseCode):
	pass


@dataclass(frozen=True)
class ConstPatternStructural(CauseCode):
	pass


@dataclass(frozen=True)
class SharedStatic(CauseCode):
	pass


@dataclass(frozen=True)
class CompareImplMethodObligation(CauseCode):
	item_name: str = ""
	impl_item: Optional[DefId] = None
	trait_item: Optional[DefId] = None


@dataclass(frozen=True)
class CompareImplTypeObligation(CauseCode):
	item_name: str = ""
	impl_item: Optional[DefId] = None
	trait_item: Optional[DefId] = None


@dataclass(frozen=True)
class TrivialBound(CauseCode):
	pass


@dataclass(frozen=True)
class AssocTypeBound(CauseCode):
	original: Span = DUMMY_SP
	impl_span: Optional[Span] = None
	bounds: Tuple[Span, ...] = ()


@dataclass(frozen=True)
class AsyncAwaitCapture(CauseCode):
	generator: Optional[DefId] = None
	await_span: Optional[Span] = None


@dataclass(frozen=True)
class DerivedCause:
	"""The obligation this one was forwarded from."""

	parent_trait_ref: TraitRef
	parent_code: CauseCode


@dataclass(frozen=True)
class BuiltinDerivedObligation(CauseCode):
	derived: DerivedCause


@dataclass(frozen=True)
class ImplDerivedObligation(CauseCode):
	derived: DerivedCause


DERIVED_CODES = (BuiltinDerivedObligation, ImplDerivedObligation)


def peel_derives(code: CauseCode) -> CauseCode:
	"""The leaf code at the root of a derived chain."""
	while isinstance(code, DERIVED_CODES):
		code = code.derived.parent_code
	return code


# Obligations

@dataclass(frozen=True)
class ObligationCause:
	span: Span
	body_id: NodeId = 0  # value expression of the body the obligation arose in
	code: CauseCode = field(default_factory=MiscObligation)

	@classmethod
	def dummy(cls) -> "ObligationCause":
		return cls(span=DUMMY_SP)

	@classmethod
	def misc(cls, span: Span, body_id: NodeId) -> "ObligationCause":
		return cls(span=span, body_id=body_id)


@dataclass(frozen=True)
class TraitPredicate:
	trait_ref: TraitRef


@dataclass(frozen=True)
class OtherPredicate:
	"""Any non-trait predicate (outlives, projection equality, ...), kept as text."""

	text: str


Predicate = Union[TraitPredicate, OtherPredicate]


def predicate_to_str(table: TypeTable, predicate: Predicate) -> str:
	if isinstance(predicate, TraitPredicate):
		return predicate.trait_ref.to_predicate_str(table)
	return predicate.text


@dataclass(frozen=True)
class Obligation:
	cause: ObligationCause
	param_env: ParamEnv
	predicate: Predicate
	recursion_depth: int = 0

	@property
	def trait_ref(self) -> Optional[TraitRef]:
		if isinstance(self.predicate, TraitPredicate):
			return self.predicate.trait_ref
		return None


def mk_obligation_for_def_id(
	trait_def_id: DefId,
	self_ty: TypeId,
	cause: ObligationCause,
	param_env: ParamEnv,
) -> Obligation:
	"""Obligation `self_ty: trait_def_id` (no further trait arguments)."""
	return Obligation(
		cause=cause,
		param_env=param_env,
		predicate=TraitPredicate(TraitRef(trait_def_id, self_ty)),
	)


__all__ = [
	"TraitRef",
	"ParamEnv",
	"CauseCode",
	"MiscObligation",
	"ExprAssignable",
	"MatchExpressionArm",
	"Pattern",
	"IfExpression",
	"IfExpressionWithNoElse",
	"MainFunctionType",
	"StartFunctionType",
	"IntrinsicType",
	"MethodReceiver",
	"ReturnNoExpression",
	"ReturnType",
	"ReturnValue",
	"BlockTailExpression",
	"SliceOrArrayElem",
	"TupleElem",
	"ProjectionWf",
	"ReferenceOutlivesReferent",
	"ObjectTypeBound",
	"ItemObligation",
	"BindingObligation",
	"ObjectCastObligation",
	"Coercion",
	"RepeatVec",
	"VariableType",
	"SizedArgumentType",
	"SizedReturnType",
	"SizedYieldType",
	"AssignmentLhsSized",
	"TupleInitializerSized",
	"StructInitializerSized",
	"AdtKind",
	"FieldSized",
	"ConstSized",
	"ConstPatternStructural",
	"SharedStatic",
	"CompareImplMethodObligation",
	"CompareImplTypeObligation",
	"TrivialBound",
	"AssocTypeBound",
	"AsyncAwaitCapture",
	"DerivedCause",
	"BuiltinDerivedObligation",
	"ImplDerivedObligation",
	"DERIVED_CODES",
	"peel_derives",
	"ObligationCause",
	"TraitPredicate",
	"OtherPredicate",
	"Predicate",
	"predicate_to_str",
	"Obligation",
	"mk_obligation_for_def_id",
]
