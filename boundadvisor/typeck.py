# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-function inference results, as handed over by the type checker.

These are plain side tables keyed by NodeId: the type inferred for each
expression, the implicit adjustments (auto-borrows, derefs) applied to it,
which expressions are method calls, and for suspension frames the types that
are live across a suspension point.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Set

from boundadvisor.core.def_id import DefId
from boundadvisor.core.span import Span
from boundadvisor.core.types_core import TypeId
from boundadvisor.hir.nodes import HExpr, NodeId


class AdjustKind(Enum):
	DEREF = auto()
	BORROW_REF = auto()  # `&`/`&mut` auto-ref through a region
	BORROW_RAW_PTR = auto()
	NEVER_TO_ANY = auto()
	POINTER = auto()


@dataclass(frozen=True)
class Adjustment:
	kind: AdjustKind
	target: Optional[TypeId] = None

	def is_region_borrow(self) -> bool:
		return self.kind is AdjustKind.BORROW_REF


@dataclass(frozen=True)
class GeneratorInteriorTypeCause:
	"""A value of type `ty` that is live across a suspension point."""

	ty: TypeId
	span: Span  # where the value is held
	scope_span: Optional[Span] = None  # scope whose end drops the value
	expr: Optional[NodeId] = None  # expression producing the value


@dataclass
class TypeckResults:
	local_id_root: Optional[DefId] = None  # the function these results belong to
	node_types: Dict[NodeId, TypeId] = field(default_factory=dict)
	adjustments: Dict[NodeId, List[Adjustment]] = field(default_factory=dict)
	method_calls: Set[NodeId] = field(default_factory=set)
	generator_interior_types: List[GeneratorInteriorTypeCause] = field(default_factory=list)

	def node_type_opt(self, node_id: NodeId) -> Optional[TypeId]:
		return self.node_types.get(node_id)

	def expr_adjustments(self, expr: HExpr) -> List[Adjustment]:
		return list(self.adjustments.get(expr.node_id, []))

	def is_method_call(self, expr: HExpr) -> bool:
		return expr.node_id in self.method_calls


__all__ = ["AdjustKind", "Adjustment", "GeneratorInteriorTypeCause", "TypeckResults"]
