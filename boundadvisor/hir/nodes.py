# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntax-tree shapes the advisor pattern-matches on.

The checker owns the tree; the advisor only sees it through a `HirStore`
and keeps NodeIds, never node objects, across calls.

Guiding rules:
- Node classes derive from `HNode` and receive a NodeId when registered.
- Plain containers (`HBody`, `HFnSig`, `HFnDecl`, `HGenerics`, ...) are not
  nodes: they are transparent for parent links, so the parent of a body's
  value is the item owning the body.
- Every node carries the source span it was written at.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from lark import Tree

from boundadvisor.core.def_id import DefId
from boundadvisor.core.span import Span
from boundadvisor.core.type_syntax import parse_type_tree

# Stable identifiers for HIR nodes; 0 means "not registered yet".
NodeId = int


class HNode:
	"""Base class for all HIR nodes."""
	node_id: NodeId = 0


class HExpr(HNode):
	"""Base class for all HIR expressions."""
	pass


# Enums

class ItemKind(Enum):
	FN = auto()
	STRUCT = auto()
	ENUM = auto()
	UNION = auto()
	TRAIT = auto()
	IMPL = auto()
	TY_ALIAS = auto()
	TRAIT_ALIAS = auto()
	OPAQUE_TY = auto()


class AssocKind(Enum):
	METHOD = auto()
	CONST = auto()
	TYPE = auto()

	def suggestion_descr(self) -> str:
		return {AssocKind.METHOD: "method", AssocKind.CONST: "associated constant", AssocKind.TYPE: "associated type"}[
			self
		]


class GeneratorKind(Enum):
	"""Where a suspension frame's body comes from."""
	ASYNC_FN = auto()
	ASYNC_BLOCK = auto()
	ASYNC_CLOSURE = auto()
	GEN = auto()  # plain `yield`-based generator

	def is_async(self) -> bool:
		return self is not GeneratorKind.GEN


class HTyKind(Enum):
	PATH = auto()
	REF = auto()
	TUP = auto()
	SLICE = auto()
	TRAIT_OBJECT = auto()
	IMPL_TRAIT = auto()
	FN_PTR = auto()
	INFER = auto()
	NEVER = auto()


class PatKind(Enum):
	BINDING = auto()
	TUPLE = auto()
	WILD = auto()
	OTHER = auto()


class BindingAnnotation(Enum):
	UNANNOTATED = auto()
	MUT = auto()
	REF = auto()
	REF_MUT = auto()


class StmtKind(Enum):
	LOCAL = auto()
	ITEM = auto()
	EXPR = auto()  # expression without trailing semicolon
	SEMI = auto()  # expression statement ending in `;`


# Types as written

@dataclass
class HTy(HNode):
	kind: HTyKind
	span: Span = field(default_factory=Span)
	elems: List["HTy"] = field(default_factory=list)  # tuple elements

	@classmethod
	def from_source(cls, text: str, span: Span) -> "HTy":
		"""Classify annotation `text` (located at `span`) into a node."""
		return _hty_from_tree(parse_type_tree(text), span)


_TY_RULE_KINDS = {
	"path_type": HTyKind.PATH,
	"qualified_path": HTyKind.PATH,
	"ref_type": HTyKind.REF,
	"tuple_type": HTyKind.TUP,
	"slice_type": HTyKind.SLICE,
	"dyn_type": HTyKind.TRAIT_OBJECT,
	"impl_type": HTyKind.IMPL_TRAIT,
	"fn_ptr": HTyKind.FN_PTR,
	"infer": HTyKind.INFER,
	"never": HTyKind.NEVER,
}


def _hty_from_tree(tree: Tree, span: Span) -> HTy:
	while tree.data == "paren_type":
		tree = [c for c in tree.children if isinstance(c, Tree)][0]
	kind = _TY_RULE_KINDS[str(tree.data)]
	elems: List[HTy] = []
	if kind is HTyKind.TUP:
		for child in tree.children:
			if not isinstance(child, Tree):
				continue
			child_span = span
			if not child.meta.empty:
				child_span = span.with_lo(span.lo + child.meta.start_pos).with_hi(span.lo + child.meta.end_pos)
			elems.append(_hty_from_tree(child, child_span))
	return HTy(kind=kind, span=span, elems=elems)


# Patterns, params, locals

@dataclass
class HPat(HNode):
	kind: PatKind
	span: Span = field(default_factory=Span)
	name: Optional[str] = None
	annotation: BindingAnnotation = BindingAnnotation.UNANNOTATED
	subpattern: Optional["HPat"] = None  # `x @ <pat>`
	elems: List["HPat"] = field(default_factory=list)


@dataclass
class HParam(HNode):
	pat: HPat
	ty: Optional[HTy] = None
	span: Span = field(default_factory=Span)


@dataclass
class HLocal(HNode):
	"""`let <pat>[: <ty>] [= <init>];`"""
	pat: HPat
	init: Optional[HExpr] = None
	ty: Optional[HTy] = None
	span: Span = field(default_factory=Span)


# Blocks and statements

@dataclass
class HStmt(HNode):
	kind: StmtKind
	local: Optional[HLocal] = None
	expr: Optional[HExpr] = None
	item: Optional["HItem"] = None
	span: Span = field(default_factory=Span)


@dataclass
class HBlock(HNode):
	stmts: List[HStmt] = field(default_factory=list)
	expr: Optional[HExpr] = None  # trailing expression, if any
	span: Span = field(default_factory=Span)


# Expressions

@dataclass
class HExprBlock(HExpr):
	block: HBlock
	span: Span = field(default_factory=Span)


@dataclass
class HPath(HExpr):
	name: str
	span: Span = field(default_factory=Span)


@dataclass
class HLit(HExpr):
	text: str
	span: Span = field(default_factory=Span)


@dataclass
class HIndex(HExpr):
	base: HExpr
	index: HExpr
	span: Span = field(default_factory=Span)


@dataclass
class HAddrOf(HExpr):
	inner: HExpr
	is_mut: bool = False
	span: Span = field(default_factory=Span)


@dataclass
class HRet(HExpr):
	value: Optional[HExpr] = None
	span: Span = field(default_factory=Span)


@dataclass
class HCall(HExpr):
	func: HExpr
	args: List[HExpr] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass
class HMethodCall(HExpr):
	receiver: HExpr
	method: str
	args: List[HExpr] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass
class HAwait(HExpr):
	value: HExpr
	span: Span = field(default_factory=Span)


@dataclass
class HClosure(HExpr):
	"""
	A closure, async block or generator literal.

	`decl_span` covers the parameter list (`|a, b|` or `move |a|`), which is
	what argument mismatch diagnostics point at.
	"""
	decl: "HFnDecl"
	body: "HBody"
	def_id: Optional[DefId] = None
	decl_span: Span = field(default_factory=Span)
	span: Span = field(default_factory=Span)
	is_move: bool = False


# Containers (not nodes)

@dataclass
class HBody:
	params: List[HParam] = field(default_factory=list)
	value: Optional[HExpr] = None
	generator_kind: Optional[GeneratorKind] = None


@dataclass
class HFnDecl:
	inputs: List[HTy] = field(default_factory=list)
	output: Optional[HTy] = None  # None: default `()` return
	default_output_span: Span = field(default_factory=Span)  # where `-> T` would go

	def output_span(self) -> Span:
		if self.output is not None:
			return self.output.span
		return self.default_output_span


@dataclass
class HFnSig:
	decl: HFnDecl
	is_async: bool = False
	span: Span = field(default_factory=Span)


@dataclass
class HGenericParam:
	name: str  # `T`, or `impl Trait` for a synthetic argument-position parameter
	span: Span = field(default_factory=Span)
	bounds: List[str] = field(default_factory=list)


@dataclass
class HWherePredicate:
	text: str
	span: Span = field(default_factory=Span)


@dataclass
class HWhereClause:
	predicates: List[HWherePredicate] = field(default_factory=list)
	span: Span = field(default_factory=Span)  # empty place after the signature when absent

	def span_of_predicates(self) -> Optional[Span]:
		if not self.predicates:
			return None
		first = self.predicates[0].span
		return first.to(self.predicates[-1].span)

	def span_for_predicates_or_empty_place(self) -> Span:
		return self.span_of_predicates() or self.span


@dataclass
class HGenerics:
	params: List[HGenericParam] = field(default_factory=list)
	where_clause: HWhereClause = field(default_factory=HWhereClause)
	span: Span = field(default_factory=Span)

	def get_named(self, name: str) -> Optional[HGenericParam]:
		for param in self.params:
			if param.name == name:
				return param
		return None


# Items

@dataclass
class HTraitItem(HNode):
	name: str
	kind: AssocKind
	def_id: Optional[DefId] = None
	ident_span: Span = field(default_factory=Span)
	generics: HGenerics = field(default_factory=HGenerics)
	sig: Optional[HFnSig] = None
	body: Optional[HBody] = None  # default method body
	span: Span = field(default_factory=Span)


@dataclass
class HImplItem(HNode):
	name: str
	kind: AssocKind
	def_id: Optional[DefId] = None
	ident_span: Span = field(default_factory=Span)
	generics: HGenerics = field(default_factory=HGenerics)
	sig: Optional[HFnSig] = None
	body: Optional[HBody] = None
	span: Span = field(default_factory=Span)


@dataclass
class HCtor(HNode):
	"""Constructor of a tuple struct or tuple-like enum variant."""
	def_id: Optional[DefId] = None
	field_count: int = 0
	span: Span = field(default_factory=Span)


@dataclass
class HItem(HNode):
	kind: ItemKind
	name: str
	def_id: Optional[DefId] = None
	ident_span: Span = field(default_factory=Span)
	generics: HGenerics = field(default_factory=HGenerics)
	sig: Optional[HFnSig] = None
	body: Optional[HBody] = None
	items: List[HNode] = field(default_factory=list)  # trait/impl members, ctors
	span: Span = field(default_factory=Span)


@dataclass
class HCrate(HNode):
	items: List[HItem] = field(default_factory=list)
	span: Span = field(default_factory=Span)


ITEM_LIKE = (HItem, HTraitItem, HImplItem)


__all__ = [
	"NodeId",
	"HNode",
	"HExpr",
	"ItemKind",
	"AssocKind",
	"GeneratorKind",
	"HTyKind",
	"PatKind",
	"BindingAnnotation",
	"StmtKind",
	"HTy",
	"HPat",
	"HParam",
	"HLocal",
	"HStmt",
	"HBlock",
	"HExprBlock",
	"HPath",
	"HLit",
	"HIndex",
	"HAddrOf",
	"HRet",
	"HCall",
	"HMethodCall",
	"HAwait",
	"HClosure",
	"HBody",
	"HFnDecl",
	"HFnSig",
	"HGenericParam",
	"HWherePredicate",
	"HWhereClause",
	"HGenerics",
	"HTraitItem",
	"HImplItem",
	"HCtor",
	"HItem",
	"HCrate",
	"ITEM_LIKE",
]
