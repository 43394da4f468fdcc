# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Interned type core shared by the advisor and its collaborators.

TypeIds are opaque ints indexing into a TypeTable. Every TypeDef is interned,
so two TypeIds are equal exactly when the types are structurally equal; the
capture analyzer relies on this after erasing regions.

Callable kinds (CLOSURE, FNDEF, FNPTR) store `[*inputs, output]` in
`param_types`, the same layout the checker uses for function types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .def_id import DefId, def_path_str


TypeId = int  # opaque handle into the TypeTable


class TypeKind(Enum):
	"""Kinds of types the advisor can reason about."""

	SCALAR = auto()
	STR = auto()
	NEVER = auto()
	TUPLE = auto()
	ADT = auto()
	REF = auto()
	SLICE = auto()
	PARAM = auto()
	PROJECTION = auto()
	DYNAMIC = auto()
	OPAQUE = auto()
	CLOSURE = auto()
	FNDEF = auto()
	FNPTR = auto()
	GENERATOR = auto()
	GENERATOR_WITNESS = auto()
	INFER = auto()
	ERROR = auto()


class RegionKind(Enum):
	STATIC = auto()
	NAMED = auto()
	LATE_BOUND = auto()  # bound by a binder, e.g. inside a generator witness
	INFER = auto()
	ERASED = auto()


@dataclass(frozen=True)
class Region:
	kind: RegionKind
	name: Optional[str] = None
	index: int = 0

	def __str__(self) -> str:
		if self.kind is RegionKind.STATIC:
			return "'static"
		if self.kind is RegionKind.NAMED and self.name:
			return self.name if self.name.startswith("'") else f"'{self.name}"
		return "'_"


RE_STATIC = Region(RegionKind.STATIC)
RE_ERASED = Region(RegionKind.ERASED)


@dataclass(frozen=True)
class TypeDef:
	"""Definition of a type stored in the TypeTable."""

	kind: TypeKind
	name: str
	param_types: Tuple[TypeId, ...] = ()
	ref_mut: bool | None = None  # only meaningful for TypeKind.REF
	region: Region | None = None  # REF and DYNAMIC
	def_id: DefId | None = None
	bounds: Tuple[DefId, ...] = ()  # DYNAMIC / OPAQUE trait list, principal first
	index: int | None = None  # PARAM index / INFER variable


class TypeTable:
	"""Owns TypeIds; interning keeps structurally equal types on one id."""

	def __init__(self) -> None:
		self._defs: Dict[TypeId, TypeDef] = {}
		self._interned: Dict[TypeDef, TypeId] = {}
		self._next_id: TypeId = 1  # reserve 0 for "invalid"
		self._next_infer = 0

	def intern(self, td: TypeDef) -> TypeId:
		existing = self._interned.get(td)
		if existing is not None:
			return existing
		ty_id = self._next_id
		self._next_id += 1
		self._defs[ty_id] = td
		self._interned[td] = ty_id
		return ty_id

	def get(self, ty: TypeId) -> TypeDef:
		"""Fetch the TypeDef for a given TypeId."""
		return self._defs[ty]

	def new_scalar(self, name: str) -> TypeId:
		"""Register a scalar type (e.g., i32, bool) and return its TypeId."""
		return self.intern(TypeDef(TypeKind.SCALAR, name))

	def unit(self) -> TypeId:
		return self.new_tuple([])

	def new_str(self) -> TypeId:
		return self.intern(TypeDef(TypeKind.STR, "str"))

	def new_never(self) -> TypeId:
		return self.intern(TypeDef(TypeKind.NEVER, "!"))

	def new_error(self) -> TypeId:
		return self.intern(TypeDef(TypeKind.ERROR, "{error}"))

	def new_tuple(self, elems: Sequence[TypeId]) -> TypeId:
		return self.intern(TypeDef(TypeKind.TUPLE, "", tuple(elems)))

	def new_adt(self, def_id: DefId, args: Sequence[TypeId] = ()) -> TypeId:
		return self.intern(TypeDef(TypeKind.ADT, def_id.name, tuple(args), def_id=def_id))

	def new_ref(self, inner: TypeId, is_mut: bool, region: Region | None = None) -> TypeId:
		"""Register a reference type to `inner`."""
		name = "RefMut" if is_mut else "Ref"
		return self.intern(TypeDef(TypeKind.REF, name, (inner,), ref_mut=is_mut, region=region))

	def ensure_ref(self, inner: TypeId, region: Region | None = None) -> TypeId:
		"""Shared reference to `inner`."""
		return self.new_ref(inner, is_mut=False, region=region)

	def new_slice(self, elem: TypeId) -> TypeId:
		return self.intern(TypeDef(TypeKind.SLICE, "[]", (elem,)))

	def new_param(self, name: str, index: int = 0) -> TypeId:
		return self.intern(TypeDef(TypeKind.PARAM, name, index=index))

	@property
	def self_param(self) -> TypeId:
		"""The `Self` parameter of a trait declaration."""
		return self.new_param("Self", 0)

	def new_projection(self, trait: DefId, item: str, self_ty: TypeId) -> TypeId:
		return self.intern(TypeDef(TypeKind.PROJECTION, item, (self_ty,), def_id=trait))

	def new_dynamic(self, bounds: Sequence[DefId], region: Region | None = None) -> TypeId:
		return self.intern(TypeDef(TypeKind.DYNAMIC, "dyn", bounds=tuple(bounds), region=region))

	def new_opaque(self, def_id: DefId, bounds: Sequence[DefId]) -> TypeId:
		return self.intern(TypeDef(TypeKind.OPAQUE, "impl", def_id=def_id, bounds=tuple(bounds)))

	def new_closure(self, def_id: DefId, inputs: Sequence[TypeId], output: TypeId) -> TypeId:
		return self.intern(TypeDef(TypeKind.CLOSURE, def_id.name, (*inputs, output), def_id=def_id))

	def new_fndef(self, def_id: DefId, inputs: Sequence[TypeId], output: TypeId) -> TypeId:
		return self.intern(TypeDef(TypeKind.FNDEF, def_id.name, (*inputs, output), def_id=def_id))

	def new_fnptr(self, inputs: Sequence[TypeId], output: TypeId) -> TypeId:
		return self.intern(TypeDef(TypeKind.FNPTR, "fn", (*inputs, output)))

	def new_generator(self, def_id: DefId, witness: TypeId) -> TypeId:
		return self.intern(TypeDef(TypeKind.GENERATOR, def_id.name, (witness,), def_id=def_id))

	def new_generator_witness(self, interior: Iterable[TypeId]) -> TypeId:
		return self.intern(TypeDef(TypeKind.GENERATOR_WITNESS, "witness", tuple(interior)))

	def new_infer(self, index: int | None = None) -> TypeId:
		"""A fresh (or the given) inference variable."""
		if index is None:
			index = self._next_infer
		self._next_infer = max(self._next_infer, index + 1)
		return self.intern(TypeDef(TypeKind.INFER, "_", index=index))


def fn_inputs(table: TypeTable, ty: TypeId) -> List[TypeId]:
	"""Inputs of a CLOSURE/FNDEF/FNPTR type."""
	td = table.get(ty)
	return list(td.param_types[:-1])


def fn_output(table: TypeTable, ty: TypeId) -> TypeId:
	"""Declared output of a CLOSURE/FNDEF/FNPTR type."""
	return table.get(ty).param_types[-1]


def is_closure(table: TypeTable, ty: TypeId) -> bool:
	return table.get(ty).kind is TypeKind.CLOSURE


def has_infer_types(table: TypeTable, ty: TypeId) -> bool:
	td = table.get(ty)
	if td.kind is TypeKind.INFER:
		return True
	return any(has_infer_types(table, p) for p in td.param_types)


def _join(table: TypeTable, tys: Iterable[TypeId]) -> str:
	return ", ".join(type_to_str(table, t) for t in tys)


def _bounds_str(bounds: Sequence[DefId]) -> str:
	return " + ".join(b.name for b in bounds)


def type_to_str(table: TypeTable, ty: TypeId) -> str:
	"""Render a type the way it is spelled in source."""
	td = table.get(ty)
	kind = td.kind
	if kind in (TypeKind.SCALAR, TypeKind.STR, TypeKind.NEVER, TypeKind.PARAM, TypeKind.ERROR):
		return td.name
	if kind is TypeKind.INFER:
		return "_"
	if kind is TypeKind.TUPLE:
		if len(td.param_types) == 1:
			return f"({type_to_str(table, td.param_types[0])},)"
		return f"({_join(table, td.param_types)})"
	if kind is TypeKind.ADT:
		if not td.param_types:
			return td.name
		return f"{td.name}<{_join(table, td.param_types)}>"
	if kind is TypeKind.REF:
		region = ""
		if td.region is not None and td.region.kind in (RegionKind.STATIC, RegionKind.NAMED):
			region = f"{td.region} "
		mut = "mut " if td.ref_mut else ""
		return f"&{region}{mut}{type_to_str(table, td.param_types[0])}"
	if kind is TypeKind.SLICE:
		return f"[{type_to_str(table, td.param_types[0])}]"
	if kind is TypeKind.PROJECTION:
		trait = td.def_id.name if td.def_id is not None else "?"
		return f"<{type_to_str(table, td.param_types[0])} as {trait}>::{td.name}"
	if kind is TypeKind.DYNAMIC:
		return f"dyn {_bounds_str(td.bounds)}"
	if kind is TypeKind.OPAQUE:
		return f"impl {_bounds_str(td.bounds)}"
	if kind in (TypeKind.FNDEF, TypeKind.FNPTR):
		out = td.param_types[-1]
		ret = "" if is_unit(table, out) else f" -> {type_to_str(table, out)}"
		sig = f"fn({_join(table, td.param_types[:-1])}){ret}"
		if kind is TypeKind.FNDEF and td.def_id is not None:
			return f"{sig} {{{def_path_str(td.def_id)}}}"
		return sig
	if kind is TypeKind.CLOSURE:
		return f"[closure@{def_path_str(td.def_id)}]" if td.def_id is not None else "[closure]"
	if kind is TypeKind.GENERATOR:
		return f"[generator@{def_path_str(td.def_id)}]" if td.def_id is not None else "[generator]"
	if kind is TypeKind.GENERATOR_WITNESS:
		return f"[witness({_join(table, td.param_types)})]"
	return td.name


def is_unit(table: TypeTable, ty: TypeId) -> bool:
	td = table.get(ty)
	return td.kind is TypeKind.TUPLE and not td.param_types


__all__ = [
	"TypeId",
	"TypeKind",
	"TypeDef",
	"TypeTable",
	"Region",
	"RegionKind",
	"RE_STATIC",
	"RE_ERASED",
	"fn_inputs",
	"fn_output",
	"is_closure",
	"is_unit",
	"has_infer_types",
	"type_to_str",
]
