# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Structural type folding: substitution, inference resolution, region erasure."""
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Mapping, Optional

from boundadvisor.core.types_core import (
	RE_ERASED,
	Region,
	RegionKind,
	TypeDef,
	TypeId,
	TypeKind,
	TypeTable,
)

TypeOp = Callable[[TypeId, TypeDef], Optional[TypeId]]
RegionOp = Callable[[Region], Region]


def fold_type(
	table: TypeTable,
	ty: TypeId,
	*,
	ty_op: TypeOp | None = None,
	region_op: RegionOp | None = None,
) -> TypeId:
	"""
	Rebuild `ty` bottom-up.

	`ty_op` may replace a whole subtree (returning None keeps folding into it);
	`region_op` rewrites the region carried by references and trait objects.
	"""
	td = table.get(ty)
	if ty_op is not None:
		replaced = ty_op(ty, td)
		if replaced is not None:
			return replaced
	new_params = tuple(fold_type(table, p, ty_op=ty_op, region_op=region_op) for p in td.param_types)
	new_region = td.region
	if region_op is not None and td.region is not None:
		new_region = region_op(td.region)
	if new_params == td.param_types and new_region == td.region:
		return ty
	return table.intern(replace(td, param_types=new_params, region=new_region))


def apply_subst(table: TypeTable, ty: TypeId, subst: Mapping[str, TypeId]) -> TypeId:
	"""Replace type parameters by name."""
	if not subst:
		return ty

	def _op(_ty: TypeId, td: TypeDef) -> TypeId | None:
		if td.kind is TypeKind.PARAM:
			return subst.get(td.name)
		return None

	return fold_type(table, ty, ty_op=_op)


def resolve_vars(table: TypeTable, ty: TypeId, inferred: Mapping[int, TypeId]) -> TypeId:
	"""Substitute inference variables that have been resolved; leave the rest."""
	if not inferred:
		return ty
	resolving: set[int] = set()

	def _op(_ty: TypeId, td: TypeDef) -> TypeId | None:
		if td.kind is not TypeKind.INFER or td.index is None:
			return None
		target = inferred.get(td.index)
		if target is None or td.index in resolving:
			return None
		resolving.add(td.index)
		try:
			return fold_type(table, target, ty_op=_op)
		finally:
			resolving.discard(td.index)

	return fold_type(table, ty, ty_op=_op)


def erase_regions(table: TypeTable, ty: TypeId) -> TypeId:
	"""Erase every free region; regions bound by a binder are preserved."""

	def _region(r: Region) -> Region:
		if r.kind is RegionKind.LATE_BOUND:
			return r
		return RE_ERASED

	return fold_type(table, ty, region_op=_region)


def erase_late_bound_regions(table: TypeTable, ty: TypeId) -> TypeId:
	"""Erase regions bound by a binder (the suspension-frame placeholders)."""

	def _region(r: Region) -> Region:
		if r.kind is RegionKind.LATE_BOUND:
			return RE_ERASED
		return r

	return fold_type(table, ty, region_op=_region)


def freshen_params(table: TypeTable, ty: TypeId, fresh: Optional[Dict[TypeId, TypeId]] = None) -> TypeId:
	"""
	Replace parameters and projections by fresh inference variables.

	Pass the same `fresh` map to several calls so a parameter maps to one
	variable across all of them.
	"""
	if fresh is None:
		fresh = {}

	def _op(orig: TypeId, td: TypeDef) -> TypeId | None:
		if td.kind not in (TypeKind.PARAM, TypeKind.PROJECTION):
			return None
		if orig not in fresh:
			fresh[orig] = table.new_infer()
		return fresh[orig]

	return fold_type(table, ty, ty_op=_op)


__all__ = [
	"fold_type",
	"apply_subst",
	"resolve_vars",
	"erase_regions",
	"erase_late_bound_regions",
	"freshen_params",
]
