# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Restrict a generic parameter (or an associated type) with the missing bound.

Starting from the body the obligation arose in, walk outwards through the
enclosing items until one of them declares the parameter, then add the bound
where it reads most naturally: inline on the parameter, at the end of an
existing `where` clause, or in a new `where` clause.
"""

from __future__ import annotations

import logging

from boundadvisor.core.diagnostics import Applicability, Diagnostic
from boundadvisor.core.source_map import SourceMap
from boundadvisor.core.span import Span
from boundadvisor.core.types_core import TypeKind
from boundadvisor.hir import nodes as H
from boundadvisor.suggest.context import AdvisorContext
from boundadvisor.traits.obligation import TraitRef

logger = logging.getLogger(__name__)

_PROJECTION_ITEM_KINDS = (H.ItemKind.FN, H.ItemKind.TRAIT, H.ItemKind.IMPL)


def _from_macro(span: Span) -> bool:
	return span.from_expansion() or span.desugaring is not None


def _suggest_restriction(ctx: AdvisorContext, generics: H.HGenerics, what: str, diag: Diagnostic, trait_ref: TraitRef) -> None:
	where_clause = generics.where_clause
	span = where_clause.span_for_predicates_or_empty_place()
	if _from_macro(span):
		return
	sep = "," if where_clause.predicates else " where"
	diag.span_suggestion(
		span.shrink_to_hi(),
		f"consider further restricting {what}",
		f"{sep} {trait_ref.to_predicate_str(ctx.table)} ",
		Applicability.MACHINE_APPLICABLE,
	)


def _is_method(node: H.HNode) -> bool:
	return isinstance(node, (H.HTraitItem, H.HImplItem)) and node.kind is H.AssocKind.METHOD


def suggest_restricting_param_bound(
	ctx: AdvisorContext,
	diag: Diagnostic,
	trait_ref: TraitRef,
	body_id: H.NodeId,
) -> None:
	"""Suggest adding `trait_ref` as a bound where its self type is declared."""
	table = ctx.table
	self_ty = trait_ref.self_ty
	kind = table.get(self_ty).kind
	if kind is TypeKind.PARAM:
		param_ty, projection = True, False
	elif kind is TypeKind.PROJECTION:
		param_ty, projection = False, True
	else:
		return

	tree = ctx.tree
	node_id = body_id
	while True:
		node = tree.find(node_id)
		if node is None:
			return
		if isinstance(node, H.HCrate):
			return
		if isinstance(node, H.HTraitItem) and node.kind is H.AssocKind.METHOD and param_ty and self_ty == table.self_param:
			# restricting `Self` for this one method
			_suggest_restriction(ctx, node.generics, "`Self`", diag, trait_ref)
			return
		if projection and (
			(isinstance(node, H.HItem) and node.kind in _PROJECTION_ITEM_KINDS) or _is_method(node)
		):
			_suggest_restriction(ctx, node.generics, "the associated type", diag, trait_ref)
			return
		if param_ty and isinstance(node, H.ITEM_LIKE):
			param_name = ctx.ty_to_string(self_ty)
			constraint = trait_ref.print_only_trait_path(table)
			logger.debug("suggest_restricting_param_bound: trying `%s: %s` on `%s`", param_name, constraint, node.name)
			if suggest_constraining_type_param(
				node.generics,
				diag,
				param_name,
				constraint,
				ctx.source_map,
				node.span,
			):
				return
		node_id = tree.get_parent_item(node_id)


def suggest_constraining_type_param(
	generics: H.HGenerics,
	diag: Diagnostic,
	param_name: str,
	constraint: str,
	source_map: SourceMap,
	span: Span,
) -> bool:
	"""
	Suggest `param_name: constraint` on the parameter declared in `generics`.

	`span` is the span of the declaring item. Returns False when `generics`
	does not declare `param_name`.
	"""
	param = generics.get_named(param_name)
	if param is None:
		return False
	if _from_macro(param.span):
		return True
	restrict_msg = "consider further restricting this bound"
	where_clause = generics.where_clause
	if param_name.startswith("impl "):
		# `x: impl Tr` -> `x: impl Tr + C`
		diag.span_suggestion(param.span, restrict_msg, f"{param_name} + {constraint}", Applicability.MACHINE_APPLICABLE)
	elif not where_clause.predicates and not param.bounds:
		# `<T>` -> `<T: C>`
		diag.span_suggestion(
			param.span,
			"consider restricting this bound",
			f"{param_name}: {constraint}",
			Applicability.MACHINE_APPLICABLE,
		)
	elif where_clause.predicates:
		# `where T: D` -> `where T: D, T: C`
		diag.span_suggestion(
			where_clause.span_of_predicates().shrink_to_hi(),
			f"consider further restricting type parameter `{param_name}`",
			f", {param_name}: {constraint}",
			Applicability.MACHINE_APPLICABLE,
		)
	else:
		# `<T: D>` -> `<T: C + D>`, only when the colon is certainly in range
		sp = param.span.with_hi(span.hi)
		through = source_map.span_through_char(sp, ":")
		if sp != param.span and sp != through:
			diag.span_suggestion(through, restrict_msg, f"{param_name}: {constraint} + ", Applicability.MACHINE_APPLICABLE)
		else:
			diag.span_label(param.span, f"consider adding a `where {param_name}: {constraint}` bound")
	return True


__all__ = ["suggest_restricting_param_bound", "suggest_constraining_type_param"]
