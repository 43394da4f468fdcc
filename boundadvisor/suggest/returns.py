# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rules about a function's return: a stray semicolon before the closing brace,
a bare `dyn Trait` return type, and labels on every returned value.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from boundadvisor.core.diagnostics import E_UNBOXED_DYN_RETURN, Applicability, Diagnostic
from boundadvisor.core.span import Span
from boundadvisor.core.types_core import TypeId, TypeKind, is_unit
from boundadvisor.errors import SnippetError
from boundadvisor.hir import nodes as H
from boundadvisor.hir.visit import collect_returns
from boundadvisor.suggest.context import AdvisorContext
from boundadvisor.traits.obligation import (
	Obligation,
	ObligationCause,
	ParamEnv,
	SizedReturnType,
	TraitPredicate,
	TraitRef,
	peel_derives,
)
from boundadvisor.typeck import TypeckResults

logger = logging.getLogger(__name__)


def _enclosing_fn(ctx: AdvisorContext, obligation: Obligation) -> Optional[H.HItem]:
	"""The fn item whose body value is `obligation.cause.body_id`."""
	node = ctx.tree.find(ctx.tree.get_parent_node(obligation.cause.body_id))
	if isinstance(node, H.HItem) and node.kind is H.ItemKind.FN and node.sig is not None and node.body is not None:
		return node
	return None


def _tables(ctx: AdvisorContext) -> TypeckResults:
	if ctx.in_progress_tables is not None:
		return ctx.in_progress_tables
	return TypeckResults()


def suggest_semicolon_removal(
	ctx: AdvisorContext,
	obligation: Obligation,
	diag: Diagnostic,
	span: Span,
	trait_ref: TraitRef,
) -> None:
	"""`fn f() -> impl Tr { x; }`: point at the semicolon that makes the body `()`."""
	item = _enclosing_fn(ctx, obligation)
	if item is None:
		return
	value = item.body.value
	if not isinstance(value, H.HExprBlock):
		return
	block = value.block
	if not item.sig.decl.output_span().overlaps(span):
		return
	if block.expr is not None or not is_unit(ctx.table, trait_ref.self_ty):
		return
	if block.stmts:
		diag.span_label(ctx.source_map.end_point(block.stmts[-1].span), "consider removing this semicolon")


def _impl_trait_note(ctx: AdvisorContext) -> Optional[str]:
	url = ctx.session.impl_trait_docs
	return f"for information on `impl Trait`, see <{url}>" if url else None


def _trait_object_note(ctx: AdvisorContext) -> Optional[str]:
	url = ctx.session.trait_object_docs
	return f"for information on trait objects, see <{url}>" if url else None


def _returns_conform(
	ctx: AdvisorContext,
	ret_ty: H.HTy,
	tables: TypeckResults,
	returned: List[TypeId],
) -> bool:
	declared = tables.node_type_opt(ret_ty.node_id)
	if declared is None:
		return True
	td = ctx.table.get(declared)
	if td.kind is not TypeKind.DYNAMIC:
		return True
	cause = ObligationCause.misc(ret_ty.span, ret_ty.node_id)
	for ty in returned:
		for bound in td.bounds:
			obligation = Obligation(cause, ParamEnv.empty(), TraitPredicate(TraitRef(bound, ty)))
			if not ctx.predicate_may_hold(obligation):
				return False
	return True


def suggest_impl_trait(
	ctx: AdvisorContext,
	diag: Diagnostic,
	span: Span,
	obligation: Obligation,
	trait_ref: TraitRef,
) -> bool:
	"""
	Replace a bare `-> dyn Trait` with `-> impl Trait` or `-> Box<dyn Trait>`.

	On success the diagnostic is reframed as an unboxed trait object return
	and True is returned; the caller emits it as is.
	"""
	if not isinstance(peel_derives(obligation.cause.code), SizedReturnType):
		return False
	item = _enclosing_fn(ctx, obligation)
	if item is None:
		return False
	trait_ref = ctx.resolve_trait_ref(trait_ref)
	td = ctx.table.get(trait_ref.self_ty)
	if td.kind is not TypeKind.DYNAMIC:
		# only `dyn Trait`; `-> str` and friends are left alone
		return False
	# no principal trait: nothing to be unsafe about
	is_object_safe = not td.bounds or not ctx.solver.object_safety_violations(td.bounds[0])

	ret_ty = item.sig.decl.output
	if ret_ty is None:
		return False

	tables = ctx.in_progress_tables
	if tables is None:
		return False
	returns = collect_returns(item.body)
	ret_types: List[TypeId] = []
	for expr in returns:
		ty = tables.node_type_opt(expr.node_id)
		if ty is None:
			logger.debug("suggest_impl_trait: return at %r has no type", expr.span)
			return False
		ret_types.append(ty)
	if not ret_types:
		return False
	last_ty = ret_types[-1]
	all_same = all(ty == ret_types[0] for ty in ret_types)

	if not ret_ty.span.overlaps(span) or ret_ty.kind is not H.HTyKind.TRAIT_OBJECT:
		return False
	if not _returns_conform(ctx, ret_ty, tables, ret_types):
		# a type mismatch, not a sizing problem
		return False
	try:
		snippet = ctx.source_map.span_to_snippet(ret_ty.span)
		boxed: List[Tuple[Span, str]] = [
			(expr.span, f"Box::new({ctx.source_map.span_to_snippet(expr.span)})") for expr in returns
		]
	except SnippetError:
		return False

	diag.set_code(E_UNBOXED_DYN_RETURN)
	diag.set_primary_message("return type cannot have an unboxed trait object")
	diag.children.clear()

	words = snippet.split()
	has_dyn = bool(words) and words[0] == "dyn"
	trait_obj = snippet[4:] if has_dyn else snippet
	impl_trait_msg = _impl_trait_note(ctx)
	if all_same:
		diag.span_suggestion(
			ret_ty.span,
			f"return `impl {trait_obj}` instead, as all return paths are of type "
			f"`{ctx.ty_to_string(last_ty)}`, which implements `{trait_obj}`",
			f"impl {trait_obj}",
			Applicability.MACHINE_APPLICABLE,
		)
		if impl_trait_msg is not None:
			diag.note(impl_trait_msg)
		return True

	if is_object_safe:
		boxed.append((ret_ty.span, f"Box<{'' if has_dyn else 'dyn '}{snippet}>"))
		diag.multipart_suggestion("return a boxed trait object instead", boxed, Applicability.MAYBE_INCORRECT)
	else:
		diag.note(f"if trait `{trait_obj}` was object safe, you could return a trait object")
	trait_obj_msg = _trait_object_note(ctx)
	if trait_obj_msg is not None:
		diag.note(trait_obj_msg)
	diag.note(f"if all the returned values were of the same type you could use `impl {trait_obj}` as the return type")
	if impl_trait_msg is not None:
		diag.note(impl_trait_msg)
	diag.note("you can create a new `enum` with a variant for each returned type")
	return True


def point_at_returns_when_relevant(ctx: AdvisorContext, diag: Diagnostic, obligation: Obligation) -> None:
	"""Label each returned value with its type when the return type must be sized."""
	if not isinstance(peel_derives(obligation.cause.code), SizedReturnType):
		return
	item = _enclosing_fn(ctx, obligation)
	if item is None:
		return
	tables = _tables(ctx)
	for expr in collect_returns(item.body):
		ty = tables.node_type_opt(expr.node_id)
		if ty is not None:
			rendered = ctx.ty_to_string(ctx.resolve_vars_if_possible(ty))
			diag.span_label(expr.span, f"this returned value is of type `{rendered}`")


__all__ = ["suggest_semicolon_removal", "suggest_impl_trait", "point_at_returns_when_relevant"]
