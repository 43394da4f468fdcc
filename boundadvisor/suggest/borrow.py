# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference-shaped suggestions: borrow an unsized initializer, borrow an
argument to satisfy the original bound, drop redundant `&`s, or flip the
mutability of a borrow.
"""

from __future__ import annotations

import logging
from typing import Callable

from boundadvisor.core.diagnostics import Applicability, Diagnostic
from boundadvisor.core.types_core import RE_STATIC, TypeKind
from boundadvisor.errors import SnippetError
from boundadvisor.hir import nodes as H
from boundadvisor.suggest.context import AdvisorContext
from boundadvisor.traits.obligation import (
	CauseCode,
	ImplDerivedObligation,
	Obligation,
	ObligationCause,
	TraitPredicate,
	TraitRef,
	VariableType,
	mk_obligation_for_def_id,
)

logger = logging.getLogger(__name__)


def _leading_refs(snippet: str) -> tuple[int, bool]:
	"""Count leading `&`s (ignoring whitespace); flag a lifetime right after them."""
	chars = [c for c in snippet if not c.isspace()]
	count = 0
	for c in chars:
		if c != "&":
			break
		count += 1
	lifetime = count < len(chars) and chars[count] == "'"
	return count, lifetime


def _take_refs(count: int) -> Callable[[str], bool]:
	"""Predicate for `span_take_while` covering exactly `count` `&`s and whitespace."""
	seen = 0

	def _take(ch: str) -> bool:
		nonlocal seen
		if ch.isspace():
			return True
		if ch == "&" and seen < count:
			seen += 1
			return True
		return False

	return _take


def suggest_borrow_on_unsized_slice(ctx: AdvisorContext, code: CauseCode, diag: Diagnostic) -> None:
	"""`let x = s[..];` -> `let x = &s[..];`"""
	if not isinstance(code, VariableType):
		return
	parent = ctx.tree.find(ctx.tree.get_parent_node(code.node))
	if not isinstance(parent, H.HLocal) or not isinstance(parent.init, H.HIndex):
		return
	expr = parent.init
	try:
		snippet = ctx.source_map.span_to_snippet(expr.span)
	except SnippetError:
		return
	diag.span_suggestion(expr.span, "consider borrowing here", f"&{snippet}", Applicability.MACHINE_APPLICABLE)


def suggest_add_reference_to_arg(
	ctx: AdvisorContext,
	obligation: Obligation,
	diag: Diagnostic,
	trait_ref: TraitRef,
	points_at_arg: bool,
	has_custom_message: bool,
) -> bool:
	"""
	Suggest borrowing an argument when `&T` satisfies the bound the failing
	obligation was derived from.

	Returns True when the suggestion was made; the caller then stops trying
	other rules, since the original requirement now frames the diagnostic.
	"""
	if not points_at_arg:
		return False
	code = obligation.cause.code
	if not isinstance(code, ImplDerivedObligation):
		return False

	span = obligation.cause.span
	parent = code.derived.parent_trait_ref
	self_ty = trait_ref.self_ty
	found = ctx.ty_to_string(self_ty)
	new_self_ty = ctx.table.ensure_ref(self_ty, RE_STATIC)
	new_trait_ref = TraitRef(parent.def_id, new_self_ty, parent.args)
	new_obligation = Obligation(ObligationCause.dummy(), obligation.param_env, TraitPredicate(new_trait_ref))
	if not ctx.predicate_must_hold_modulo_regions(new_obligation):
		return False
	try:
		snippet = ctx.source_map.span_to_snippet(span)
	except SnippetError:
		return False

	parent_path = parent.print_only_trait_path(ctx.table)
	msg = f"the trait bound `{found}: {parent_path}` is not satisfied"
	if has_custom_message:
		diag.note(msg)
	else:
		diag.set_primary_message(msg)
	if snippet.startswith("&"):
		# already borrowed; the failure is further up the chain
		return False
	diag.span_label(span, f"expected an implementor of trait `{parent_path}`")
	diag.span_suggestion(span, "consider borrowing here", f"&{snippet}", Applicability.MAYBE_INCORRECT)
	return True


def suggest_remove_reference(
	ctx: AdvisorContext,
	obligation: Obligation,
	diag: Diagnostic,
	trait_ref: TraitRef,
) -> None:
	"""`for x in &v.iter()` -> `for x in v.iter()`, removing as few `&` as needed."""
	span = obligation.cause.span
	try:
		snippet = ctx.source_map.span_to_snippet(span)
	except SnippetError:
		return
	refs_number, lifetime = _leading_refs(snippet)
	if lifetime:
		# `&'a T` in a type argument, not a borrow expression
		return

	trait_type = trait_ref.self_ty
	for refs_remaining in range(refs_number):
		td = ctx.table.get(trait_type)
		if td.kind is not TypeKind.REF:
			break
		trait_type = td.param_types[0]
		new_obligation = mk_obligation_for_def_id(
			trait_ref.def_id,
			trait_type,
			ObligationCause.dummy(),
			obligation.param_env,
		)
		if ctx.predicate_may_hold(new_obligation):
			remove_refs = refs_remaining + 1
			logger.debug("suggest_remove_reference: `%s` holds after removing %d", ctx.ty_to_string(trait_type), remove_refs)
			sp = ctx.source_map.span_take_while(span, _take_refs(remove_refs))
			diag.span_suggestion_short(
				sp,
				f"consider removing {remove_refs} leading `&`-references",
				"",
				Applicability.MACHINE_APPLICABLE,
			)
			break


def suggest_change_mut(
	ctx: AdvisorContext,
	obligation: Obligation,
	diag: Diagnostic,
	trait_ref: TraitRef,
	points_at_arg: bool,
) -> None:
	"""Point out a bound that holds for the other mutability of a reference."""
	span = obligation.cause.span
	try:
		snippet = ctx.source_map.span_to_snippet(span)
	except SnippetError:
		return
	refs_number, lifetime = _leading_refs(snippet)
	if lifetime:
		return
	trait_ref = ctx.resolve_trait_ref(trait_ref)
	if ctx.trait_ref_has_infer_types(trait_ref):
		# reborrow checks on unresolved types are meaningless
		return

	td = ctx.table.get(trait_ref.self_ty)
	if td.kind is not TypeKind.REF:
		return
	inner = td.param_types[0]
	is_mut = bool(td.ref_mut)
	trait_type = ctx.table.new_ref(inner, not is_mut, td.region)
	new_obligation = mk_obligation_for_def_id(
		trait_ref.def_id,
		trait_type,
		ObligationCause.dummy(),
		obligation.param_env,
	)
	if not ctx.evaluate_obligation_no_overflow(new_obligation).must_apply_modulo_regions():
		return
	sp = ctx.source_map.span_take_while(span, _take_refs(1))
	if points_at_arg and not is_mut and refs_number > 0:
		diag.span_suggestion(sp, "consider changing this borrow's mutability", "&mut ", Applicability.MACHINE_APPLICABLE)
	else:
		diag.note(
			f"`{trait_ref.print_only_trait_path(ctx.table)}` is implemented for "
			f"`{ctx.ty_to_string(trait_type)}`, but not for `{ctx.ty_to_string(trait_ref.self_ty)}`"
		)


__all__ = [
	"suggest_borrow_on_unsized_slice",
	"suggest_add_reference_to_arg",
	"suggest_remove_reference",
	"suggest_change_mut",
]
