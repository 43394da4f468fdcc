# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fixed-order pipeline turning one unsatisfied bound into a diagnostic.

One `Diagnostic` is threaded through every rule. The order is part of the
contract: later, more specific rules may overwrite framing set by earlier
ones, and two rules end the pipeline when they fire.

  1. base diagnostic: "the trait bound `T: Tr` is not satisfied"
  2. add-reference-to-argument        (fired: explain causes, stop)
  3. primary label: "the trait `Tr` is not implemented for `T`"
  4. borrow-unsized-slice
  5. call-the-callable
  6. remove-redundant-references
  7. remove-trailing-semicolon
  8. convert-dynamic-return-type      (fired: stop, it owns the framing)
  9. restrict-generic-bound           (no inference variables, bound could apply)
 10. change-reference-mutability
 11. cause explanation                (capture analyzer first, else the walker)
 12. point-at-returns
"""

from __future__ import annotations

import logging
from typing import Optional

from boundadvisor.core.diagnostics import E_UNSATISFIED_BOUND, Diagnostic
from boundadvisor.suggest.async_await import maybe_note_obligation_cause_for_async_await
from boundadvisor.suggest.borrow import (
	suggest_add_reference_to_arg,
	suggest_borrow_on_unsized_slice,
	suggest_change_mut,
	suggest_remove_reference,
)
from boundadvisor.suggest.cause_notes import ExplanationTrace, note_obligation_cause_code
from boundadvisor.suggest.context import AdvisorContext
from boundadvisor.suggest.fn_call import suggest_fn_call
from boundadvisor.suggest.restrict_bound import suggest_restricting_param_bound
from boundadvisor.suggest.returns import (
	point_at_returns_when_relevant,
	suggest_impl_trait,
	suggest_semicolon_removal,
)
from boundadvisor.traits.obligation import Obligation, predicate_to_str

logger = logging.getLogger(__name__)


def note_obligation_cause(ctx: AdvisorContext, diag: Diagnostic, obligation: Obligation) -> Optional[ExplanationTrace]:
	"""
	Explain why `obligation` exists.

	The capture analyzer gets the first chance; when it has nothing to say the
	plain cause-chain walker runs. Returns the walker's trace, if it ran.
	"""
	if maybe_note_obligation_cause_for_async_await(ctx, diag, obligation):
		return None
	predicate = predicate_to_str(ctx.table, obligation.predicate)
	return note_obligation_cause_code(ctx, diag, predicate, obligation.cause.code)


def report_unsatisfied_bound(
	ctx: AdvisorContext,
	obligation: Obligation,
	*,
	points_at_arg: bool = False,
	custom_message: Optional[str] = None,
) -> Diagnostic:
	"""
	Build the diagnostic for a failed `obligation`.

	`points_at_arg` says the cause span is exactly an argument expression,
	which unlocks edits at that span. `custom_message` replaces the default
	primary message (as declared by the trait's author).
	"""
	span = obligation.cause.span
	if obligation.trait_ref is None:
		text = predicate_to_str(ctx.table, obligation.predicate)
		diag = Diagnostic.error(span, custom_message or f"the requirement `{text}` is not satisfied", code=E_UNSATISFIED_BOUND)
		note_obligation_cause(ctx, diag, obligation)
		return diag

	trait_ref = ctx.resolve_trait_ref(obligation.trait_ref)
	trait_path = trait_ref.print_only_trait_path(ctx.table)
	self_ty_str = ctx.ty_to_string(trait_ref.self_ty)
	message = custom_message or f"the trait bound `{trait_ref.to_predicate_str(ctx.table)}` is not satisfied"
	diag = Diagnostic.error(span, message, code=E_UNSATISFIED_BOUND)
	logger.debug("report_unsatisfied_bound: %s (points_at_arg=%s)", message, points_at_arg)

	if suggest_add_reference_to_arg(ctx, obligation, diag, trait_ref, points_at_arg, custom_message is not None):
		note_obligation_cause(ctx, diag, obligation)
		return diag

	diag.span_label(span, f"the trait `{trait_path}` is not implemented for `{self_ty_str}`")

	suggest_borrow_on_unsized_slice(ctx, obligation.cause.code, diag)
	suggest_fn_call(ctx, obligation, diag, trait_ref, points_at_arg)
	suggest_remove_reference(ctx, obligation, diag, trait_ref)
	suggest_semicolon_removal(ctx, obligation, diag, span, trait_ref)
	if suggest_impl_trait(ctx, diag, span, obligation, trait_ref):
		return diag

	if not ctx.trait_ref_has_infer_types(trait_ref) and ctx.predicate_can_apply(obligation.param_env, trait_ref):
		suggest_restricting_param_bound(ctx, diag, trait_ref, obligation.cause.body_id)
	suggest_change_mut(ctx, obligation, diag, trait_ref, points_at_arg)

	note_obligation_cause(ctx, diag, obligation)
	point_at_returns_when_relevant(ctx, diag, obligation)
	return diag


__all__ = ["report_unsatisfied_bound", "note_obligation_cause"]
