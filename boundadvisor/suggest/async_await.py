# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Capture-across-suspension analysis.

When a future fails an auto-trait bound because something it holds across an
`await` (or `yield`) does not implement the trait, the obligation reaches the
advisor as a chain of derived obligations running through suspension frames
(generators) and their witnesses:

  witness(B) -> generator(B) -> GenFuture(B) -> impl Future(B)
    -> witness(A) -> generator(A) -> ... -> `T: Send` bound on the callee

The first generator found walking from the failing obligation is the one that
captured the offending value; the last one is closest to the user's call and
names the function in the message. The offending value is found by comparing
the frame's interior types with the failing subject type after erasing
regions (interior types carry synthesized bound regions for the frame).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from boundadvisor.core.def_id import DefId
from boundadvisor.core.diagnostics import Diagnostic, MultiSpan
from boundadvisor.core.span import Span
from boundadvisor.core.type_subst import erase_late_bound_regions, erase_regions
from boundadvisor.core.types_core import TypeId, TypeKind
from boundadvisor.errors import SnippetError
from boundadvisor.hir import nodes as H
from boundadvisor.hir.map import HirStore
from boundadvisor.suggest.cause_notes import note_obligation_cause_code
from boundadvisor.suggest.context import AdvisorContext
from boundadvisor.traits.obligation import (
	DERIVED_CODES,
	CauseCode,
	Obligation,
	TraitRef,
	predicate_to_str,
)
from boundadvisor.typeck import TypeckResults

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptureExplanation:
	"""A value held across a suspension point that blocks the obligation."""

	target_span: Span  # where the captured value lives
	snippet: str  # its source text
	scope_span: Optional[Span]  # the scope whose end drops it
	expr: Optional[H.NodeId]  # expression producing it, if known
	first_generator: DefId  # frame that captured the value
	last_generator: Optional[DefId]  # frame closest to the user's call
	trait_ref: TraitRef  # requirement the value fails
	target_ty: TypeId
	tables: TypeckResults
	next_code: CauseCode  # the cause left once the frames are peeled
	is_send: bool = False
	is_sync: bool = False


def _tables_for_generator(ctx: AdvisorContext, generator: DefId) -> TypeckResults:
	# The function being checked has no finished results yet: use its
	# in-progress tables, otherwise ask for the finished ones.
	root = ctx.tree.closure_base_def_id(generator)
	in_progress = ctx.in_progress_tables
	logger.debug(
		"maybe_note_obligation_cause_for_async_await: generator_did=%r generator_did_root=%r "
		"in_progress_tables.local_id_root=%r",
		generator,
		root,
		in_progress.local_id_root if in_progress is not None else None,
	)
	if in_progress is not None and in_progress.local_id_root == root:
		return in_progress
	return ctx.typeck_tables_of(generator)


def find_capture_across_suspension(ctx: AdvisorContext, obligation: Obligation) -> Optional[CaptureExplanation]:
	"""Find the captured value that makes a suspension frame fail `obligation`."""
	table = ctx.table
	logger.debug(
		"maybe_note_obligation_cause_for_async_await: obligation.predicate=%r obligation.cause.span=%r",
		obligation.predicate,
		obligation.cause.span,
	)
	trait_ref = obligation.trait_ref
	target_ty = trait_ref.self_ty if trait_ref is not None else None
	generator: Optional[DefId] = None
	last_generator: Optional[DefId] = None

	code = obligation.cause.code
	while isinstance(code, DERIVED_CODES):
		parent = code.derived.parent_trait_ref
		td = table.get(parent.self_ty)
		logger.debug(
			"maybe_note_obligation_cause_for_async_await: parent_trait_ref=%r self_ty.kind=%s",
			parent,
			td.kind.name,
		)
		if td.kind is TypeKind.GENERATOR:
			if generator is None:
				generator = td.def_id
			last_generator = td.def_id
		elif td.kind is TypeKind.GENERATOR_WITNESS:
			pass
		elif generator is None:
			trait_ref = parent
			target_ty = parent.self_ty
		code = code.derived.parent_code

	logger.debug(
		"maybe_note_obligation_cause_for_async_await: generator=%r trait_ref=%r target_ty=%r",
		generator,
		trait_ref,
		target_ty,
	)
	if generator is None or trait_ref is None or target_ty is None:
		return None
	# frames from other crates have no tables to look at
	if ctx.tree.as_local_node_id(generator) is None:
		return None

	tables = _tables_for_generator(ctx, generator)
	target_ty_erased = erase_regions(table, target_ty)
	found = None
	for cause in tables.generator_interior_types:
		ty_erased = erase_regions(table, erase_late_bound_regions(table, cause.ty))
		eq = ty_erased == target_ty_erased
		logger.debug(
			"maybe_note_obligation_cause_for_async_await: ty_erased=%s target_ty_erased=%s eq=%s",
			ctx.ty_to_string(ty_erased),
			ctx.ty_to_string(target_ty_erased),
			eq,
		)
		if eq:
			found = cause
			break
	if found is None:
		return None
	try:
		snippet = ctx.source_map.span_to_snippet(found.span)
	except SnippetError:
		return None

	return CaptureExplanation(
		target_span=found.span,
		snippet=snippet,
		scope_span=found.scope_span,
		expr=found.expr,
		first_generator=generator,
		last_generator=last_generator,
		trait_ref=trait_ref,
		target_ty=target_ty,
		tables=tables,
		next_code=code,
		is_send=ctx.is_diagnostic_item("send_trait", trait_ref.def_id),
		is_sync=ctx.is_diagnostic_item("sync_trait", trait_ref.def_id),
	)


def _is_async(tree: HirStore, generator: DefId) -> bool:
	parent = tree.parent_def(generator)
	if parent is not None and tree.asyncness(parent):
		return True
	node_id = tree.as_local_node_id(generator)
	body = tree.maybe_body_owned_by(node_id) if node_id is not None else None
	return body is not None and body.generator_kind is not None and body.generator_kind.is_async()


def note_obligation_cause_for_async_await(
	ctx: AdvisorContext,
	diag: Diagnostic,
	capture: CaptureExplanation,
	obligation: Obligation,
) -> None:
	"""Add the "value is used across an await" note for `capture` to `diag`."""
	tree = ctx.tree
	source_map = ctx.source_map
	await_or_yield = "await" if _is_async(tree, capture.first_generator) else "yield"

	if capture.is_send or capture.is_sync:
		trait_name, trait_verb = ("`Send`", "sent") if capture.is_send else ("`Sync`", "shared")
		diag.clear_code()
		diag.set_primary_message(f"future cannot be {trait_verb} between threads safely")

		original_span = diag.primary_span()
		if original_span is not None:
			name = None
			if capture.last_generator is not None:
				parent = tree.parent_def(capture.last_generator)
				parent_id = tree.as_local_node_id(parent) if parent is not None else None
				if parent_id is not None:
					name = tree.opt_name(parent_id)
			if name is not None:
				message = f"future returned by `{name}` is not {trait_name}"
			else:
				message = f"future is not {trait_name}"
			span = MultiSpan.from_span(original_span)
			span.push_span_label(original_span, message)
			diag.set_span(span)
		trait_explanation = f"is not {trait_name}"
	else:
		trait_explanation = f"does not implement `{capture.trait_ref.print_only_trait_path(ctx.table)}`"

	# The last interior type is held at the suspension point itself.
	await_span = capture.tables.generator_interior_types[-1].span
	span = MultiSpan.from_span(await_span)
	span.push_span_label(await_span, f"{await_or_yield} occurs here, with `{capture.snippet}` maybe used later")
	span.push_span_label(capture.target_span, f"has type `{ctx.ty_to_string(capture.target_ty)}`")
	if capture.scope_span is not None:
		span.push_span_label(source_map.end_point(capture.scope_span), f"`{capture.snippet}` is later dropped here")
	diag.span_note(span, f"future {trait_explanation} as this value is used across an {await_or_yield}")

	if capture.expr is not None:
		expr = tree.expect_expr(capture.expr)
		is_ref = any(adj.is_region_borrow() for adj in capture.tables.expr_adjustments(expr))
		parent_id = tree.get_parent_node(capture.expr)
		parent = tree.find(parent_id)
		if isinstance(parent, H.HExpr):
			method_span = tree.span(parent_id)
			if capture.tables.is_method_call(parent) and is_ref:
				diag.span_help(
					method_span,
					"consider moving this method call into a `let` binding to create a shorter lived borrow",
				)

	logger.debug("note_obligation_cause_for_async_await: next_code=%r", capture.next_code)
	note_obligation_cause_code(ctx, diag, predicate_to_str(ctx.table, obligation.predicate), capture.next_code)


def maybe_note_obligation_cause_for_async_await(
	ctx: AdvisorContext,
	diag: Diagnostic,
	obligation: Obligation,
) -> bool:
	"""Add the async-specific explanation when it applies; report whether it did."""
	capture = find_capture_across_suspension(ctx, obligation)
	if capture is None:
		return False
	note_obligation_cause_for_async_await(ctx, diag, capture, obligation)
	return True


__all__ = [
	"CaptureExplanation",
	"find_capture_across_suspension",
	"note_obligation_cause_for_async_await",
	"maybe_note_obligation_cause_for_async_await",
]
