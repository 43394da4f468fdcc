# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from boundadvisor.core.def_id import DefId, def_path_str
from boundadvisor.core.diagnostics import Applicability, Diagnostic
from boundadvisor.core.span import Span
from boundadvisor.hir import nodes as H
from boundadvisor.suggest.context import AdvisorContext


def suggest_fully_qualified_path(
	ctx: AdvisorContext,
	diag: Diagnostic,
	def_id: DefId,
	span: Span,
	trait_def_id: DefId,
) -> None:
	"""`Trait::CONST` -> `<Type as Trait>::CONST`."""
	item = ctx.tree.opt_associated_item(def_id)
	if item is None or item.kind not in (H.AssocKind.CONST, H.AssocKind.TYPE):
		return
	diag.note(
		f"{item.kind.suggestion_descr()}s cannot be accessed directly on a `trait`, "
		"they can only be accessed through a specific `impl`"
	)
	diag.span_suggestion(
		span,
		"use the fully qualified path to an implementation",
		f"<Type as {def_path_str(trait_def_id)}>::{item.name}",
		Applicability.HAS_PLACEHOLDERS,
	)


__all__ = ["suggest_fully_qualified_path"]
