# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Suggest calling a closure or function passed where its result was wanted.

`bar(foo)` fails `foo: Tr`, but `foo()` would produce a value implementing
`Tr`: point at the callable and suggest `foo(_, _)` with one placeholder per
parameter.
"""

from __future__ import annotations

import logging
from typing import Optional

from boundadvisor.core.def_id import DefId
from boundadvisor.core.diagnostics import Applicability, Diagnostic
from boundadvisor.core.types_core import TypeKind, fn_output
from boundadvisor.hir import nodes as H
from boundadvisor.suggest.context import AdvisorContext
from boundadvisor.traits.evaluate import EvaluationResult
from boundadvisor.traits.obligation import Obligation, TraitRef, mk_obligation_for_def_id

logger = logging.getLogger(__name__)

_CALL_WOULD_HOLD = (EvaluationResult.OK, EvaluationResult.OK_MODULO_REGIONS, EvaluationResult.AMBIG)


def _binding_name(pat: H.HPat) -> Optional[str]:
	if pat.kind is H.PatKind.BINDING and pat.annotation is H.BindingAnnotation.UNANNOTATED and pat.subpattern is None:
		return pat.name
	return None


def get_closure_name(ctx: AdvisorContext, def_id: DefId, diag: Diagnostic, msg: str) -> Optional[str]:
	"""
	Name of the local a closure is bound to (`let f = || ..;`).

	Reassignments are not tracked. When the closure is bound through a
	pattern other than a plain name, `msg` is added as a note instead.
	"""
	tree = ctx.tree
	node_id = tree.as_local_node_id(def_id)
	if node_id is None:
		return None
	parent = tree.find(tree.get_parent_node(node_id))
	if isinstance(parent, H.HStmt) and parent.kind is H.StmtKind.LOCAL and parent.local is not None:
		local = parent.local
	elif isinstance(parent, H.HLocal):
		local = parent
	else:
		return None
	name = _binding_name(local.pat)
	if name is None:
		diag.note(msg)
	return name


def suggest_fn_call(
	ctx: AdvisorContext,
	obligation: Obligation,
	diag: Diagnostic,
	trait_ref: TraitRef,
	points_at_arg: bool,
) -> None:
	table = ctx.table
	td = table.get(trait_ref.self_ty)
	if td.kind is TypeKind.CLOSURE:
		callable_kind = "closure"
	elif td.kind is TypeKind.FNDEF:
		callable_kind = "function"
	else:
		return
	def_id = td.def_id
	if def_id is None:
		return
	output_ty = fn_output(table, trait_ref.self_ty)
	msg = f"use parentheses to call the {callable_kind}"

	new_obligation = mk_obligation_for_def_id(trait_ref.def_id, output_ty, obligation.cause, obligation.param_env)
	result = ctx.evaluate_obligation(new_obligation)
	logger.debug("suggest_fn_call: `%s` on the output gives %r", trait_ref.print_only_trait_path(table), result)
	if result not in _CALL_WOULD_HOLD:
		return

	node = ctx.tree.get_if_local(def_id)
	if isinstance(node, H.HClosure):
		diag.span_label(node.decl_span, "consider calling this closure")
		name = get_closure_name(ctx, def_id, diag, msg)
		if name is None:
			return
		args = ", ".join("_" for _ in node.decl.inputs)
		snippet = f"{name}({args})"
	elif isinstance(node, H.HItem) and node.kind is H.ItemKind.FN:
		diag.span_label(node.ident_span, "consider calling this function")
		params = node.body.params if node.body is not None else []
		args = ", ".join("_" for _ in params)
		snippet = f"{node.name}({args})"
	else:
		return

	if points_at_arg:
		# the cause span is the argument expression itself
		diag.span_suggestion(obligation.cause.span, msg, snippet, Applicability.HAS_PLACEHOLDERS)
	else:
		diag.help(f"{msg}: `{snippet}`")


__all__ = ["get_closure_name", "suggest_fn_call"]
