# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Cause-chain walker.

Explains a failing obligation by following its cause code back to the
user-written requirement. Each visited link becomes one `ExplanationStep`
holding the notes, helps and labels that link renders to (silent leaf
codes produce a step with no entries). The walk stops:

- at a leaf (non-derived) code;
- before a derived parent whose subject type was already explained, so a
  recursive obligation is reported once instead of forever;
- after `SessionConfig.recursion_limit` links, adding a help that suggests
  raising the limit.

Nothing here proposes edits; suggestions live in the rule modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Type

from boundadvisor.core.def_id import def_path_str
from boundadvisor.core.diagnostics import Diagnostic
from boundadvisor.core.span import DUMMY_SP, Span
from boundadvisor.core.types_core import TypeId
from boundadvisor.errors import internal_error
from boundadvisor.suggest.context import AdvisorContext
from boundadvisor.traits import obligation as O

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Entry:
	"""One rendered piece of explanation: a note, a help or a span label."""

	kind: str  # "note" | "help" | "label"
	message: str
	span: Optional[Span] = None


@dataclass
class ExplanationStep:
	code: O.CauseCode
	entries: List[Entry] = field(default_factory=list)


@dataclass
class ExplanationTrace:
	steps: List[ExplanationStep] = field(default_factory=list)
	recursive: bool = False  # stopped at a repeated subject type
	overflow_help: Optional[str] = None  # set when the walk hit the recursion limit

	def entries(self) -> List[Entry]:
		return [entry for step in self.steps for entry in step.entries]

	def apply(self, diag: Diagnostic) -> Diagnostic:
		for entry in self.entries():
			if entry.kind == "label" and entry.span is not None:
				diag.span_label(entry.span, entry.message)
			elif entry.kind == "help":
				diag.help(entry.message)
			else:
				diag.note(entry.message)
		if self.overflow_help is not None:
			diag.help(self.overflow_help)
		return diag


_SILENT_CODES = (
	O.ExprAssignable,
	O.MatchExpressionArm,
	O.Pattern,
	O.IfExpression,
	O.IfExpressionWithNoElse,
	O.MainFunctionType,
	O.StartFunctionType,
	O.IntrinsicType,
	O.MethodReceiver,
	O.ReturnNoExpression,
	O.MiscObligation,
	O.ReturnType,
	O.ReturnValue,
	O.BlockTailExpression,
)

_FIXED_NOTES: Dict[Type[O.CauseCode], str] = {
	O.SliceOrArrayElem: "slice and array elements must have `Sized` type",
	O.TupleElem: "only the last element of a tuple may have a dynamically sized type",
	O.SizedReturnType: "the return type of a function must have a statically known size",
	O.SizedYieldType: "the yield type of a generator must have a statically known size",
	O.AssignmentLhsSized: "the left-hand-side of an assignment must have a statically known size",
	O.TupleInitializerSized: "tuples must have a statically known size to be initialized",
	O.StructInitializerSized: "structs must have a statically known size to be initialized",
	O.ConstSized: "constant expressions must have a statically known size",
	O.ConstPatternStructural: "constants used for pattern-matching must derive `PartialEq` and `Eq`",
	O.SharedStatic: "shared static variables must have a type that implements `Sync`",
}

_FIELD_SIZED_NOTES = {
	(O.AdtKind.STRUCT, True): (
		"the last field of a packed struct may only have a dynamically sized type if it does not need drop to be run"
	),
	(O.AdtKind.STRUCT, False): "only the last field of a struct may have a dynamically sized type",
	(O.AdtKind.UNION, False): "no field of a union may have a dynamically sized type",
	(O.AdtKind.ENUM, False): "no field of an enum variant may have a dynamically sized type",
}

UNSIZED_LOCALS_HELP = "unsized locals are gated as an unstable feature"


def _note(message: str) -> Entry:
	return Entry("note", message)


def _help(message: str) -> Entry:
	return Entry("help", message)


def _label(span: Span, message: str) -> Entry:
	return Entry("label", message, span)


def _item_obligation(ctx: AdvisorContext, code: O.ItemObligation) -> List[Entry]:
	msg = f"required by `{def_path_str(code.item)}`"
	sp = ctx.tree.span_if_local(code.item)
	if sp is not None:
		return [_label(ctx.source_map.def_span(sp), msg)]
	return [_note(msg)]


def _binding_obligation(ctx: AdvisorContext, code: O.BindingObligation) -> List[Entry]:
	out: List[Entry] = []
	msg = f"required by this bound in `{def_path_str(code.item)}`"
	named = ctx.tree.opt_item_name(code.item)
	if named is not None:
		out.append(_label(named[1], ""))
	if code.span != DUMMY_SP:
		out.append(_label(code.span, msg))
	else:
		out.append(_note(msg))
	return out


def _unsized_local(ctx: AdvisorContext, what: str) -> List[Entry]:
	out = [_note(f"all {what} must have a statically known size")]
	if not ctx.session.unsized_locals:
		out.append(_help(UNSIZED_LOCALS_HELP))
	return out


def _repeat_vec(ctx: AdvisorContext, code: O.RepeatVec) -> List[Entry]:
	out = [_note("the `Copy` trait is required because the repeated element will be copied")]
	if code.suggest_const_in_array_repeat:
		out.append(
			_note(
				"this array initializer can be evaluated at compile-time, for more information, "
				"see issue https://github.com/rust-lang/rust/issues/49147"
			)
		)
		if ctx.session.nightly_build:
			out.append(_help("add `#![feature(const_in_array_repeat_expressions)]` to the crate attributes to enable"))
	return out


def _trivial_bound(ctx: AdvisorContext, _code: O.TrivialBound) -> List[Entry]:
	out = [_help("see issue #48214")]
	if ctx.session.nightly_build:
		out.append(_help("add `#![feature(trivial_bounds)]` to the crate attributes to enable"))
	return out


def _assoc_type_bound(_ctx: AdvisorContext, code: O.AssocTypeBound) -> List[Entry]:
	out = [_label(code.original, "associated type defined here")]
	if code.impl_span is not None:
		out.append(_label(code.impl_span, "in this `impl` item"))
	out.extend(_label(sp, "restricted in this bound") for sp in code.bounds)
	return out


def _async_await_capture(ctx: AdvisorContext, code: O.AsyncAwaitCapture) -> List[Entry]:
	where = f" in `{def_path_str(code.generator)}`" if code.generator is not None else ""
	out = [_note(f"required because the value is held across an await{where}")]
	if code.await_span is not None:
		out.append(_label(code.await_span, "await occurs here"))
	return out


def leaf_entries(ctx: AdvisorContext, predicate: str, code: O.CauseCode) -> List[Entry]:
	"""Rendering of a non-derived cause code."""
	render = ctx.ty_to_string
	if isinstance(code, _SILENT_CODES):
		return []
	fixed = _FIXED_NOTES.get(type(code))
	if fixed is not None:
		return [_note(fixed)]
	if isinstance(code, O.ProjectionWf):
		return [_note(f"required so that the projection `{code.projection}` is well-formed")]
	if isinstance(code, O.ReferenceOutlivesReferent):
		return [_note(f"required so that reference `{render(code.ref_ty)}` does not outlive its referent")]
	if isinstance(code, O.ObjectTypeBound):
		region = str(code.region) if code.region is not None else "'_"
		return [_note(f"required so that the lifetime bound of `{region}` for `{render(code.object_ty)}` is satisfied")]
	if isinstance(code, O.ItemObligation):
		return _item_obligation(ctx, code)
	if isinstance(code, O.BindingObligation):
		return _binding_obligation(ctx, code)
	if isinstance(code, O.ObjectCastObligation):
		return [_note(f"required for the cast to the object type `{render(code.object_ty)}`")]
	if isinstance(code, O.Coercion):
		return [_note(f"required by cast to type `{render(code.target)}`")]
	if isinstance(code, O.RepeatVec):
		return _repeat_vec(ctx, code)
	if isinstance(code, O.VariableType):
		return _unsized_local(ctx, "local variables")
	if isinstance(code, O.SizedArgumentType):
		return _unsized_local(ctx, "function arguments")
	if isinstance(code, O.FieldSized):
		last = code.last and code.adt_kind is O.AdtKind.STRUCT
		return [_note(_FIELD_SIZED_NOTES[(code.adt_kind, last)])]
	if isinstance(code, O.CompareImplMethodObligation):
		return [
			_note(
				f"the requirement `{predicate}` appears on the impl method "
				"but not on the corresponding trait method"
			)
		]
	if isinstance(code, O.CompareImplTypeObligation):
		return [
			_note(
				f"the requirement `{predicate}` appears on the associated impl type "
				"but not on the corresponding associated trait type"
			)
		]
	if isinstance(code, O.TrivialBound):
		return _trivial_bound(ctx, code)
	if isinstance(code, O.AssocTypeBound):
		return _assoc_type_bound(ctx, code)
	if isinstance(code, O.AsyncAwaitCapture):
		return _async_await_capture(ctx, code)
	raise internal_error(f"unhandled cause code {type(code).__name__}")


def is_recursive_obligation(ctx: AdvisorContext, obligated_types: List[TypeId], code: O.CauseCode) -> bool:
	"""Would following `code` explain a subject type we already explained?"""
	if isinstance(code, O.DERIVED_CODES):
		parent = ctx.resolve_trait_ref(code.derived.parent_trait_ref)
		return parent.self_ty in obligated_types
	return False


def suggest_new_overflow_limit(ctx: AdvisorContext) -> str:
	suggested = ctx.session.recursion_limit * 2
	return f'consider adding a `#![recursion_limit="{suggested}"]` attribute to your crate'


def explain_cause_code(
	ctx: AdvisorContext,
	predicate: str,
	code: O.CauseCode,
	obligated_types: Optional[List[TypeId]] = None,
) -> ExplanationTrace:
	"""Walk `code` and its parents; `predicate` is the requirement `code` explains."""
	trace = ExplanationTrace()
	seen: List[TypeId] = obligated_types if obligated_types is not None else []
	limit = ctx.session.recursion_limit
	current = code
	while True:
		if len(trace.steps) >= limit:
			logger.debug("explain: stopping after %d links (recursion limit)", len(trace.steps))
			trace.overflow_help = suggest_new_overflow_limit(ctx)
			return trace
		if not isinstance(current, O.DERIVED_CODES):
			trace.steps.append(ExplanationStep(current, leaf_entries(ctx, predicate, current)))
			return trace

		parent = ctx.resolve_trait_ref(current.derived.parent_trait_ref)
		ty = parent.self_ty
		if isinstance(current, O.BuiltinDerivedObligation):
			msg = f"required because it appears within the type `{ctx.ty_to_string(ty)}`"
		else:
			msg = (
				f"required because of the requirements on the impl of "
				f"`{parent.print_only_trait_path(ctx.table)}` for `{ctx.ty_to_string(ty)}`"
			)
		trace.steps.append(ExplanationStep(current, [_note(msg)]))
		seen.append(ty)
		predicate = parent.to_predicate_str(ctx.table)
		nxt = current.derived.parent_code
		if is_recursive_obligation(ctx, seen, nxt):
			logger.debug("explain: recursive obligation on `%s`, stopping", predicate)
			trace.recursive = True
			return trace
		current = nxt


def explain(ctx: AdvisorContext, obligation: O.Obligation) -> ExplanationTrace:
	"""Explain why `obligation` exists, one step per cause link."""
	predicate = O.predicate_to_str(ctx.table, obligation.predicate)
	return explain_cause_code(ctx, predicate, obligation.cause.code)


def note_obligation_cause_code(
	ctx: AdvisorContext,
	diag: Diagnostic,
	predicate: str,
	code: O.CauseCode,
	obligated_types: Optional[List[TypeId]] = None,
) -> ExplanationTrace:
	trace = explain_cause_code(ctx, predicate, code, obligated_types)
	trace.apply(diag)
	return trace


__all__ = [
	"Entry",
	"ExplanationStep",
	"ExplanationTrace",
	"leaf_entries",
	"is_recursive_obligation",
	"suggest_new_overflow_limit",
	"explain_cause_code",
	"explain",
	"note_obligation_cause_code",
	"UNSIZED_LOCALS_HELP",
]
