# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Argument-count and argument-shape mismatches for closures and functions.

Arguments are described as `Arg(name, ty)` or `TupleArg(span, fields)`, with
`_` standing in for unknown names and types. Comparing an expected list with
a found one explains mismatches such as a closure taking two arguments where
one 2-tuple is passed, and suggests the matching parameter list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from boundadvisor.core.diagnostics import (
	E_ARG_COUNT_MISMATCH,
	E_CLOSURE_ARG_MISMATCH,
	Applicability,
	Diagnostic,
)
from boundadvisor.core.span import Span
from boundadvisor.core.types_core import TypeId, TypeKind, TypeTable, is_closure, type_to_str
from boundadvisor.errors import SnippetError, internal_error
from boundadvisor.hir import nodes as H
from boundadvisor.suggest.context import AdvisorContext
from boundadvisor.traits.obligation import TraitRef


@dataclass(frozen=True)
class Arg:
	name: str = "_"
	ty: str = "_"


@dataclass(frozen=True)
class TupleArg:
	span: Optional[Span] = None
	fields: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)  # (name, ty) pairs


ArgKind = Union[Arg, TupleArg]


def empty_arg() -> Arg:
	return Arg("_", "_")


def from_expected_ty(table: TypeTable, ty: TypeId, span: Optional[Span] = None) -> ArgKind:
	"""A tuple type becomes a `TupleArg` of its element types; anything else an `Arg`."""
	td = table.get(ty)
	if td.kind is TypeKind.TUPLE:
		return TupleArg(span, tuple(("_", type_to_str(table, t)) for t in td.param_types))
	return Arg("_", type_to_str(table, ty))


def _pat_text(ctx: AdvisorContext, pat: H.HPat) -> str:
	try:
		return ctx.source_map.span_to_snippet(pat.span)
	except SnippetError:
		return pat.name or "_"


def get_fn_like_arguments(ctx: AdvisorContext, node: H.HNode) -> Tuple[Span, List[ArgKind]]:
	"""
	The def span of a fn-like node and the arguments it takes.

	Raises `InternalConsistencyError` for anything that is not a closure, a
	fn item, a trait/impl method or a tuple constructor.
	"""
	source_map = ctx.source_map
	if isinstance(node, H.HClosure):
		args: List[ArgKind] = []
		for param in node.body.params:
			pat = param.pat
			if pat.kind is H.PatKind.TUPLE:
				args.append(TupleArg(pat.span, tuple((_pat_text(ctx, p), "_") for p in pat.elems)))
			else:
				args.append(Arg(_pat_text(ctx, pat), "_"))
		return source_map.def_span(node.span), args

	is_fn = isinstance(node, H.HItem) and node.kind is H.ItemKind.FN
	is_method = isinstance(node, (H.HTraitItem, H.HImplItem)) and node.kind is H.AssocKind.METHOD
	if (is_fn or is_method) and node.sig is not None:
		args = []
		for ty in node.sig.decl.inputs:
			if ty.kind is H.HTyKind.TUP:
				args.append(TupleArg(ty.span, tuple(("_", "_") for _ in ty.elems)))
			else:
				args.append(empty_arg())
		return source_map.def_span(node.span), args

	if isinstance(node, H.HCtor):
		return source_map.def_span(node.span), [empty_arg() for _ in range(node.field_count)]

	raise internal_error(f"non-fn-like node found: {type(node).__name__}")


def _args_str(arguments: Sequence[ArgKind], other: Sequence[ArgKind]) -> str:
	arg_length = len(arguments)
	distinct = len(other) == 1 and isinstance(other[0], TupleArg)
	if arg_length == 1 and isinstance(arguments[0], TupleArg):
		return f"a single {len(arguments[0].fields)}-tuple as argument"
	qualifier = "distinct " if distinct and arg_length > 1 else ""
	plural = "" if arg_length == 1 else "s"
	return f"{arg_length} {qualifier}argument{plural}"


def _param_list_span(ctx: AdvisorContext, found_span: Span) -> Span:
	"""`move |a, b| a + b` -> `|a, b|`; the whole span when no pipes are found."""
	try:
		snippet = ctx.source_map.span_to_snippet(found_span)
	except SnippetError:
		return found_span
	opening = snippet.find("|")
	closing = snippet.find("|", opening + 1) if opening >= 0 else -1
	if closing < 0:
		return found_span
	return found_span.with_lo(found_span.lo + opening).with_hi(found_span.lo + closing + 1)


def report_arg_count_mismatch(
	ctx: AdvisorContext,
	span: Span,
	found_span: Optional[Span],
	expected_args: Sequence[ArgKind],
	found_args: Sequence[ArgKind],
	is_closure: bool,
) -> Diagnostic:
	kind = "closure" if is_closure else "function"
	expected_str = _args_str(expected_args, found_args)
	found_str = _args_str(found_args, expected_args)

	diag = Diagnostic.error(
		span,
		f"{kind} is expected to take {expected_str}, but it takes {found_str}",
		code=E_ARG_COUNT_MISMATCH,
	)
	diag.span_label(span, f"expected {kind} that takes {expected_str}")
	if found_span is None:
		return diag

	diag.span_label(found_span, f"takes {found_str}")
	pipe_span = _param_list_span(ctx, found_span)

	if not found_args and is_closure:
		underscores = ", ".join("_" for _ in expected_args)
		plural = "" if len(expected_args) < 2 else "s"
		diag.span_suggestion(
			pipe_span,
			f"consider changing the closure to take and ignore the expected argument{plural}",
			f"|{underscores}|",
			Applicability.MACHINE_APPLICABLE,
		)

	if len(found_args) == 1 and isinstance(found_args[0], TupleArg):
		fields = found_args[0].fields
		if len(fields) == len(expected_args):
			names = ", ".join(name for name, _ty in fields)
			diag.span_suggestion(
				found_span,
				"change the closure to take multiple arguments instead of a single tuple",
				f"|{names}|",
				Applicability.MACHINE_APPLICABLE,
			)

	if len(expected_args) == 1 and isinstance(expected_args[0], TupleArg):
		fields = expected_args[0].fields
		if len(fields) == len(found_args) and is_closure:
			names = ", ".join(arg.name if isinstance(arg, Arg) else "_" for arg in found_args)
			annotated = any(isinstance(arg, Arg) and arg.ty != "_" for arg in found_args)
			types = f": ({', '.join(ty for _name, ty in fields)})" if annotated else ""
			diag.span_suggestion(
				found_span,
				"change the closure to accept a tuple instead of individual arguments",
				f"|({names}){types}|",
				Applicability.MACHINE_APPLICABLE,
			)
	return diag


def _fn_sig_string(table: TypeTable, trait_ref: TraitRef) -> str:
	inputs = trait_ref.args[0] if trait_ref.args else table.unit()
	td = table.get(inputs)
	params = list(td.param_types) if td.kind is TypeKind.TUPLE else [inputs]
	return type_to_str(table, table.new_fnptr(params, table.new_infer(0)))


def report_closure_arg_mismatch(
	ctx: AdvisorContext,
	span: Span,
	found_span: Optional[Span],
	expected_ref: TraitRef,
	found: TraitRef,
) -> Diagnostic:
	table = ctx.table
	argument_is_closure = is_closure(table, expected_ref.self_ty)
	diag = Diagnostic.error(
		span,
		f"type mismatch in {'closure' if argument_is_closure else 'function'} arguments",
		code=E_CLOSURE_ARG_MISMATCH,
	)
	diag.span_label(span, f"expected signature of `{_fn_sig_string(table, found)}`")
	diag.span_label(found_span or span, f"found signature of `{_fn_sig_string(table, expected_ref)}`")
	return diag


__all__ = [
	"Arg",
	"TupleArg",
	"ArgKind",
	"empty_arg",
	"from_expected_ty",
	"get_fn_like_arguments",
	"report_arg_count_mismatch",
	"report_closure_arg_mismatch",
]
