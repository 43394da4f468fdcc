# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from boundadvisor.core.def_id import DefId
from boundadvisor.core.diagnostics import E_ARG_COUNT_MISMATCH, E_CLOSURE_ARG_MISMATCH, Applicability, Diagnostic
from boundadvisor.core.span import Span
from boundadvisor.errors import InternalConsistencyError
from boundadvisor.hir import nodes as H
from boundadvisor.suggest.arg_mismatch import (
	Arg,
	TupleArg,
	from_expected_ty,
	get_fn_like_arguments,
	report_arg_count_mismatch,
	report_closure_arg_mismatch,
)
from boundadvisor.test_helpers import Fixture
from boundadvisor.traits.obligation import TraitRef

SRC = """fn main() {
    run(|| 1);
    run(|| 42);
    run(move || 2);
    pairs(|x, (a, b)| { x });
    pairs(|p| p);
}
fn walk(pair: (i32, i32), n: i32) {}
struct Point(i32, i32, i32);
"""

FN_TRAIT = DefId("core::ops", "Fn")
TWO = [Arg(), Arg()]
PAIR = TupleArg(None, (("_", "_"), ("_", "_")))


def _edits(f: Fixture, diag: Diagnostic) -> list[tuple[str, str, str]]:
	return [
		(s.message, f.source_map.span_to_snippet(s.parts[0].span), s.parts[0].snippet)
		for s in diag.suggestions
	]


def test_closure_without_arguments_takes_and_ignores_them() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	diag = report_arg_count_mismatch(ctx, f.span_of("run"), f.span_of("||"), TWO, [], True)
	assert diag.code == E_ARG_COUNT_MISMATCH
	assert diag.message == "closure is expected to take 2 arguments, but it takes 0 arguments"
	assert [l.label for l in diag.labels] == ["expected closure that takes 2 arguments", "takes 0 arguments"]
	assert _edits(f, diag) == [
		("consider changing the closure to take and ignore the expected arguments", "||", "|_, _|")
	]
	assert diag.suggestions[0].applicability is Applicability.MACHINE_APPLICABLE


def test_move_prefix_is_kept_out_of_the_edit() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	diag = report_arg_count_mismatch(ctx, f.span_of("run", 2), f.span_of("move ||"), [Arg()], [], True)
	assert _edits(f, diag) == [
		("consider changing the closure to take and ignore the expected argument", "||", "|_|")
	]


def test_expression_closure_edit_stops_at_the_parameter_list() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	closure = H.HClosure(
		decl=H.HFnDecl(),
		body=H.HBody(value=H.HLit("42", f.span_of("42"))),
		span=f.span_of("|| 42"),
	)
	found_span, found = get_fn_like_arguments(ctx, closure)
	diag = report_arg_count_mismatch(ctx, f.span_of("run", 1), found_span, TWO, found, True)
	assert _edits(f, diag) == [
		("consider changing the closure to take and ignore the expected arguments", "||", "|_, _|")
	]


def test_individual_arguments_become_a_tuple_pattern() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	found_span = f.span_of("|x, (a, b)|")
	diag = report_arg_count_mismatch(ctx, f.span_of("pairs"), found_span, [PAIR], [Arg("x"), Arg("y")], True)
	assert diag.message == "closure is expected to take a single 2-tuple as argument, but it takes 2 distinct arguments"
	[(message, _text, new)] = _edits(f, diag)
	assert message == "change the closure to accept a tuple instead of individual arguments"
	assert new == "|(x, y)|"


def test_tuple_pattern_keeps_annotated_types() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	expected = [TupleArg(None, (("_", "i32"), ("_", "u8")))]
	diag = report_arg_count_mismatch(ctx, f.span_of("pairs"), f.span_of("|x, (a, b)|"), expected, [Arg("x", "i32"), Arg("y")], True)
	assert [new for _m, _t, new in _edits(f, diag)] == ["|(x, y): (i32, u8)|"]


def test_single_tuple_becomes_individual_arguments() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	found = [TupleArg(f.span_of("(a, b)"), (("a", "_"), ("b", "_")))]
	diag = report_arg_count_mismatch(ctx, f.span_of("pairs"), f.span_of("|x, (a, b)|"), TWO, found, True)
	assert diag.message == "closure is expected to take 2 distinct arguments, but it takes a single 2-tuple as argument"
	assert _edits(f, diag) == [
		("change the closure to take multiple arguments instead of a single tuple", "|x, (a, b)|", "|a, b|")
	]


def test_functions_only_get_labels() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	diag = report_arg_count_mismatch(ctx, f.span_of("run"), f.span_of("walk"), [Arg()], TWO, False)
	assert diag.message == "function is expected to take 1 argument, but it takes 2 arguments"
	assert diag.suggestions == []

	bare = report_arg_count_mismatch(ctx, f.span_of("run"), None, [Arg()], TWO, False)
	assert [l.label for l in bare.labels] == ["expected function that takes 1 argument"]


def test_closure_arguments_from_patterns() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	x = H.HPat(H.PatKind.BINDING, f.span_of("x"), name="x")
	tup = f.span_of("(a, b)")
	a = H.HPat(H.PatKind.BINDING, Span(f.file, tup.lo + 1, tup.lo + 2), name="a")
	b = H.HPat(H.PatKind.BINDING, Span(f.file, tup.lo + 4, tup.lo + 5), name="b")
	ab = H.HPat(H.PatKind.TUPLE, tup, elems=[a, b])
	closure = H.HClosure(
		decl=H.HFnDecl(),
		body=H.HBody(params=[H.HParam(x), H.HParam(ab)], value=H.HPath("x")),
		span=f.span_of("|x, (a, b)| { x }"),
	)
	span, args = get_fn_like_arguments(ctx, closure)
	assert ctx.source_map.span_to_snippet(span) == "|x, (a, b)|"
	assert args == [Arg("x", "_"), TupleArg(f.span_of("(a, b)"), (("a", "_"), ("b", "_")))]


def test_closure_argument_names_fall_back_without_source() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	closure = H.HClosure(
		decl=H.HFnDecl(),
		body=H.HBody(params=[H.HParam(H.HPat(H.PatKind.BINDING, name="p")), H.HParam(H.HPat(H.PatKind.WILD))]),
	)
	_span, args = get_fn_like_arguments(ctx, closure)
	assert args == [Arg("p", "_"), Arg("_", "_")]


def test_fn_items_and_constructors() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	tup = H.HTy.from_source("(i32, i32)", f.span_of("(i32, i32)"))
	walk = H.HItem(
		H.ItemKind.FN,
		"walk",
		sig=H.HFnSig(H.HFnDecl(inputs=[tup, H.HTy(H.HTyKind.PATH)])),
		span=f.span_of("fn walk(pair: (i32, i32), n: i32) {}"),
	)
	span, args = get_fn_like_arguments(ctx, walk)
	assert ctx.source_map.span_to_snippet(span) == "fn walk(pair: (i32, i32), n: i32)"
	assert args == [TupleArg(tup.span, (("_", "_"), ("_", "_"))), Arg()]

	ctor = H.HCtor(field_count=3, span=f.span_of("struct Point(i32, i32, i32);"))
	_span, args = get_fn_like_arguments(ctx, ctor)
	assert args == [Arg(), Arg(), Arg()]


def test_non_fn_like_node_is_a_contract_violation() -> None:
	ctx = Fixture(SRC).context()
	with pytest.raises(InternalConsistencyError):
		get_fn_like_arguments(ctx, H.HPath("walk"))
	with pytest.raises(InternalConsistencyError):
		get_fn_like_arguments(ctx, H.HItem(H.ItemKind.STRUCT, "Point"))


def test_expected_argument_shapes_from_types() -> None:
	f = Fixture(SRC)
	assert from_expected_ty(f.table, f.ty("(i32, bool)")) == TupleArg(None, (("_", "i32"), ("_", "bool")))
	assert from_expected_ty(f.table, f.ty("&str")) == Arg("_", "&str")


def test_closure_signature_mismatch_labels() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	closure_ty = f.table.new_closure(DefId("main", "main", 1), [f.ty("i32"), f.ty("i32")], f.ty("i32"))
	expected_ref = TraitRef(FN_TRAIT, closure_ty, (f.ty("(i32, i32)"),))
	found = TraitRef(FN_TRAIT, closure_ty, (f.ty("(&i32,)"),))
	diag = report_closure_arg_mismatch(ctx, f.span_of("pairs"), f.span_of("|x, (a, b)|"), expected_ref, found)
	assert diag.code == E_CLOSURE_ARG_MISMATCH
	assert diag.message == "type mismatch in closure arguments"
	assert [(ctx.source_map.span_to_snippet(l.span), l.label) for l in diag.labels] == [
		("pairs", "expected signature of `fn(&i32) -> _`"),
		("|x, (a, b)|", "found signature of `fn(i32, i32) -> _`"),
	]


def test_function_signature_mismatch_without_found_span() -> None:
	f = Fixture(SRC)
	ctx = f.context()
	fn_ty = f.table.new_fndef(DefId("main", "walk"), [f.ty("i32")], f.table.unit())
	expected_ref = TraitRef(FN_TRAIT, fn_ty, (f.ty("i32"),))
	found = TraitRef(FN_TRAIT, fn_ty, (f.ty("(u8, u8)"),))
	diag = report_closure_arg_mismatch(ctx, f.span_of("walk"), None, expected_ref, found)
	assert diag.message == "type mismatch in function arguments"
	assert [l.label for l in diag.labels] == [
		"expected signature of `fn(u8, u8) -> _`",
		"found signature of `fn(i32) -> _`",
	]
	assert diag.labels[0].span == diag.labels[1].span
