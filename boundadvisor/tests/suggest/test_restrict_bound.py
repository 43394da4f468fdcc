# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from boundadvisor.core.def_id import DefId
from boundadvisor.core.diagnostics import Applicability, Diagnostic
from boundadvisor.core.span import Span
from boundadvisor.hir import nodes as H
from boundadvisor.suggest.restrict_bound import suggest_restricting_param_bound
from boundadvisor.test_helpers import ITERATOR, Fixture
from boundadvisor.traits.obligation import TraitRef

SPEAK = DefId("main", "Speak")


def _fn_item(
	f: Fixture,
	header: str,
	params: List[H.HGenericParam],
	predicates: Optional[List[H.HWherePredicate]] = None,
	*,
	item_span: Optional[Span] = None,
) -> tuple[H.HCrate, H.HExprBlock]:
	value = H.HExprBlock(H.HBlock())
	where = H.HWhereClause(predicates=predicates or [], span=f.span_of(header).shrink_to_hi())
	item = H.HItem(
		H.ItemKind.FN,
		"show",
		def_id=DefId("main", "show"),
		generics=H.HGenerics(params=params, where_clause=where),
		sig=H.HFnSig(H.HFnDecl()),
		body=H.HBody(value=value),
		span=item_span if item_span is not None else Span(f.file, 0, len(f.source)),
	)
	return H.HCrate(items=[item]), value


def _run(f: Fixture, crate: H.HCrate, value: H.HExprBlock, self_ty: int) -> tuple[Diagnostic, list]:
	ctx = f.context(crate)
	diag = Diagnostic.error(Span(), "the trait bound is not satisfied")
	suggest_restricting_param_bound(ctx, diag, TraitRef(SPEAK, self_ty), value.node_id)
	edits = [
		(s.message, f.source_map.span_to_snippet(s.parts[0].span), s.parts[0].span, s.parts[0].snippet)
		for s in diag.suggestions
	]
	return diag, edits


def test_bare_parameter_gets_an_inline_bound() -> None:
	f = Fixture("fn show<T>(t: T) { print(t); }")
	crate, value = _fn_item(f, "fn show<T>(t: T)", [H.HGenericParam("T", f.span_of("T"))])
	diag, edits = _run(f, crate, value, f.param("T"))
	assert [(m, text, new) for m, text, _sp, new in edits] == [("consider restricting this bound", "T", "T: Speak")]
	assert diag.suggestions[0].applicability is Applicability.MACHINE_APPLICABLE


def test_existing_where_clause_is_extended() -> None:
	f = Fixture("fn show<T>(t: T) where T: Debug { print(t); }")
	preds = [H.HWherePredicate("T: Debug", f.span_of("T: Debug"))]
	crate, value = _fn_item(f, "fn show<T>(t: T) where T: Debug", [H.HGenericParam("T", f.span_of("T"))], preds)
	_diag, edits = _run(f, crate, value, f.param("T"))
	[(message, _text, span, new)] = edits
	assert message == "consider further restricting type parameter `T`"
	assert span == f.span_of("T: Debug").shrink_to_hi()
	assert new == ", T: Speak"


def test_existing_inline_bound_is_extended() -> None:
	f = Fixture("fn show<T: Debug>(t: T) { print(t); }")
	param = H.HGenericParam("T", f.span_of("T"), bounds=["Debug"])
	crate, value = _fn_item(f, "fn show<T: Debug>(t: T)", [param])
	_diag, edits = _run(f, crate, value, f.param("T"))
	assert [(m, text, new) for m, text, _sp, new in edits] == [
		("consider further restricting this bound", "T:", "T: Speak + ")
	]


def test_inline_bound_without_source_falls_back_to_a_label() -> None:
	f = Fixture("fn show<T: Debug>(t: T) { print(t); }")
	param = H.HGenericParam("T", f.span_of("T"), bounds=["Debug"])
	crate, value = _fn_item(f, "fn show<T: Debug>(t: T)", [param], item_span=Span())
	diag, edits = _run(f, crate, value, f.param("T"))
	assert edits == []
	assert [(l.span, l.label) for l in diag.labels] == [(f.span_of("T"), "consider adding a `where T: Speak` bound")]


def test_argument_position_impl_trait_is_extended() -> None:
	f = Fixture("fn show(t: impl Debug) { print(t); }")
	param = H.HGenericParam("impl Debug", f.span_of("impl Debug"))
	crate, value = _fn_item(f, "fn show(t: impl Debug)", [param])
	_diag, edits = _run(f, crate, value, f.param("impl Debug"))
	assert [(m, text, new) for m, text, _sp, new in edits] == [
		("consider further restricting this bound", "impl Debug", "impl Debug + Speak")
	]


def test_parameter_declared_on_the_enclosing_impl() -> None:
	f = Fixture("impl<T> Holder<T> {\n    fn show(&self) { print(self.0); }\n}\n")
	value = H.HExprBlock(H.HBlock())
	method = H.HImplItem("show", H.AssocKind.METHOD, body=H.HBody(value=value), span=f.span_of("fn show(&self) { print(self.0); }"))
	holder = H.HItem(
		H.ItemKind.IMPL,
		"Holder",
		generics=H.HGenerics(params=[H.HGenericParam("T", f.span_of("T"))]),
		items=[method],
		span=Span(f.file, 0, len(f.source)),
	)
	_diag, edits = _run(f, H.HCrate(items=[holder]), value, f.param("T"))
	assert [(text, new) for _m, text, _sp, new in edits] == [("T", "T: Speak")]


def test_self_in_a_trait_method_gets_a_where_clause() -> None:
	f = Fixture("trait Animal {\n    fn speak(&self) { say(self); }\n}\n")
	value = H.HExprBlock(H.HBlock())
	where = H.HWhereClause(span=f.span_of("fn speak(&self)").shrink_to_hi())
	speak = H.HTraitItem("speak", H.AssocKind.METHOD, generics=H.HGenerics(where_clause=where), body=H.HBody(value=value))
	animal = H.HItem(H.ItemKind.TRAIT, "Animal", items=[speak])
	diag, edits = _run(f, H.HCrate(items=[animal]), value, f.table.self_param)
	[(message, _text, span, new)] = edits
	assert message == "consider further restricting `Self`"
	assert span == f.span_of("fn speak(&self)").shrink_to_hi()
	assert new == " where Self: Speak "


def test_associated_type_restriction_uses_the_where_clause() -> None:
	f = Fixture("fn count<I: Iterator>(it: I) { show(it.next()); }")
	i = f.param("I")
	crate, value = _fn_item(f, "fn count<I: Iterator>(it: I)", [H.HGenericParam("I", f.span_of("I"), bounds=["Iterator"])])
	_diag, edits = _run(f, crate, value, f.table.new_projection(ITERATOR, "Item", i))
	[(message, _text, span, new)] = edits
	assert message == "consider further restricting the associated type"
	assert span == f.span_of("fn count<I: Iterator>(it: I)").shrink_to_hi()
	assert new == " where <I as Iterator>::Item: Speak "


def test_macro_generated_declarations_are_left_alone() -> None:
	f = Fixture("fn show<T>(t: T) { print(t); }")
	param = H.HGenericParam("T", replace(f.span_of("T"), expansion=True))
	crate, value = _fn_item(f, "fn show<T>(t: T)", [param])
	diag, edits = _run(f, crate, value, f.param("T"))
	assert edits == [] and diag.labels == []


def test_concrete_types_are_not_restricted() -> None:
	f = Fixture("fn show<T>(t: T) { print(t); }")
	crate, value = _fn_item(f, "fn show<T>(t: T)", [H.HGenericParam("T", f.span_of("T"))])
	diag, edits = _run(f, crate, value, f.ty("Vec<i32>"))
	assert edits == []


def test_undeclared_parameter_finds_nothing() -> None:
	f = Fixture("fn show<T>(t: T) { print(t); }")
	crate, value = _fn_item(f, "fn show<T>(t: T)", [H.HGenericParam("T", f.span_of("T"))])
	diag, edits = _run(f, crate, value, f.param("U"))
	assert edits == [] and diag.labels == []
