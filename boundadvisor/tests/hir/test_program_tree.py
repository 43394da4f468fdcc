# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from boundadvisor.core.def_id import DefId
from boundadvisor.core.span import Span
from boundadvisor.errors import InternalConsistencyError
from boundadvisor.hir import nodes as H
from boundadvisor.hir.map import ProgramTree

RUN = DefId("main", "run")
CLOSURE = DefId("main", "run", 1)
SHAPE = DefId("main", "Shape")
AREA = DefId("main", "area")


def _tree() -> tuple[ProgramTree, dict]:
	lit = H.HLit("1", Span("m.rs", 30, 31))
	closure = H.HClosure(
		decl=H.HFnDecl(),
		body=H.HBody(value=lit),
		def_id=CLOSURE,
		span=Span("m.rs", 27, 31),
	)
	local = H.HLocal(pat=H.HPat(H.PatKind.BINDING, name="f"), init=closure)
	block = H.HBlock(stmts=[H.HStmt(H.StmtKind.LOCAL, local=local)])
	value = H.HExprBlock(block)
	run = H.HItem(
		H.ItemKind.FN,
		"run",
		def_id=RUN,
		ident_span=Span("m.rs", 3, 6),
		sig=H.HFnSig(H.HFnDecl(), is_async=True),
		body=H.HBody(value=value),
		span=Span("m.rs", 0, 40),
	)
	area = H.HTraitItem("area", H.AssocKind.METHOD, def_id=AREA)
	shape = H.HItem(H.ItemKind.TRAIT, "Shape", def_id=SHAPE, items=[area])
	tree = ProgramTree(H.HCrate(items=[run, shape]))
	return tree, {"run": run, "closure": closure, "lit": lit, "value": value, "area": area, "shape": shape}


def test_ids_are_assigned_depth_first_from_the_crate() -> None:
	tree, n = _tree()
	assert tree.crate_id == 1
	assert n["run"].node_id == 2
	assert n["value"].node_id > n["run"].node_id
	assert n["lit"].node_id > n["closure"].node_id
	assert tree.find(n["lit"].node_id) is n["lit"]
	assert tree.get_parent_node(tree.crate_id) == tree.crate_id


def test_body_value_parent_is_the_owning_item() -> None:
	tree, n = _tree()
	assert tree.get_parent_node(n["value"].node_id) == n["run"].node_id
	assert tree.get_parent_item(n["lit"].node_id) == n["run"].node_id
	assert tree.get_parent_item(n["run"].node_id) == tree.crate_id


def test_definition_queries() -> None:
	tree, n = _tree()
	assert tree.get_if_local(CLOSURE) is n["closure"]
	assert tree.as_local_node_id(DefId("main", "elsewhere")) is None
	assert tree.parent_def(CLOSURE) == RUN
	assert tree.closure_base_def_id(CLOSURE) == RUN
	assert tree.closure_base_def_id(RUN) == RUN
	assert tree.asyncness(RUN)
	assert not tree.asyncness(CLOSURE)
	assert tree.opt_item_name(RUN) == ("run", Span("m.rs", 3, 6))
	assert tree.opt_item_name(CLOSURE) is None
	assert tree.opt_name(n["closure"].node_id) is None
	assert tree.opt_associated_item(AREA) is n["area"]
	assert tree.opt_associated_item(SHAPE) is None
	assert tree.parent_def(AREA) == SHAPE
	assert tree.maybe_body_owned_by(n["closure"].node_id).value is n["lit"]


def test_spans_and_expression_lookup() -> None:
	tree, n = _tree()
	assert tree.span(n["run"].node_id) == Span("m.rs", 0, 40)
	assert tree.span_if_local(RUN) == Span("m.rs", 0, 40)
	assert tree.span(999).is_dummy()
	assert tree.expect_expr(n["lit"].node_id) is n["lit"]
	with pytest.raises(InternalConsistencyError):
		tree.expect_expr(n["run"].node_id)


def test_hty_from_source_classifies_annotations() -> None:
	span = Span("m.rs", 10, 28)
	ty = H.HTy.from_source("(i32, dyn Display)", span)
	assert ty.kind is H.HTyKind.TUP
	assert [e.kind for e in ty.elems] == [H.HTyKind.PATH, H.HTyKind.TRAIT_OBJECT]
	assert ty.elems[0].span == Span("m.rs", 11, 14)
	assert H.HTy.from_source("(impl Iterator)", span).kind is H.HTyKind.IMPL_TRAIT
