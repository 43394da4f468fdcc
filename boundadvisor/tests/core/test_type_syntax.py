# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest
from lark.exceptions import UnexpectedInput

from boundadvisor.core.def_id import DefId
from boundadvisor.core.type_subst import apply_subst, erase_regions, freshen_params, resolve_vars
from boundadvisor.core.type_syntax import parse_type, type_syntax_kind
from boundadvisor.core.types_core import TypeKind, TypeTable, has_infer_types, type_to_str
from boundadvisor.test_helpers import BOX, DISPLAY, Fixture


def _render(text: str, **params: int) -> str:
	f = Fixture()
	return type_to_str(f.table, f.ty(text, **{k: f.param(k) for k in params}))


def test_round_trip_rendering_of_common_shapes() -> None:
	assert _render("&'static mut Vec<T>", T=0) == "&'static mut Vec<T>"
	assert _render("Box<dyn Display + Send>") == "Box<dyn Display + Send>"
	assert _render("<I as Iterator>::Item", I=0) == "<I as Iterator>::Item"
	assert _render("fn(i32, bool) -> u8") == "fn(i32, bool) -> u8"
	assert _render("fn(i32)") == "fn(i32)"
	assert _render("(i32,)") == "(i32,)"
	assert _render("(i32, &str)") == "(i32, &str)"
	assert _render("[u8]") == "[u8]"
	assert _render("impl Iterator") == "impl Iterator"


def test_names_resolve_to_well_known_defs() -> None:
	f = Fixture()
	td = f.table.get(f.ty("Box<i32>"))
	assert td.kind is TypeKind.ADT
	assert td.def_id == BOX
	dyn = f.table.get(f.ty("dyn Display"))
	assert dyn.bounds == (DISPLAY,)
	local = f.table.get(f.ty("Widget"))
	assert local.def_id == DefId("main", "Widget")
	pathed = f.table.get(f.ty("std::rc::Rc<u8>"))
	assert pathed.def_id == DefId("std::rc", "Rc")


def test_interning_makes_equal_types_identical() -> None:
	f = Fixture()
	assert f.ty("Vec<(i32, bool)>") == f.ty("Vec<(i32, bool)>")
	assert f.ty("&i32") != f.ty("&mut i32")
	assert f.ty("Self") == f.table.self_param


def test_syntax_kind_sees_through_parens() -> None:
	assert type_syntax_kind("(dyn Display)") == "dyn_type"
	assert type_syntax_kind("&T") == "ref_type"
	assert type_syntax_kind("Vec<T>") == "path_type"
	assert type_syntax_kind("_") == "infer"


def test_malformed_type_raises_lark_error() -> None:
	table = TypeTable()
	with pytest.raises(UnexpectedInput):
		parse_type("Vec<", table)
	with pytest.raises(UnexpectedInput):
		parse_type("& &", table)


def test_erase_regions_merges_reference_lifetimes() -> None:
	f = Fixture()
	a = f.ty("&'a Vec<i32>")
	b = f.ty("&'b Vec<i32>")
	assert a != b
	assert erase_regions(f.table, a) == erase_regions(f.table, b)


def test_subst_and_inference_resolution() -> None:
	f = Fixture()
	t = f.param("T")
	vec_t = f.ty("Vec<T>", T=t)
	assert apply_subst(f.table, vec_t, {"T": f.ty("u8")}) == f.ty("Vec<u8>")

	var = f.table.new_infer(3)
	boxed = f.ty("Box<_>")
	assert has_infer_types(f.table, boxed)
	opt = f.table.new_adt(DefId("main", "Option"), [var])
	assert resolve_vars(f.table, opt, {3: f.ty("bool")}) == f.ty("Option<bool>")
	assert resolve_vars(f.table, opt, {}) == opt


def test_freshen_params_replaces_params_with_inference_vars() -> None:
	f = Fixture()
	t = f.param("T")
	fresh = freshen_params(f.table, f.ty("Vec<T>", T=t))
	assert has_infer_types(f.table, fresh)
	assert type_to_str(f.table, fresh) == "Vec<_>"
