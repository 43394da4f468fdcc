# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from boundadvisor.core.def_id import DefId
from boundadvisor.core.span import DUMMY_SP
from boundadvisor.core.types_core import TypeKind
from boundadvisor.errors import EvaluationOverflow
from boundadvisor.test_helpers import DISPLAY, SIZED, Fixture, trait_obligation
from boundadvisor.traits.evaluate import EvaluationResult
from boundadvisor.traits.obligation import Obligation, ObligationCause, OtherPredicate, ParamEnv, TraitRef

SPEAK = DefId("main", "Speak")


def _eval(f: Fixture, trait: DefId, ty: int, env: ParamEnv | None = None) -> EvaluationResult:
	return f.solver.evaluate_obligation(trait_obligation(trait, ty, DUMMY_SP, param_env=env))


def test_direct_impl() -> None:
	f = Fixture()
	f.solver.add_impl(DISPLAY, f.ty("i32"))
	assert _eval(f, DISPLAY, f.ty("i32")) is EvaluationResult.OK
	assert _eval(f, DISPLAY, f.ty("bool")) is EvaluationResult.ERR


def test_generic_impl_proves_its_requirements() -> None:
	f = Fixture()
	t = f.param("T")
	f.solver.add_impl(DISPLAY, f.ty("i32"))
	f.solver.add_impl(DISPLAY, f.ty("Vec<T>", T=t), requires=((DISPLAY, t),))
	assert _eval(f, DISPLAY, f.ty("Vec<Vec<i32>>")) is EvaluationResult.OK
	assert _eval(f, DISPLAY, f.ty("Vec<bool>")) is EvaluationResult.ERR


def test_repeated_param_must_bind_consistently() -> None:
	f = Fixture()
	t = f.param("T")
	f.solver.add_impl(SPEAK, f.ty("(T, T)", T=t))
	assert _eval(f, SPEAK, f.ty("(u8, u8)")) is EvaluationResult.OK
	assert _eval(f, SPEAK, f.ty("(u8, i8)")) is EvaluationResult.ERR
	assert _eval(f, SPEAK, f.ty("(u8, _)")) is EvaluationResult.AMBIG


def test_inference_variable_is_ambiguous() -> None:
	f = Fixture()
	f.solver.add_impl(DISPLAY, f.ty("i32"))
	assert _eval(f, DISPLAY, f.ty("_")) is EvaluationResult.AMBIG


def test_caller_bounds_prove_params() -> None:
	f = Fixture()
	t = f.param("T")
	env = ParamEnv((TraitRef(SPEAK, t),))
	assert _eval(f, SPEAK, t, env) is EvaluationResult.OK
	assert _eval(f, SPEAK, t) is EvaluationResult.ERR


def test_sized_is_structural() -> None:
	f = Fixture()
	assert _eval(f, SIZED, f.ty("str")) is EvaluationResult.ERR
	assert _eval(f, SIZED, f.ty("[u8]")) is EvaluationResult.ERR
	assert _eval(f, SIZED, f.ty("dyn Display")) is EvaluationResult.ERR
	assert _eval(f, SIZED, f.ty("&str")) is EvaluationResult.OK
	assert _eval(f, SIZED, f.param("T")) is EvaluationResult.OK


def test_trait_objects_and_opaque_types_implement_their_bounds() -> None:
	f = Fixture()
	assert _eval(f, DISPLAY, f.ty("dyn Display")) is EvaluationResult.OK
	assert _eval(f, DISPLAY, f.ty("impl Display")) is EvaluationResult.OK
	assert _eval(f, SPEAK, f.ty("dyn Display")) is EvaluationResult.ERR


def test_static_impl_holds_modulo_regions() -> None:
	f = Fixture()
	f.solver.add_impl(SPEAK, f.ty("&'static str"))
	assert _eval(f, SPEAK, f.ty("&str")) is EvaluationResult.OK_MODULO_REGIONS
	assert _eval(f, SPEAK, f.ty("&mut str")) is EvaluationResult.ERR


def test_cycle_is_unknown() -> None:
	f = Fixture()
	f.solver.add_impl(SPEAK, f.ty("Node"), requires=((SPEAK, f.ty("Node")),))
	result = _eval(f, SPEAK, f.ty("Node"))
	assert result is EvaluationResult.UNKNOWN
	assert result.may_apply()
	assert not result.must_apply_modulo_regions()


def test_unbounded_nesting_overflows() -> None:
	f = Fixture()
	f.solver.recursion_limit = 3
	t = f.param("T")
	f.solver.add_impl(SPEAK, f.ty("Box<T>", T=t), requires=((SPEAK, f.ty("Box<Box<T>>", T=t)),))
	with pytest.raises(EvaluationOverflow):
		_eval(f, SPEAK, f.ty("Box<i32>"))
	ctx = f.context()
	obligation = trait_obligation(SPEAK, f.ty("Box<i32>"), DUMMY_SP)
	assert ctx.evaluate_obligation(obligation) is None
	assert not ctx.predicate_may_hold(obligation)


def test_non_trait_predicates_are_ambiguous() -> None:
	f = Fixture()
	obligation = Obligation(ObligationCause.dummy(), ParamEnv.empty(), OtherPredicate("'a: 'b"))
	assert f.solver.evaluate_obligation(obligation) is EvaluationResult.AMBIG


def test_object_safety_violations() -> None:
	f = Fixture()
	assert f.solver.object_safety_violations(SPEAK) == []
	f.solver.mark_not_object_safe(SPEAK, "method `clone` references the `Self` type")
	assert f.solver.object_safety_violations(SPEAK) == ["method `clone` references the `Self` type"]


def test_predicate_can_apply_freshens_params() -> None:
	f = Fixture()
	f.solver.add_impl(SPEAK, f.ty("i32"))
	ctx = f.context()
	t = f.param("T")
	assert ctx.predicate_can_apply(ParamEnv.empty(), TraitRef(SPEAK, t))
	assert not ctx.predicate_can_apply(ParamEnv.empty(), TraitRef(SPEAK, f.ty("bool")))


def test_freshening_shares_one_variable_per_parameter() -> None:
	f = Fixture()
	ctx = f.context()
	t = f.param("T")
	same = ctx.freshen_trait_ref(TraitRef(SPEAK, t, (t,)))
	assert same.self_ty == same.args[0]
	assert f.table.get(same.self_ty).kind is TypeKind.INFER
	mixed = ctx.freshen_trait_ref(TraitRef(SPEAK, t, (f.param("U", 1),)))
	assert mixed.self_ty != mixed.args[0]
