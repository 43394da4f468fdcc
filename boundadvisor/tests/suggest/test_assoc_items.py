# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from boundadvisor.core.def_id import DefId
from boundadvisor.core.diagnostics import Applicability, Diagnostic
from boundadvisor.hir import nodes as H
from boundadvisor.suggest.assoc_items import suggest_fully_qualified_path
from boundadvisor.test_helpers import Fixture

SRC = """trait Limits {
    const MAX: u32;
    type Unit;
    fn describe();
}
fn main() { let m = Limits::MAX; }
"""

LIMITS = DefId("main", "Limits")
MAX = DefId("main", "MAX")
UNIT = DefId("main", "Unit")
DESCRIBE = DefId("main", "describe")


def _setup() -> tuple[Fixture, H.HCrate, Diagnostic]:
	f = Fixture(SRC)
	trait = H.HItem(
		H.ItemKind.TRAIT,
		"Limits",
		def_id=LIMITS,
		items=[
			H.HTraitItem("MAX", H.AssocKind.CONST, def_id=MAX),
			H.HTraitItem("Unit", H.AssocKind.TYPE, def_id=UNIT),
			H.HTraitItem("describe", H.AssocKind.METHOD, def_id=DESCRIBE),
		],
	)
	return f, H.HCrate(items=[trait]), Diagnostic.error(f.span_of("Limits::MAX"), "type annotations needed")


def test_associated_const_gets_a_qualified_path() -> None:
	f, crate, diag = _setup()
	ctx = f.context(crate)
	suggest_fully_qualified_path(ctx, diag, MAX, f.span_of("Limits::MAX"), LIMITS)
	assert diag.notes == [
		"associated constants cannot be accessed directly on a `trait`, "
		"they can only be accessed through a specific `impl`"
	]
	[suggestion] = diag.suggestions
	assert suggestion.message == "use the fully qualified path to an implementation"
	assert suggestion.applicability is Applicability.HAS_PLACEHOLDERS
	assert suggestion.parts[0].span == f.span_of("Limits::MAX")
	assert suggestion.parts[0].snippet == "<Type as Limits>::MAX"


def test_associated_type_wording() -> None:
	f, crate, diag = _setup()
	ctx = f.context(crate)
	suggest_fully_qualified_path(ctx, diag, UNIT, f.span_of("Limits::MAX"), DefId("core::ops", "Limits"))
	assert diag.notes[0].startswith("associated types cannot be accessed directly")
	assert diag.suggestions[0].parts[0].snippet == "<Type as core::ops::Limits>::Unit"


def test_methods_and_unknown_items_are_skipped() -> None:
	f, crate, diag = _setup()
	ctx = f.context(crate)
	suggest_fully_qualified_path(ctx, diag, DESCRIBE, f.span_of("Limits::MAX"), LIMITS)
	suggest_fully_qualified_path(ctx, diag, DefId("std", "MIN"), f.span_of("Limits::MAX"), LIMITS)
	assert diag.notes == [] and diag.suggestions == []
