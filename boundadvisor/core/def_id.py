# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DefId:
	"""
Stable identity for a definition (item, trait, closure, generator).

`ordinal` disambiguates same-named definitions within a module, e.g. the
n-th closure of a function.
"""

	module: str
	name: str
	ordinal: int = 0


def def_path_str(def_id: DefId) -> str:
	"""Return the user-facing path of a definition."""
	if def_id.module == "main":
		base = def_id.name
	else:
		base = f"{def_id.module}::{def_id.name}"
	if def_id.ordinal == 0:
		return base
	return f"{base}#{def_id.ordinal}"


__all__ = ["DefId", "def_path_str"]
