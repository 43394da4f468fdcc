# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Session configuration read by the advisor.

The checker owns the session; the advisor only reads a handful of knobs:
the recursion limit (for the overflow help), feature gates that change which
helps are shown, the well-known trait identities used for special wording,
and optional documentation links appended to notes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from boundadvisor.core.def_id import DefId

DEFAULT_IMPL_TRAIT_DOCS = (
	"https://doc.rust-lang.org/book/ch10-02-traits.html#returning-types-that-implement-traits"
)
DEFAULT_TRAIT_OBJECT_DOCS = (
	"https://doc.rust-lang.org/book/ch17-02-trait-objects.html"
	"#using-trait-objects-that-allow-for-values-of-different-types"
)


@dataclass(frozen=True)
class SessionConfig:
	recursion_limit: int = 128
	unsized_locals: bool = False  # feature gate
	nightly_build: bool = False
	diagnostic_items: Mapping[str, DefId] = field(default_factory=dict)  # e.g. "send_trait"
	impl_trait_docs: Optional[str] = DEFAULT_IMPL_TRAIT_DOCS
	trait_object_docs: Optional[str] = DEFAULT_TRAIT_OBJECT_DOCS

	def is_diagnostic_item(self, name: str, def_id: DefId) -> bool:
		return self.diagnostic_items.get(name) == def_id

	@classmethod
	def from_mapping(cls, obj: Mapping[str, Any]) -> "SessionConfig":
		"""
		Build a config from a decoded JSON object.

		Format:
		{
		  "recursion_limit": 128,
		  "unsized_locals": false,
		  "nightly_build": false,
		  "diagnostic_items": { "send_trait": "core::marker::Send" },
		  "impl_trait_docs": "<url>" | null,
		  "trait_object_docs": "<url>" | null
		}
		"""
		if not isinstance(obj, Mapping):
			raise ValueError("session config must be a JSON object")
		known = {
			"recursion_limit",
			"unsized_locals",
			"nightly_build",
			"diagnostic_items",
			"impl_trait_docs",
			"trait_object_docs",
		}
		unknown = sorted(set(obj) - known)
		if unknown:
			raise ValueError(f"unknown session config keys: {', '.join(unknown)}")

		kwargs: dict[str, Any] = {}
		if "recursion_limit" in obj:
			limit = obj["recursion_limit"]
			if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
				raise ValueError("recursion_limit must be a positive integer")
			kwargs["recursion_limit"] = limit
		for flag in ("unsized_locals", "nightly_build"):
			if flag in obj:
				if not isinstance(obj[flag], bool):
					raise ValueError(f"{flag} must be a boolean")
				kwargs[flag] = obj[flag]
		for doc in ("impl_trait_docs", "trait_object_docs"):
			if doc in obj:
				if obj[doc] is not None and not isinstance(obj[doc], str):
					raise ValueError(f"{doc} must be a string or null")
				kwargs[doc] = obj[doc]
		if "diagnostic_items" in obj:
			items = obj["diagnostic_items"]
			if not isinstance(items, Mapping):
				raise ValueError("diagnostic_items must be a JSON object")
			resolved: dict[str, DefId] = {}
			for name, path in items.items():
				if not isinstance(path, str) or not path:
					raise ValueError(f"diagnostic item '{name}' must name a path")
				resolved[name] = def_id_from_path(path)
			kwargs["diagnostic_items"] = resolved
		return cls(**kwargs)


def def_id_from_path(path: str) -> DefId:
	"""`a::b::Name` -> DefId("a::b", "Name"); a bare name lives in `main`."""
	module, sep, name = path.rpartition("::")
	if not sep:
		return DefId("main", name)
	return DefId(module, name)


def load_session_config(path: Path) -> SessionConfig:
	obj = json.loads(path.read_text(encoding="utf-8"))
	return SessionConfig.from_mapping(obj)


__all__ = [
	"SessionConfig",
	"load_session_config",
	"def_id_from_path",
	"DEFAULT_IMPL_TRAIT_DOCS",
	"DEFAULT_TRAIT_OBJECT_DOCS",
]
