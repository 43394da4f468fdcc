# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from boundadvisor.config import (
	DEFAULT_IMPL_TRAIT_DOCS,
	SessionConfig,
	def_id_from_path,
	load_session_config,
)
from boundadvisor.core.def_id import DefId


def test_defaults() -> None:
	cfg = SessionConfig.from_mapping({})
	assert cfg.recursion_limit == 128
	assert cfg.unsized_locals is False
	assert cfg.impl_trait_docs == DEFAULT_IMPL_TRAIT_DOCS
	assert dict(cfg.diagnostic_items) == {}


def test_load_from_file(tmp_path: Path) -> None:
	path = tmp_path / "session.json"
	path.write_text(
		json.dumps(
			{
				"recursion_limit": 16,
				"unsized_locals": True,
				"diagnostic_items": {"send_trait": "core::marker::Send"},
				"trait_object_docs": None,
			}
		),
		encoding="utf-8",
	)
	cfg = load_session_config(path)
	assert cfg.recursion_limit == 16
	assert cfg.unsized_locals is True
	assert cfg.trait_object_docs is None
	assert cfg.is_diagnostic_item("send_trait", DefId("core::marker", "Send"))
	assert not cfg.is_diagnostic_item("sync_trait", DefId("core::marker", "Send"))


@pytest.mark.parametrize(
	"obj",
	[
		{"recursion_limit": 0},
		{"recursion_limit": True},
		{"unsized_locals": "yes"},
		{"impl_trait_docs": 3},
		{"diagnostic_items": ["send_trait"]},
		{"diagnostic_items": {"send_trait": ""}},
		{"colour": "auto"},
	],
)
def test_rejects_malformed_config(obj: dict) -> None:
	with pytest.raises(ValueError):
		SessionConfig.from_mapping(obj)


def test_rejects_non_object() -> None:
	with pytest.raises(ValueError):
		SessionConfig.from_mapping([1, 2])  # type: ignore[arg-type]


def test_def_id_from_path() -> None:
	assert def_id_from_path("core::marker::Sized") == DefId("core::marker", "Sized")
	assert def_id_from_path("Widget") == DefId("main", "Widget")
