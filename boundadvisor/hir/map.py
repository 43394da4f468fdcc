# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Read-only access to the syntax tree.

`HirStore` is the narrow interface the advisor queries: node shapes by id,
parent links, spans and a few definition-level facts. `ProgramTree` is the
in-memory store used when the advisor runs on its own (and in tests): it
assigns NodeIds to every node reachable from a crate root and records the
parent of each.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Dict, Optional, Protocol, Tuple, Union

from boundadvisor.core.def_id import DefId, def_path_str
from boundadvisor.core.span import DUMMY_SP, Span
from boundadvisor.errors import internal_error
from boundadvisor.hir import nodes as H

ItemLike = Union[H.HItem, H.HTraitItem, H.HImplItem]


class HirStore(Protocol):
	"""Queries the advisor makes against the checker's syntax tree."""

	def find(self, node_id: H.NodeId) -> Optional[H.HNode]:
		...

	def get_parent_node(self, node_id: H.NodeId) -> H.NodeId:
		"""Syntactic parent; the crate root is its own parent."""
		...

	def get_parent_item(self, node_id: H.NodeId) -> H.NodeId:
		"""Closest enclosing item-like strictly above `node_id`, else the crate root."""
		...

	def span(self, node_id: H.NodeId) -> Span:
		...

	def expect_expr(self, node_id: H.NodeId) -> H.HExpr:
		...

	def get_if_local(self, def_id: DefId) -> Optional[H.HNode]:
		...

	def as_local_node_id(self, def_id: DefId) -> Optional[H.NodeId]:
		...

	def opt_name(self, node_id: H.NodeId) -> Optional[str]:
		...

	def maybe_body_owned_by(self, node_id: H.NodeId) -> Optional[H.HBody]:
		...

	def opt_item_name(self, def_id: DefId) -> Optional[Tuple[str, Span]]:
		"""Name and name span of a local, named definition."""
		...

	def span_if_local(self, def_id: DefId) -> Optional[Span]:
		...

	def parent_def(self, def_id: DefId) -> Optional[DefId]:
		...

	def asyncness(self, def_id: DefId) -> bool:
		...

	def closure_base_def_id(self, def_id: DefId) -> DefId:
		...

	def opt_associated_item(self, def_id: DefId) -> Optional[Union[H.HTraitItem, H.HImplItem]]:
		...


class ProgramTree:
	"""
	Node registry built from an `HCrate`.

	NodeIds are assigned depth-first starting at 1 (the crate). Containers that
	are not `HNode`s are walked through but never get ids, so they do not
	appear in parent chains.
	"""

	def __init__(self, crate: H.HCrate) -> None:
		self.crate = crate
		self._nodes: Dict[H.NodeId, H.HNode] = {}
		self._parents: Dict[H.NodeId, H.NodeId] = {}
		self._defs: Dict[DefId, H.NodeId] = {}
		self._next_id = 1
		self._register(crate, None)

	# Registration

	def _register(self, obj: object, parent: Optional[H.NodeId]) -> None:
		if isinstance(obj, H.HNode):
			obj.node_id = self._next_id
			self._next_id += 1
			self._nodes[obj.node_id] = obj
			self._parents[obj.node_id] = parent if parent is not None else obj.node_id
			def_id = getattr(obj, "def_id", None)
			if isinstance(def_id, DefId):
				self._defs[def_id] = obj.node_id
			parent = obj.node_id
		if not is_dataclass(obj):
			return
		for f in fields(obj):
			self._register_value(getattr(obj, f.name), parent)

	def _register_value(self, val: object, parent: Optional[H.NodeId]) -> None:
		if val is None:
			return
		if isinstance(val, (list, tuple)):
			for item in val:
				self._register_value(item, parent)
			return
		# only HIR shapes; spans and DefIds are leaves
		if is_dataclass(val) and type(val).__module__ == H.__name__:
			self._register(val, parent)

	# Node queries

	@property
	def crate_id(self) -> H.NodeId:
		return self.crate.node_id

	def find(self, node_id: H.NodeId) -> Optional[H.HNode]:
		return self._nodes.get(node_id)

	def get_parent_node(self, node_id: H.NodeId) -> H.NodeId:
		return self._parents.get(node_id, self.crate_id)

	def parent_iter(self, node_id: H.NodeId):
		"""Ancestors of `node_id`, nearest first, ending at the crate root."""
		current = node_id
		while current != self.crate_id:
			current = self.get_parent_node(current)
			yield current

	def get_parent_item(self, node_id: H.NodeId) -> H.NodeId:
		for ancestor in self.parent_iter(node_id):
			if isinstance(self._nodes.get(ancestor), H.ITEM_LIKE):
				return ancestor
		return self.crate_id

	def span(self, node_id: H.NodeId) -> Span:
		node = self._nodes.get(node_id)
		if node is None:
			return DUMMY_SP
		return getattr(node, "span", DUMMY_SP)

	def expect_expr(self, node_id: H.NodeId) -> H.HExpr:
		node = self._nodes.get(node_id)
		if not isinstance(node, H.HExpr):
			raise internal_error(f"expected expression for node {node_id}, found {type(node).__name__}")
		return node

	# Definition queries

	def get_if_local(self, def_id: DefId) -> Optional[H.HNode]:
		node_id = self._defs.get(def_id)
		if node_id is None:
			return None
		return self._nodes.get(node_id)

	def as_local_node_id(self, def_id: DefId) -> Optional[H.NodeId]:
		return self._defs.get(def_id)

	def opt_name(self, node_id: H.NodeId) -> Optional[str]:
		node = self._nodes.get(node_id)
		if isinstance(node, H.ITEM_LIKE):
			return node.name
		return None

	def maybe_body_owned_by(self, node_id: H.NodeId) -> Optional[H.HBody]:
		node = self._nodes.get(node_id)
		if isinstance(node, (H.HClosure, *H.ITEM_LIKE)):
			return node.body
		return None

	def opt_item_name(self, def_id: DefId) -> Optional[Tuple[str, Span]]:
		node = self.get_if_local(def_id)
		if isinstance(node, H.ITEM_LIKE):
			return (node.name, node.ident_span)
		return None

	def span_if_local(self, def_id: DefId) -> Optional[Span]:
		node = self.get_if_local(def_id)
		if node is None:
			return None
		return getattr(node, "span", None)

	def parent_def(self, def_id: DefId) -> Optional[DefId]:
		node_id = self._defs.get(def_id)
		if node_id is None:
			return None
		for ancestor in self.parent_iter(node_id):
			parent_def_id = getattr(self._nodes.get(ancestor), "def_id", None)
			if isinstance(parent_def_id, DefId):
				return parent_def_id
		return None

	def asyncness(self, def_id: DefId) -> bool:
		node = self.get_if_local(def_id)
		sig = getattr(node, "sig", None)
		return bool(sig is not None and sig.is_async)

	def closure_base_def_id(self, def_id: DefId) -> DefId:
		current = def_id
		while isinstance(self.get_if_local(current), H.HClosure):
			parent = self.parent_def(current)
			if parent is None:
				break
			current = parent
		return current

	def opt_associated_item(self, def_id: DefId) -> Optional[Union[H.HTraitItem, H.HImplItem]]:
		node = self.get_if_local(def_id)
		if isinstance(node, (H.HTraitItem, H.HImplItem)):
			return node
		return None

	def def_path_str(self, def_id: DefId) -> str:
		return def_path_str(def_id)


__all__ = ["HirStore", "ProgramTree", "ItemLike"]
