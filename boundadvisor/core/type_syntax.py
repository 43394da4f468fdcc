# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reader for type expressions spelled the way users write them.

The advisor never parses programs, but the checker hands it annotation text
(and tests describe fixtures with it), so this module turns strings such as
`&'a mut Vec<T>`, `Box<dyn Display + Send>` or `<T as Iterator>::Item` into
interned TypeIds. Parse errors surface as lark's `UnexpectedInput`.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Optional

from lark import Lark, Token, Tree

from .def_id import DefId
from .types_core import RE_STATIC, Region, RegionKind, TypeId, TypeTable

_GRAMMAR_PATH = Path(__file__).with_name("type_grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

SCALAR_NAMES = frozenset(
	{
		"bool",
		"char",
		"i8",
		"i16",
		"i32",
		"i64",
		"i128",
		"isize",
		"u8",
		"u16",
		"u32",
		"u64",
		"u128",
		"usize",
		"f32",
		"f64",
	}
)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _subtrees(tree: Tree) -> List[Tree]:
	return [child for child in tree.children if isinstance(child, Tree)]


def parse_type_tree(text: str) -> Tree:
	"""Parse `text` into the raw lark tree (root rule names the type shape)."""
	tree = _PARSER.parse(text)
	# `?start` inlines into the single type child.
	if _name(tree) == "start":
		return _subtrees(tree)[0]
	return tree


def type_syntax_kind(text: str) -> str:
	"""
	Name of the outermost syntactic form of `text`.

	One of `ref_type`, `dyn_type`, `impl_type`, `tuple_type`, `slice_type`,
	`fn_ptr`, `qualified_path`, `path_type`, `infer`, `never`. Parenthesized
	types report their contents.
	"""
	tree = parse_type_tree(text)
	while _name(tree) == "paren_type":
		tree = _subtrees(tree)[0]
	return _name(tree)


class _TypeBuilder:
	def __init__(
		self,
		table: TypeTable,
		params: Mapping[str, TypeId],
		module: str,
		defs: Mapping[str, DefId],
	) -> None:
		self.table = table
		self.params = params
		self.module = module
		self.defs = defs

	def resolve_def(self, segments: List[str]) -> DefId:
		path = "::".join(segments)
		known = self.defs.get(path) or self.defs.get(segments[-1])
		if known is not None:
			return known
		if len(segments) == 1:
			return DefId(self.module, segments[0])
		return DefId("::".join(segments[:-1]), segments[-1])

	def path_parts(self, tree: Tree) -> tuple[List[str], List[TypeId]]:
		segments = [tok.value for tok in tree.children if isinstance(tok, Token) and tok.type == "NAME"]
		args: List[TypeId] = []
		for sub in _subtrees(tree):
			if _name(sub) == "generic_args":
				args = [self.build(arg) for arg in sub.children if isinstance(arg, Tree)]
		return segments, args

	def bound_defs(self, tree: Tree) -> List[DefId]:
		out: List[DefId] = []
		for bound in _subtrees(tree):
			segments, _args = self.path_parts(_subtrees(bound)[0])
			out.append(self.resolve_def(segments))
		return out

	def build(self, tree: Tree) -> TypeId:
		name = _name(tree)
		table = self.table
		if name == "ref_type":
			region: Optional[Region] = None
			mut = False
			for child in tree.children:
				if isinstance(child, Token) and child.type == "LIFETIME":
					region = RE_STATIC if child.value == "'static" else Region(RegionKind.NAMED, child.value)
				elif isinstance(child, Token) and child.type == "MUT":
					mut = True
			inner = self.build(_subtrees(tree)[0])
			return table.new_ref(inner, mut, region)
		if name == "dyn_type":
			return table.new_dynamic(self.bound_defs(tree))
		if name == "impl_type":
			bounds = self.bound_defs(tree)
			label = " + ".join(b.name for b in bounds)
			return table.new_opaque(DefId(self.module, f"impl {label}"), bounds)
		if name == "tuple_type":
			return table.new_tuple([self.build(sub) for sub in _subtrees(tree)])
		if name == "paren_type":
			return self.build(_subtrees(tree)[0])
		if name == "slice_type":
			return table.new_slice(self.build(_subtrees(tree)[0]))
		if name == "fn_ptr":
			inputs: List[TypeId] = []
			output = table.unit()
			for sub in _subtrees(tree):
				if _name(sub) == "fn_inputs":
					inputs = [self.build(arg) for arg in _subtrees(sub)]
				elif _name(sub) == "fn_ret":
					output = self.build(_subtrees(sub)[0])
			return table.new_fnptr(inputs, output)
		if name == "qualified_path":
			self_tree, trait_tree = _subtrees(tree)[:2]
			item = [tok for tok in tree.children if isinstance(tok, Token) and tok.type == "NAME"][-1]
			segments, _args = self.path_parts(trait_tree)
			return table.new_projection(self.resolve_def(segments), item.value, self.build(self_tree))
		if name == "path_type":
			segments, args = self.path_parts(tree)
			if len(segments) == 1 and not args:
				only = segments[0]
				if only in self.params:
					return self.params[only]
				if only == "Self":
					return table.self_param
				if only in SCALAR_NAMES:
					return table.new_scalar(only)
				if only == "str":
					return table.new_str()
			return table.new_adt(self.resolve_def(segments), args)
		if name == "infer":
			return table.new_infer()
		if name == "never":
			return table.new_never()
		raise ValueError(f"unsupported type syntax node: {name}")


def parse_type(
	text: str,
	table: TypeTable,
	*,
	params: Mapping[str, TypeId] | None = None,
	module: str = "main",
	defs: Mapping[str, DefId] | None = None,
) -> TypeId:
	"""
	Intern the type spelled by `text`.

	`params` maps in-scope generic parameter names to their TypeIds; `defs`
	pins names (or full paths) to existing DefIds, e.g. `Box` or `Display`.
	Any other path becomes an ADT/trait DefId in `module` (single segment) or
	in the path's own prefix.
	"""
	builder = _TypeBuilder(table, params or {}, module, defs or {})
	return builder.build(parse_type_tree(text))


__all__ = ["parse_type", "parse_type_tree", "type_syntax_kind", "SCALAR_NAMES"]
