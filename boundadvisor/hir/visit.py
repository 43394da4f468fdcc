# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Iterator, List

from boundadvisor.hir import nodes as H


def iter_child_exprs(expr: H.HNode) -> Iterator[H.HExpr]:
	"""Direct sub-expressions of `expr`, looking through blocks and statements."""
	for f in fields(expr):
		val = getattr(expr, f.name)
		items = val if isinstance(val, list) else [val]
		for item in items:
			if isinstance(item, H.HExpr):
				yield item
			elif isinstance(item, (H.HBlock, H.HStmt, H.HLocal)):
				yield from iter_child_exprs(item)


class ReturnsVisitor:
	"""
	Collect the values a function body returns.

	`return <expr>` values anywhere in the body, plus the tail expression of a
	plain (non-generator) body. Closure bodies are nested bodies and are not
	entered.
	"""

	def __init__(self) -> None:
		self.returns: List[H.HExpr] = []

	def visit_body(self, body: H.HBody) -> List[H.HExpr]:
		if body.generator_kind is None and isinstance(body.value, H.HExprBlock):
			if body.value.block.expr is not None:
				self.returns.append(body.value.block.expr)
		if body.value is not None:
			self.visit_expr(body.value)
		return self.returns

	def visit_expr(self, expr: H.HExpr) -> None:
		if isinstance(expr, H.HRet) and expr.value is not None:
			self.returns.append(expr.value)
		if isinstance(expr, H.HClosure):
			return
		for child in iter_child_exprs(expr):
			self.visit_expr(child)


def collect_returns(body: H.HBody) -> List[H.HExpr]:
	return ReturnsVisitor().visit_body(body)


__all__ = ["ReturnsVisitor", "collect_returns", "iter_child_exprs"]
