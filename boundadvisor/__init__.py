# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
boundadvisor: explanations and fix-it suggestions for unsatisfied trait bounds.

Layers:
  core:    spans, source text, diagnostics, interned types
  hir:     read-only syntax tree shapes and the tree store
  traits:  obligations, cause codes, evaluation interface, reference solver
  suggest: cause-chain walker, async capture analyzer, suggestion rules,
           argument mismatch reporter and the fixed-order engine
"""

__all__ = ["core", "hir", "traits", "suggest", "config", "errors", "typeck"]
