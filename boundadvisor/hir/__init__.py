"""
boundadvisor.hir: read-only syntax tree shapes and the tree store.

Modules:
  - nodes: HIR node and container dataclasses
  - map: HirStore protocol and the ProgramTree registry
  - visit: return-expression collection
"""

__all__ = ["nodes", "map", "visit"]
