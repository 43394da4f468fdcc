"""
boundadvisor.core: spans, source text, diagnostics and interned types.

Modules:
  - span: offset-based source spans
  - source_map: snippet lookup and span trimming
  - diagnostics: Diagnostic builder populated by the advisor
  - def_id: stable definition identities
  - types_core: TypeId/TypeTable primitives and rendering
  - type_subst: substitution, inference resolution and region erasure
  - type_syntax: lark reader for type expressions
"""

__all__ = [
	"span",
	"source_map",
	"diagnostics",
	"def_id",
	"types_core",
	"type_subst",
	"type_syntax",
]
