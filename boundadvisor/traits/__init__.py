"""
boundadvisor.traits: obligations, cause codes and the solver interface.

Modules:
  - obligation: TraitRef, Obligation, ObligationCause and the cause-code catalog
  - evaluate: EvaluationResult and the Solver protocol
  - solver: ImplWorld, the in-memory reference solver
"""

__all__ = ["obligation", "evaluate", "solver"]
