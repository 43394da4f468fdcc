"""
boundadvisor.suggest: explanations and fix-it suggestions for failed bounds.

Modules:
  - context: AdvisorContext, the per-invocation read-only context
  - cause_notes: cause-chain walker
  - async_await: capture-across-suspension analyzer
  - restrict_bound: restrict a generic parameter or associated type
  - borrow: borrow/unborrow/mutability rules
  - fn_call: call-the-callable rule
  - returns: semicolon, `dyn Trait` return type and returned-value labels
  - assoc_items: fully qualified paths for associated consts/types
  - arg_mismatch: argument count/shape mismatch reporter
  - engine: fixed-order pipeline (report_unsatisfied_bound)
"""

__all__ = [
	"context",
	"cause_notes",
	"async_await",
	"restrict_bound",
	"borrow",
	"fn_call",
	"returns",
	"assoc_items",
	"arg_mismatch",
	"engine",
]
