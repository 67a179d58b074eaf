"""
Operations layer for agentic-kit.

Transport-agnostic functions that take an :class:`OperationContext` and
return an :class:`OperationResult`.  The CLI only parses arguments and
renders results; everything with side effects lives here.
"""

from agentic_kit.ops.context import OperationContext
from agentic_kit.ops.result import OperationError, OperationResult

__all__ = ["OperationContext", "OperationError", "OperationResult"]
