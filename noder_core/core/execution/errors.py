"""
Exceptions raised by the execution engine
"""
from typing import Optional

from ..types import NodeID


class WorkflowError(Exception):
    """Base class for workflow construction and execution errors"""
    pass


class CycleError(WorkflowError, ValueError):
    """Raised when a cycle is detected in the workflow graph"""
    pass


class NodeNotFoundError(WorkflowError, KeyError):
    """Raised when a requested node id is not part of the workflow"""

    def __init__(self, node_id: NodeID):
        self.node_id = node_id
        super().__init__(f"Node {node_id} not found")

    def __str__(self) -> str:
        # KeyError would otherwise quote the message
        return self.args[0]


class NodeExecutionError(WorkflowError):
    """
    Raised when a node's computation fails

    The message is the underlying failure only; the engine adds the node id
    when it builds the run-level error.
    """

    def __init__(self, node_id: NodeID, message: str, node_type: Optional[str] = None):
        self.node_id = node_id
        self.node_type = node_type
        super().__init__(message)
