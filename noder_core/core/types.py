"""
Type definitions for Noder Core

This module provides:
- Type aliases for common types
- TypedDict for the workflow wire format (nodes, edges, graph entries)
- TypedDict for progress reporting
"""
from typing import TypedDict, TypeAlias, Optional, Dict, Any, List, Union
from typing_extensions import NotRequired


# ============================================================================
# Type Aliases
# ============================================================================

NodeID: TypeAlias = str
HandleID: TypeAlias = str
WorkflowID: TypeAlias = str


# ============================================================================
# Workflow Wire Format
# ============================================================================

class NodeData(TypedDict):
    """A single node as sent by the editor"""
    id: NodeID
    type: str  # Node type (e.g., "display-text", "chip", "media")
    data: NotRequired[Dict[str, Any]]  # Opaque configuration, passed to the node unmodified
    position: NotRequired[Dict[str, float]]  # {"x": 0.0, "y": 0.0}


class EdgeData(TypedDict):
    """Directed connection from an output port to an input port"""
    source: NodeID
    target: NodeID
    sourceHandle: Optional[HandleID]
    targetHandle: Optional[HandleID]
    id: NotRequired[str]


class GraphDependent(TypedDict):
    """Adjacency entry for one outgoing edge"""
    targetId: NodeID
    sourceHandle: Optional[HandleID]
    targetHandle: Optional[HandleID]


class InputDataWithMeta(TypedDict, total=False):
    """Resolved input value annotated with where it came from"""
    type: str
    value: Any
    sourceNode: NodeID
    sourceHandle: Optional[HandleID]


# Node inputs - a single connection resolves to a dict, several to a list
NodeInputs: TypeAlias = Dict[HandleID, Union[Dict[str, Any], List[Dict[str, Any]]]]

# Output port name -> value ({"type": ..., "value": ..., ...})
NodeOutput: TypeAlias = Dict[HandleID, Any]

# Node id -> that node's outputs
NodeOutputs: TypeAlias = Dict[NodeID, NodeOutput]


class ProgressData(TypedDict):
    """Payload of a progress notification"""
    completed: int
    total: int
    percentage: int


class WorkflowPayload(TypedDict):
    """A runnable workflow (nodes plus edges)"""
    nodes: List[NodeData]
    edges: List[EdgeData]
    id: NotRequired[WorkflowID]
    name: NotRequired[str]
    metadata: NotRequired[Dict[str, Any]]
