"""
Run results and execution events
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional

from ..types import NodeID, NodeData, NodeOutput, NodeOutputs, ProgressData
from .node_base import NodeState
from ...utils.serialization import make_serializable


class RunState(str, Enum):
    """State of a whole workflow run"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class WorkflowRunResult:
    """Outcome of one run; created fresh for every invocation"""
    workflow_id: str
    success: bool = False
    completed_count: int = 0
    node_outputs: NodeOutputs = field(default_factory=dict)
    node_errors: Dict[NodeID, BaseException] = field(default_factory=dict)
    error: Optional[str] = None
    duration: float = 0.0  # Seconds
    state: RunState = RunState.PENDING
    node_states: Dict[NodeID, NodeState] = field(default_factory=dict)
    # Layers of node ids, for highlighting in the editor
    execution_order: List[List[NodeID]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape the editor expects"""
        data: Dict[str, Any] = {
            'success': self.success,
            'workflowId': self.workflow_id,
            'duration': self.duration,
            'completedCount': self.completed_count,
            'nodeOutputs': make_serializable(self.node_outputs),
            'state': self.state.value,
            'nodeStates': {node_id: state.value for node_id, state in self.node_states.items()},
            'executionOrder': self.execution_order,
        }
        if self.node_errors:
            data['nodeErrors'] = {node_id: str(err) for node_id, err in self.node_errors.items()}
        if self.error is not None:
            data['error'] = self.error
        return data


class EventType(str, Enum):
    NODE_START = "node_start"
    NODE_COMPLETE = "node_complete"
    NODE_ERROR = "node_error"
    PROGRESS = "progress"
    RUN_COMPLETE = "run_complete"


@dataclass
class ExecutionEvent:
    """A single notification emitted while a workflow runs"""
    type: EventType
    node: Optional[NodeData] = None
    outputs: Optional[NodeOutput] = None
    error: Optional[BaseException] = None
    progress: Optional[ProgressData] = None
    result: Optional[WorkflowRunResult] = None

    @property
    def node_id(self) -> Optional[NodeID]:
        return self.node['id'] if self.node else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict"""
        data: Dict[str, Any] = {'type': self.type.value}
        if self.node is not None:
            data['nodeId'] = self.node['id']
        if self.outputs is not None:
            data['outputs'] = make_serializable(self.outputs)
        if self.error is not None:
            data['error'] = str(self.error)
        if self.progress is not None:
            data['progress'] = dict(self.progress)
        if self.result is not None:
            data['result'] = self.result.to_dict()
        return data
