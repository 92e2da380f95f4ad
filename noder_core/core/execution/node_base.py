"""
Base node class for execution engine
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum
import copy

from ..types import NodeID, NodeData, NodeInputs, NodeOutput


class NodeState(Enum):
    """
    Lifecycle of a single node within one run

    PENDING: Not started yet
    RUNNING: Start notification fired, computation in flight
    COMPLETED: Outputs recorded
    FAILED: Start notification or computation raised
    """
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ExecutionContext:
    """Context passed to nodes during execution"""
    api_keys: Dict[str, str] = field(default_factory=dict)  # Provider credentials (replicate, openrouter, ...)
    variables: Dict[str, Any] = field(default_factory=dict)  # Caller supplied runtime values

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ExecutionContext":
        """
        Build a context from a plain dict

        ``apiKeys`` / ``api_keys`` populate the credentials; every other key
        becomes a variable.
        """
        if data is None:
            return cls()
        if isinstance(data, cls):
            return data
        data = dict(data)
        camel_keys = data.pop('apiKeys', None)
        snake_keys = data.pop('api_keys', None)
        api_keys = camel_keys or snake_keys or {}
        return cls(api_keys=dict(api_keys), variables=data)


class BaseNode(ABC):
    """
    Base class for all execution nodes

    Each node:
    - Has a unique ID
    - Receives its resolved inputs and the editor's configuration (``config``)
    - Returns a dict of output port name -> value
    """

    def __init__(self, node_id: NodeID, node_data: NodeData):
        """
        Initialize node

        Args:
            node_id: Unique node identifier
            node_data: Node data from workflow JSON
        """
        self.node_id = node_id
        self.node_data = node_data
        self.node_type = node_data.get('type', '')
        # Deep copy so a node cannot mutate the caller's workflow
        self.config: Dict[str, Any] = copy.deepcopy(node_data.get('data') or {})

    @abstractmethod
    async def execute(self, inputs: NodeInputs, context: ExecutionContext) -> NodeOutput:
        """
        Execute the node

        Args:
            inputs: Resolved inputs keyed by target handle
            context: Execution context with credentials and variables

        Returns:
            Dictionary of output values (keys match output handle names)
        """
        pass

    def get_input_value(self, inputs: NodeInputs, handle: str, default: Any = None) -> Any:
        """
        Get the raw value(s) connected to an input handle

        Args:
            inputs: Resolved inputs
            handle: Input handle name
            default: Returned when nothing is connected

        Returns:
            The connected value, or a list of values for fan-in
        """
        connected = inputs.get(handle)
        if connected is None:
            return default
        if isinstance(connected, list):
            return [item.get('value') for item in connected]
        return connected.get('value', default)
