"""
Node registry for execution engine
Maps node type strings to node classes and dispatches execution
"""
from typing import Dict, List, Type, Optional

from ..types import NodeData, NodeInputs, NodeOutput
from .errors import NodeExecutionError
from .node_base import BaseNode, ExecutionContext
from ...utils.logger import get_logger

logger = get_logger(__name__)

# Registry mapping node type -> node class
NODE_REGISTRY: Dict[str, Type[BaseNode]] = {}


def register_node(node_type: str, node_class: Optional[Type[BaseNode]] = None):
    """
    Register a node type

    Can be called directly (``register_node("chip", ChipNode)``) or used as a
    class decorator (``@register_node("chip")``). Registering an existing type
    replaces it.

    Args:
        node_type: String identifier for the node type (e.g., "display-text")
        node_class: Node class that extends BaseNode
    """
    if node_class is None:
        def decorator(cls: Type[BaseNode]) -> Type[BaseNode]:
            register_node(node_type, cls)
            return cls
        return decorator

    if not (isinstance(node_class, type) and issubclass(node_class, BaseNode)):
        raise TypeError(f"Node class for '{node_type}' must extend BaseNode")

    if node_type in NODE_REGISTRY and NODE_REGISTRY[node_type] is not node_class:
        logger.debug(f"Replacing node type '{node_type}' ({NODE_REGISTRY[node_type].__name__} -> {node_class.__name__})")
    NODE_REGISTRY[node_type] = node_class
    return node_class


def unregister_node(node_type: str) -> None:
    """Remove a node type (no-op if it was never registered)"""
    NODE_REGISTRY.pop(node_type, None)


def get_node_class(node_type: str) -> Optional[Type[BaseNode]]:
    """
    Get node class for a given type

    Args:
        node_type: String identifier for the node type

    Returns:
        Node class or None if not found
    """
    return NODE_REGISTRY.get(node_type)


def list_node_types() -> List[str]:
    """Registered node types, sorted"""
    return sorted(NODE_REGISTRY)


def create_node(node: NodeData) -> BaseNode:
    """
    Instantiate the node class for a workflow node

    Unknown types fall back to PassthroughNode.
    """
    from .nodes.passthrough import PassthroughNode

    node_type = node.get('type', '')
    node_class = get_node_class(node_type)
    if node_class is None:
        logger.warning(f"Unknown node type: {node_type or '<none>'} (node {node['id']}), passing through")
        node_class = PassthroughNode
    return node_class(node['id'], node)


async def execute_node(node: NodeData, inputs: NodeInputs, context: ExecutionContext) -> NodeOutput:
    """
    Execute a single node

    Args:
        node: Node to execute
        inputs: Input data for the node
        context: Execution context (API keys, etc.)

    Returns:
        Node output keyed by output handle

    Raises:
        NodeExecutionError: If the node's computation fails
    """
    instance = create_node(node)
    try:
        outputs = await instance.execute(inputs, context)
    except NodeExecutionError:
        raise
    except Exception as e:
        raise NodeExecutionError(node['id'], str(e) or type(e).__name__, instance.node_type) from e

    if outputs is None:
        return {}
    if not isinstance(outputs, dict):
        raise NodeExecutionError(
            node['id'],
            f"Node type '{instance.node_type}' returned {type(outputs).__name__}, expected dict",
            instance.node_type
        )
    return outputs


# Import and register all node types
# This ensures nodes are registered when the module is imported
def _register_all_nodes():
    """Register all built-in node types"""
    from .nodes.display_text import DisplayTextNode
    from .nodes.chip import ChipNode
    from .nodes.media import MediaNode

    register_node("display-text", DisplayTextNode)
    register_node("markdown", DisplayTextNode)
    register_node("chip", ChipNode)
    register_node("media", MediaNode)


# Auto-register on import
_register_all_nodes()

