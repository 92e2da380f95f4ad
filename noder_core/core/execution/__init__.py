"""
Execution Engine for Noder Core
Provides DAG-based workflow execution for the node editor
"""
from .engine import ExecutionEngine, run_workflow_dag, run_single_node
from .errors import WorkflowError, CycleError, NodeNotFoundError, NodeExecutionError
from .graph import DependencyGraph, build_dependency_graph, topological_sort, get_upstream_nodes
from .inputs import get_node_inputs
from .node_base import BaseNode, ExecutionContext, NodeState
from .node_registry import NODE_REGISTRY, register_node, unregister_node, get_node_class, list_node_types, execute_node
from .result import WorkflowRunResult, RunState, ExecutionEvent, EventType

__all__ = [
    'ExecutionEngine',
    'run_workflow_dag',
    'run_single_node',
    'WorkflowError',
    'CycleError',
    'NodeNotFoundError',
    'NodeExecutionError',
    'DependencyGraph',
    'build_dependency_graph',
    'topological_sort',
    'get_upstream_nodes',
    'get_node_inputs',
    'BaseNode',
    'ExecutionContext',
    'NodeState',
    'NODE_REGISTRY',
    'register_node',
    'unregister_node',
    'get_node_class',
    'list_node_types',
    'execute_node',
    'WorkflowRunResult',
    'RunState',
    'ExecutionEvent',
    'EventType',
]
