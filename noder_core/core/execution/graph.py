"""
Dependency graph construction and topological layering
"""
from collections import deque
from typing import Dict, List, NamedTuple, Sequence, Set

from ..types import NodeData, EdgeData, GraphDependent, NodeID
from .errors import CycleError


class DependencyGraph(NamedTuple):
    """Structures derived from a node list and an edge list"""
    graph: Dict[NodeID, List[GraphDependent]]  # node -> outgoing edges, one entry per edge
    in_degree: Dict[NodeID, int]  # node -> number of incoming edges (duplicates counted)
    dependencies: Dict[NodeID, List[NodeID]]  # node -> distinct direct predecessors, first-seen order


def build_dependency_graph(nodes: Sequence[NodeData], edges: Sequence[EdgeData]) -> DependencyGraph:
    """
    Build a dependency graph from edges

    Edges that reference ids missing from ``nodes`` are tolerated and get
    entries of their own. An edge from an unknown source still counts toward
    its target's in-degree.

    Args:
        nodes: Workflow nodes
        edges: Workflow edges

    Returns:
        DependencyGraph with adjacency, in-degree and predecessor maps
    """
    graph: Dict[NodeID, List[GraphDependent]] = {}
    in_degree: Dict[NodeID, int] = {}
    dependencies: Dict[NodeID, List[NodeID]] = {}

    # Initialize all nodes
    for node in nodes:
        graph[node['id']] = []
        in_degree[node['id']] = 0
        dependencies[node['id']] = []

    for edge in edges:
        source_id = edge['source']
        target_id = edge['target']

        graph.setdefault(source_id, []).append({
            'targetId': target_id,
            'sourceHandle': edge.get('sourceHandle'),
            'targetHandle': edge.get('targetHandle'),
        })

        in_degree[target_id] = in_degree.get(target_id, 0) + 1

        deps = dependencies.setdefault(target_id, [])
        if source_id not in deps:
            deps.append(source_id)

    return DependencyGraph(graph, in_degree, dependencies)


def topological_sort(
    nodes: Sequence[NodeData],
    graph: Dict[NodeID, List[GraphDependent]],
    in_degree: Dict[NodeID, int]
) -> List[List[NodeData]]:
    """
    Split nodes into execution layers (Kahn's algorithm, one level at a time)

    Every node's predecessors sit in strictly earlier layers, so the nodes of
    one layer can run concurrently. Within a layer nodes keep their order in
    ``nodes``.

    Args:
        nodes: Workflow nodes
        graph: Adjacency map from build_dependency_graph
        in_degree: In-degree map from build_dependency_graph

    Returns:
        List of layers, each a list of nodes

    Raises:
        CycleError: If some nodes can never reach in-degree zero
    """
    remaining: Dict[NodeID, int] = dict(in_degree)
    position: Dict[NodeID, int] = {node['id']: index for index, node in enumerate(nodes)}
    visited: Set[NodeID] = set()
    layers: List[List[NodeData]] = []

    current_layer = [node for node in nodes if remaining.get(node['id'], 0) == 0]

    while current_layer:
        layers.append(current_layer)
        visited.update(node['id'] for node in current_layer)

        ready: Set[NodeID] = set()
        for node in current_layer:
            for dependent in graph.get(node['id'], []):
                target_id = dependent['targetId']
                remaining[target_id] = remaining.get(target_id, 0) - 1
                if remaining[target_id] == 0 and target_id in position and target_id not in visited:
                    ready.add(target_id)

        current_layer = [nodes[index] for index in sorted(position[node_id] for node_id in ready)]

    if len(visited) < len(nodes):
        unvisited = [node['id'] for node in nodes if node['id'] not in visited]
        raise CycleError(
            f"Cyclic dependency detected. Cannot execute nodes: {', '.join(unvisited)}"
        )

    return layers


def get_upstream_nodes(node_id: NodeID, dependencies: Dict[NodeID, List[NodeID]]) -> Set[NodeID]:
    """
    Collect every node the given node transitively depends on

    Args:
        node_id: Node whose upstream closure is wanted
        dependencies: Predecessor map from build_dependency_graph

    Returns:
        Set of upstream node ids (the node itself is not included unless it
        sits on a cycle)
    """
    upstream: Set[NodeID] = set()
    queue = deque([node_id])

    while queue:
        current = queue.popleft()
        for dep in dependencies.get(current, []):
            if dep not in upstream:
                upstream.add(dep)
                queue.append(dep)

    return upstream
