"""
Input resolution: gathers the values flowing into a node through its edges
"""
from typing import Any, Dict, List, Sequence

from ..types import NodeData, EdgeData, NodeInputs, NodeOutputs, HandleID

DEFAULT_HANDLE = 'default'


def get_node_inputs(
    node: NodeData,
    edges: Sequence[EdgeData],
    nodes: Sequence[NodeData],
    node_outputs: NodeOutputs
) -> NodeInputs:
    """
    Get input data for a node from its upstream outputs

    Edges whose source has no recorded output, or whose port is missing or holds None
    (with no "default" port to fall back on), are skipped. A target port fed by one
    edge gets a single dict; a port fed by several edges gets a list in edge
    order.

    Args:
        node: Target node
        edges: Workflow edges
        nodes: All workflow nodes
        node_outputs: Outputs recorded so far (not modified)

    Returns:
        Map of target handle -> annotated value (or list of annotated values)
    """
    known_ids = {n['id'] for n in nodes}
    inputs_by_handle: Dict[HandleID, List[Dict[str, Any]]] = {}

    for edge in edges:
        if edge['target'] != node['id']:
            continue

        source_id = edge['source']
        if source_id not in known_ids:
            continue

        source_output = node_outputs.get(source_id)
        if not source_output:
            continue

        source_handle = edge.get('sourceHandle')
        handle_key = source_handle or DEFAULT_HANDLE
        # An empty named port still falls back to "default"
        output_data = source_output.get(handle_key)
        if output_data is None:
            output_data = source_output.get(DEFAULT_HANDLE)
        if output_data is None:
            continue

        data_with_meta = _annotate(output_data, source_id, source_handle)

        target_handle = edge.get('targetHandle') or DEFAULT_HANDLE
        inputs_by_handle.setdefault(target_handle, []).append(data_with_meta)

    inputs: NodeInputs = {}
    for handle, connections in inputs_by_handle.items():
        inputs[handle] = connections[0] if len(connections) == 1 else connections

    return inputs


def _annotate(output_data: Any, source_id: str, source_handle: Any) -> Dict[str, Any]:
    """Copy an output value and attach its provenance"""
    if isinstance(output_data, dict):
        data = dict(output_data)
    else:
        data = {'value': output_data}
    data['sourceNode'] = source_id
    data['sourceHandle'] = source_handle
    return data
