"""
Workflow documents

Builds, normalizes and loads the workflow JSON the editor saves, with
consistent metadata and versioning.
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from .execution.errors import WorkflowError
from .types import NodeData, EdgeData

WORKFLOW_SCHEMA_VERSION = '0.1.0'
WORKFLOW_SCHEMA_ID = 'noder.workflow@0.1'
DEFAULT_WORKFLOW_NAME = 'Untitled Workflow'
DEFAULT_APP = {'product': 'noder', 'flavor': 'desktop'}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def build_metadata(metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Fill workflow metadata with defaults

    Args:
        metadata: Partial metadata (name, description, version, schema, app,
            createdAt, updatedAt)

    Returns:
        Complete metadata dict
    """
    metadata = metadata or {}
    created_at = metadata.get('createdAt') or _now_iso()
    return {
        'name': metadata.get('name') or DEFAULT_WORKFLOW_NAME,
        'description': metadata.get('description') or '',
        'version': metadata.get('version') or WORKFLOW_SCHEMA_VERSION,
        'schema': metadata.get('schema') or WORKFLOW_SCHEMA_ID,
        'app': metadata.get('app') or dict(DEFAULT_APP),
        'createdAt': created_at,
        'updatedAt': metadata.get('updatedAt') or _now_iso(),
    }


def build_workflow_document(
    nodes: Optional[List[NodeData]] = None,
    edges: Optional[List[EdgeData]] = None,
    workflow_id: Optional[str] = None,
    name: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    outputs: Optional[List[Dict[str, Any]]] = None,
    viewport: Optional[Dict[str, float]] = None,
) -> Dict[str, Any]:
    """
    Build a complete workflow document

    Args:
        nodes: Workflow nodes
        edges: Workflow edges
        workflow_id: Document id (defaults to a slug of the name)
        name: Workflow name; overrides metadata["name"]
        metadata: Partial metadata
        outputs: Saved outputs shown by the editor
        viewport: Editor viewport

    Returns:
        Workflow document dict
    """
    merged = dict(metadata or {})
    if name:
        merged['name'] = name
    full_metadata = build_metadata(merged)

    document: Dict[str, Any] = {
        'id': workflow_id or _slugify(full_metadata['name']),
        'name': full_metadata['name'],
        'schema': full_metadata['schema'],
        'version': full_metadata['version'],
        'metadata': full_metadata,
        'nodes': list(nodes or []),
        'edges': list(edges or []),
        'outputs': list(outputs or []),
    }
    if viewport is not None:
        document['viewport'] = viewport
    return document


def normalize_workflow(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn a saved payload into a workflow document

    Accepts both bare documents and payloads wrapped in a "data" key.

    Raises:
        WorkflowError: If nodes or edges are malformed
    """
    if not isinstance(payload, dict):
        raise WorkflowError("Workflow payload must be a JSON object")

    inner = payload.get('data') if isinstance(payload.get('data'), dict) else {}
    source = {**payload, **inner}

    nodes = source.get('nodes') or []
    edges = source.get('edges') or []
    _validate_nodes(nodes)
    _validate_edges(edges)

    metadata = dict(source.get('metadata') or {})
    if source.get('name') and not metadata.get('name'):
        metadata['name'] = source['name']

    return build_workflow_document(
        nodes=nodes,
        edges=edges,
        workflow_id=source.get('id'),
        metadata=metadata,
        outputs=source.get('outputs'),
        viewport=source.get('viewport'),
    )


def load_workflow(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a workflow document from a JSON file

    Args:
        path: File path

    Returns:
        Normalized workflow document

    Raises:
        WorkflowError: If the file is missing, not JSON, or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise WorkflowError(f"Workflow file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise WorkflowError(f"Invalid workflow JSON in {path}: {e}") from e

    return normalize_workflow(payload)


def save_workflow(document: Dict[str, Any], path: Union[str, Path]) -> Path:
    """Write a workflow document to disk, refreshing updatedAt"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    document = dict(document)
    document['metadata'] = build_metadata({**document.get('metadata', {}), 'updatedAt': _now_iso()})
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2)
    return path


def _validate_nodes(nodes: Any) -> None:
    if not isinstance(nodes, list):
        raise WorkflowError("Workflow 'nodes' must be a list")
    seen = set()
    for index, node in enumerate(nodes):
        if not isinstance(node, dict) or not isinstance(node.get('id'), str):
            raise WorkflowError(f"Node at index {index} has no string 'id'")
        if node['id'] in seen:
            raise WorkflowError(f"Duplicate node id: {node['id']}")
        seen.add(node['id'])


def _validate_edges(edges: Any) -> None:
    if not isinstance(edges, list):
        raise WorkflowError("Workflow 'edges' must be a list")
    for index, edge in enumerate(edges):
        if not isinstance(edge, dict) or 'source' not in edge or 'target' not in edge:
            raise WorkflowError(f"Edge at index {index} needs 'source' and 'target'")


def _slugify(name: str) -> str:
    slug = ''.join(ch.lower() if ch.isalnum() else '-' for ch in name).strip('-')
    while '--' in slug:
        slug = slug.replace('--', '-')
    return slug or 'workflow'
