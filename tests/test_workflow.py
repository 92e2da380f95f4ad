"""
Tests for workflow document helpers
"""
import json
import pytest

from noder_core.core.execution.errors import WorkflowError
from noder_core.core.workflow import (
    WORKFLOW_SCHEMA_ID,
    WORKFLOW_SCHEMA_VERSION,
    build_workflow_document,
    normalize_workflow,
    load_workflow,
    save_workflow,
)


NODES = [{'id': 'a', 'type': 'chip', 'data': {'content': 'hi'}}, {'id': 'b', 'type': 'display-text', 'data': {}}]
EDGES = [{'source': 'a', 'target': 'b', 'sourceHandle': 'out', 'targetHandle': 'text-in'}]


def test_build_document_defaults():
    document = build_workflow_document()

    assert document['name'] == 'Untitled Workflow'
    assert document['id'] == 'untitled-workflow'
    assert document['schema'] == WORKFLOW_SCHEMA_ID
    assert document['version'] == WORKFLOW_SCHEMA_VERSION
    assert document['nodes'] == []
    assert document['edges'] == []
    assert document['metadata']['createdAt']
    assert 'viewport' not in document


def test_build_document_name_overrides_metadata():
    document = build_workflow_document(NODES, EDGES, name='My Flow!', metadata={'name': 'old'})

    assert document['name'] == 'My Flow!'
    assert document['id'] == 'my-flow'
    assert document['nodes'] == NODES


def test_normalize_wrapped_payload():
    """Payloads saved with a "data" wrapper are unwrapped"""
    payload = {'id': 'wf-1', 'data': {'name': 'Wrapped', 'nodes': NODES, 'edges': EDGES, 'viewport': {'x': 0, 'y': 0, 'zoom': 1}}}

    document = normalize_workflow(payload)

    assert document['id'] == 'wf-1'
    assert document['name'] == 'Wrapped'
    assert document['edges'] == EDGES
    assert document['viewport'] == {'x': 0, 'y': 0, 'zoom': 1}


def test_normalize_keeps_created_at():
    document = normalize_workflow({'nodes': [], 'edges': [], 'metadata': {'createdAt': '2024-01-01T00:00:00Z'}})
    assert document['metadata']['createdAt'] == '2024-01-01T00:00:00Z'


@pytest.mark.parametrize("payload, message", [
    ([], "JSON object"),
    ({'nodes': 'a,b'}, "'nodes' must be a list"),
    ({'nodes': [{'type': 'chip'}]}, "no string 'id'"),
    ({'nodes': [{'id': 'a'}, {'id': 'a'}]}, "Duplicate node id: a"),
    ({'nodes': [], 'edges': [{'source': 'a'}]}, "needs 'source' and 'target'"),
])
def test_normalize_rejects_malformed(payload, message):
    with pytest.raises(WorkflowError, match=message):
        normalize_workflow(payload)


def test_save_and_load(tmp_path):
    document = build_workflow_document(NODES, EDGES, name='Saved')
    path = save_workflow(document, tmp_path / 'nested' / 'saved.json')

    loaded = load_workflow(path)

    assert loaded['name'] == 'Saved'
    assert loaded['nodes'] == NODES
    assert loaded['edges'] == EDGES


def test_load_missing_file(tmp_path):
    with pytest.raises(WorkflowError, match="not found"):
        load_workflow(tmp_path / 'nope.json')


def test_load_invalid_json(tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text('{"nodes": [', encoding='utf-8')

    with pytest.raises(WorkflowError, match="Invalid workflow JSON"):
        load_workflow(path)


def test_load_plain_graph(tmp_path):
    path = tmp_path / 'graph.json'
    path.write_text(json.dumps({'nodes': NODES, 'edges': EDGES}), encoding='utf-8')

    document = load_workflow(path)

    assert document['name'] == 'Untitled Workflow'
    assert len(document['nodes']) == 2


def test_load_non_utf8_file(tmp_path):
    path = tmp_path / 'utf16.json'
    path.write_bytes(b'\xff\xfe{"nodes": [], "edges": []}')

    with pytest.raises(WorkflowError, match="Invalid workflow JSON"):
        load_workflow(path)
