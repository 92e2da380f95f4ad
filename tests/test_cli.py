"""
Tests for the command line interface and configuration
"""
import json
import pytest
from click.testing import CliRunner

from noder_core.cli.main import cli
from noder_core.config import Config


WORKFLOW = {
    'name': 'CLI Test',
    'nodes': [
        {'id': 'a', 'type': 'chip', 'data': {'content': 'from cli'}},
        {'id': 'b', 'type': 'display-text', 'data': {}},
        {'id': 'c', 'type': 'display-text', 'data': {}},
    ],
    'edges': [
        {'source': 'a', 'target': 'b', 'sourceHandle': 'out', 'targetHandle': 'text-in'},
        {'source': 'b', 'target': 'c', 'sourceHandle': 'input', 'targetHandle': 'text-in'},
    ],
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workflow_file(tmp_path):
    path = tmp_path / 'workflow.json'
    path.write_text(json.dumps(WORKFLOW), encoding='utf-8')
    return path


def test_run_json(runner, workflow_file):
    result = runner.invoke(cli, ['run', str(workflow_file), '--json'])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data['success'] is True
    assert data['nodeOutputs']['c'] == {'input': 'from cli'}


def test_run_summary(runner, workflow_file):
    result = runner.invoke(cli, ['run', str(workflow_file)])

    assert result.exit_code == 0, result.output
    assert 'Succeeded' in result.output
    assert 'CLI Test' in result.output


def test_run_single_node(runner, workflow_file):
    result = runner.invoke(cli, ['run', str(workflow_file), '--node', 'b', '--json'])

    assert result.exit_code == 0, result.output
    assert sorted(json.loads(result.output)['nodeOutputs']) == ['a', 'b']


def test_run_missing_node(runner, workflow_file):
    result = runner.invoke(cli, ['run', str(workflow_file), '--node', 'missing', '--json'])

    assert result.exit_code == 1
    assert 'Node missing not found' in result.output


def test_run_cycle_fails(runner, tmp_path):
    workflow = dict(WORKFLOW)
    workflow['edges'] = WORKFLOW['edges'] + [
        {'source': 'c', 'target': 'b', 'sourceHandle': 'input', 'targetHandle': 'text-in'}
    ]
    path = tmp_path / 'cycle.json'
    path.write_text(json.dumps(workflow), encoding='utf-8')

    result = runner.invoke(cli, ['run', str(path), '--json'])

    assert result.exit_code == 1
    assert 'Cyclic dependency detected' in json.loads(result.output)['error']


def test_run_missing_file(runner, tmp_path):
    result = runner.invoke(cli, ['run', str(tmp_path / 'absent.json')])

    assert result.exit_code == 1
    assert 'not found' in result.output


def test_run_resolves_workflows_dir(runner, tmp_path, monkeypatch):
    (tmp_path / 'named.json').write_text(json.dumps(WORKFLOW), encoding='utf-8')
    monkeypatch.setattr(Config, 'WORKFLOWS_DIR', str(tmp_path))

    result = runner.invoke(cli, ['run', 'named', '--json'])

    assert result.exit_code == 0, result.output


def test_run_rejects_bad_context(runner, workflow_file):
    result = runner.invoke(cli, ['run', str(workflow_file), '--context', '[1, 2]'])

    assert result.exit_code == 1
    assert 'JSON object' in result.output


def test_run_rejects_negative_concurrency(runner, workflow_file):
    result = runner.invoke(cli, ['run', str(workflow_file), '--max-concurrency', '-1'])
    assert result.exit_code == 2


def test_node_types(runner):
    result = runner.invoke(cli, ['node-types'])

    assert result.exit_code == 0
    assert 'display-text' in result.output
    assert 'chip' in result.output


def test_config_command(runner):
    result = runner.invoke(cli, ['config'])

    assert result.exit_code == 0
    assert 'Max Concurrency' in result.output


def test_config_validation(monkeypatch):
    assert Config.validate() is True

    monkeypatch.setattr(Config, 'MAX_CONCURRENCY', -3)
    assert Config.validate() is False
    assert Config.get_max_concurrency() == 0


def test_run_undecodable_file(runner, tmp_path):
    path = tmp_path / 'binary.json'
    path.write_bytes(b'\xff\xfe{"nodes": []}')

    result = runner.invoke(cli, ['run', str(path)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert 'Invalid workflow JSON' in result.output
