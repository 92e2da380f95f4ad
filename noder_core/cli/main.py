"""
CLI interface for Noder Core
"""
import asyncio
import json
import logging
import sys
from pathlib import Path

import click
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from ..config import Config
from ..core.execution import ExecutionEngine, NodeNotFoundError, WorkflowError, list_node_types
from ..core.workflow import load_workflow
from ..utils.logger import set_log_level

console = Console()


def _resolve_workflow_path(workflow_file: str) -> Path:
    """Look the file up as given, then under Config.WORKFLOWS_DIR"""
    path = Path(workflow_file)
    if path.exists() or path.is_absolute():
        return path
    candidate = Path(Config.WORKFLOWS_DIR) / workflow_file
    if candidate.exists():
        return candidate
    if candidate.suffix != '.json' and candidate.with_suffix('.json').exists():
        return candidate.with_suffix('.json')
    return path


@click.group()
def cli():
    """Noder Core - DAG execution engine for node workflows"""
    pass


@cli.command()
@click.option('--port', default=None, type=int, help='Port to run the API server on')
@click.option('--host', default=None, help='Host to bind to')
def serve(port, host):
    """Run the API server"""
    if not Config.validate():
        click.echo("❌ Configuration validation failed. Please check your environment variables.")
        sys.exit(1)

    from ..api.server import app

    host = host or Config.API_HOST
    port = port or Config.API_PORT

    click.echo("🚀 Starting Noder Core API server...")
    click.echo(f"   Host: {host}")
    click.echo(f"   Port: {port}")

    uvicorn.run(app, host=host, port=port)


@cli.command()
@click.argument('workflow_file')
@click.option('--node', 'node_id', default=None, help='Run only this node and its upstream dependencies')
@click.option('--max-concurrency', type=click.IntRange(min=0), default=None,
              help='Maximum nodes running at once inside a layer (0 = unbounded)')
@click.option('--context', 'context_json', default=None, help='Execution context as a JSON object')
@click.option('--json', 'as_json', is_flag=True, help='Print the run result as JSON')
def run(workflow_file, node_id, max_concurrency, context_json, as_json):
    """Execute a saved workflow"""
    if as_json:
        set_log_level(logging.WARNING)

    try:
        document = load_workflow(_resolve_workflow_path(workflow_file))
    except WorkflowError as e:
        console.print(f"[bold red]❌ Error:[/bold red] {e}")
        sys.exit(1)

    context = {}
    if context_json:
        try:
            context = json.loads(context_json)
        except json.JSONDecodeError as e:
            console.print(f"[bold red]❌ Invalid --context JSON:[/bold red] {e}")
            sys.exit(1)
        if not isinstance(context, dict):
            console.print("[bold red]❌ --context must be a JSON object[/bold red]")
            sys.exit(1)

    engine = ExecutionEngine(max_concurrency=max_concurrency)

    callbacks = {}
    if not as_json:
        callbacks = {
            'on_node_start': lambda node: console.print(
                f"[cyan]▶[/cyan] {node['id']} [dim]({node.get('type') or 'unknown'})[/dim]"),
            'on_node_complete': lambda node, outputs: console.print(
                f"[bold green]✓[/bold green] {node['id']} [dim]→ {', '.join(outputs) or 'no outputs'}[/dim]"),
            'on_node_error': lambda node, error: console.print(
                f"[bold red]✗[/bold red] {node['id']}: {error}"),
            'on_progress': lambda progress: console.print(
                f"[dim]  {progress['completed']}/{progress['total']} ({progress['percentage']}%)[/dim]"),
        }

    try:
        if node_id:
            coro = engine.run_single_node(node_id, document['nodes'], document['edges'], context, **callbacks)
        else:
            coro = engine.run_workflow(document['nodes'], document['edges'], context, **callbacks)
        result = asyncio.run(coro)
    except NodeNotFoundError as e:
        console.print(f"[bold red]❌ Error:[/bold red] {e}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        status = "[bold green]Succeeded[/bold green]" if result.success else "[bold red]Failed[/bold red]"
        summary = (
            f"{status}\n"
            f"Workflow: {document['name']}\n"
            f"Completed: {result.completed_count} nodes in {result.duration:.3f}s"
        )
        if result.error:
            summary += f"\nError: {result.error}"
        console.print(Panel(summary, box=box.ROUNDED, border_style="green" if result.success else "red"))

    sys.exit(0 if result.success else 1)


@cli.command('node-types')
def node_types():
    """List registered node types"""
    table = Table(box=box.SIMPLE)
    table.add_column("Node type", style="cyan")
    for node_type in list_node_types():
        table.add_row(node_type)
    console.print(table)


@cli.command()
def config():
    """Show current configuration"""
    click.echo("Configuration:")
    click.echo(f"   API Host: {Config.API_HOST}")
    click.echo(f"   API Port: {Config.API_PORT}")
    click.echo(f"   Max Concurrency: {Config.get_max_concurrency() or 'unbounded'}")
    click.echo(f"   Workflows Dir: {Config.WORKFLOWS_DIR}")
    click.echo(f"   Debug: {Config.DEBUG}")


if __name__ == '__main__':
    cli()
