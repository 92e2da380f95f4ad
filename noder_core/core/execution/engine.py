"""
Execution Engine for Noder Core
Runs node-based workflows layer by layer
"""
import asyncio
import contextlib
import time
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Callable, AsyncIterator, Awaitable, Sequence, Union

from ...config import Config
from ...utils.logger import get_logger
from ..types import NodeData, EdgeData, NodeID, NodeOutput, NodeOutputs, ProgressData
from .errors import CycleError, NodeNotFoundError
from .graph import build_dependency_graph, topological_sort, get_upstream_nodes
from .inputs import get_node_inputs
from .node_base import ExecutionContext, NodeState
from .node_registry import execute_node
from .result import WorkflowRunResult, RunState, ExecutionEvent, EventType

logger = get_logger(__name__)

NodeStartCallback = Callable[[NodeData], Any]
NodeCompleteCallback = Callable[[NodeData, NodeOutput], Any]
NodeErrorCallback = Callable[[NodeData, BaseException], Any]
ProgressCallback = Callable[[ProgressData], Any]
ContextLike = Union[ExecutionContext, Dict[str, Any], None]


@dataclass
class _Run:
    """Mutable state of one run, owned by the engine"""
    nodes: List[NodeData]
    edges: List[EdgeData]
    context: ExecutionContext
    result: WorkflowRunResult
    on_node_start: Optional[NodeStartCallback] = None
    on_node_complete: Optional[NodeCompleteCallback] = None
    on_node_error: Optional[NodeErrorCallback] = None
    on_progress: Optional[ProgressCallback] = None
    failed_node: Optional[NodeID] = None
    semaphore: Optional[asyncio.Semaphore] = None

    @property
    def halted(self) -> bool:
        return self.failed_node is not None

    def slot(self):
        """Concurrency slot for one node (no-op when unbounded)"""
        if self.semaphore is None:
            return contextlib.nullcontext()
        return self.semaphore


def _percentage(completed: int, total: int) -> int:
    """Completed share as a whole percentage, halves rounded up"""
    if total <= 0:
        return 100
    return int(completed * 100 / total + 0.5)


class ExecutionEngine:
    """
    Executes workflow graphs

    Features:
    - Topological layering for execution order
    - Concurrent execution of the nodes of a layer
    - Input resolution with fan-in aggregation
    - Fail-fast error handling that keeps completed outputs
    - Scoped runs limited to a node's upstream closure
    """

    def __init__(self, max_concurrency: Optional[int] = None):
        """
        Initialize execution engine

        Args:
            max_concurrency: Maximum nodes running at once inside a layer.
                None reads Config.MAX_CONCURRENCY; 0 means unbounded.
        """
        if max_concurrency is None:
            max_concurrency = Config.get_max_concurrency()
        if max_concurrency < 0:
            raise ValueError("max_concurrency must be 0 or a positive integer")
        self.max_concurrency = max_concurrency

    async def run_workflow(
        self,
        nodes: Sequence[NodeData],
        edges: Sequence[EdgeData],
        context: ContextLike = None,
        on_node_start: Optional[NodeStartCallback] = None,
        on_node_complete: Optional[NodeCompleteCallback] = None,
        on_node_error: Optional[NodeErrorCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WorkflowRunResult:
        """
        Run a workflow using DAG-based execution

        Args:
            nodes: Workflow nodes
            edges: Workflow edges
            context: Execution context (or a dict with apiKeys and variables)
            on_node_start: Called with the node before it executes
            on_node_complete: Called with the node and its outputs
            on_node_error: Called with the node and the error that stopped it
            on_progress: Called with {"completed", "total", "percentage"}

        Returns:
            WorkflowRunResult; a cycle or a failing node yields success=False
        """
        start_time = time.time()
        result = WorkflowRunResult(workflow_id=f"workflow-{int(start_time * 1000)}")
        result.state = RunState.RUNNING

        run = _Run(
            nodes=list(nodes),
            edges=list(edges),
            context=ExecutionContext.from_dict(context),
            result=result,
            on_node_start=on_node_start,
            on_node_complete=on_node_complete,
            on_node_error=on_node_error,
            on_progress=on_progress,
            semaphore=asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None,
        )

        try:
            dependency_graph = build_dependency_graph(run.nodes, run.edges)
            layers = topological_sort(run.nodes, dependency_graph.graph, dependency_graph.in_degree)
        except CycleError as e:
            logger.error(f"Workflow {result.workflow_id} rejected: {e}")
            result.error = str(e)
            return self._finish(run, start_time)

        result.execution_order = [[node['id'] for node in layer] for layer in layers]
        for node in run.nodes:
            result.node_states[node['id']] = NodeState.PENDING

        logger.info(f"Executing {len(run.nodes)} nodes in {len(layers)} layers")

        for layer_index, layer in enumerate(layers):
            logger.debug(f"Layer {layer_index + 1}: {len(layer)} nodes")

            # Outputs written during this layer stay invisible until the next one
            visible_outputs: NodeOutputs = dict(result.node_outputs)
            await asyncio.gather(*(
                self._execute_layer_node(run, node, visible_outputs) for node in layer
            ))

            if run.halted:
                break

        if run.halted:
            failed_error = result.node_errors[run.failed_node]
            result.error = f"Node {run.failed_node} failed: {failed_error}"

        return self._finish(run, start_time)

    async def run_single_node(
        self,
        node_id: NodeID,
        nodes: Sequence[NodeData],
        edges: Sequence[EdgeData],
        context: ContextLike = None,
        on_node_start: Optional[NodeStartCallback] = None,
        on_node_complete: Optional[NodeCompleteCallback] = None,
        on_node_error: Optional[NodeErrorCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WorkflowRunResult:
        """
        Execute a node together with everything upstream of it

        Args:
            node_id: Target node
            nodes: Workflow nodes
            edges: Workflow edges
            context: Execution context
            on_node_start, on_node_complete, on_node_error, on_progress:
                As for run_workflow

        Returns:
            WorkflowRunResult for the upstream subgraph

        Raises:
            NodeNotFoundError: If node_id is not among nodes
        """
        if not any(node['id'] == node_id for node in nodes):
            raise NodeNotFoundError(node_id)

        dependency_graph = build_dependency_graph(nodes, edges)
        upstream = get_upstream_nodes(node_id, dependency_graph.dependencies)
        upstream.add(node_id)

        subgraph_nodes = [node for node in nodes if node['id'] in upstream]
        subgraph_ids = {node['id'] for node in subgraph_nodes}
        subgraph_edges = [
            edge for edge in edges
            if edge['source'] in subgraph_ids and edge['target'] in subgraph_ids
        ]

        logger.info(f"Running node {node_id} with {len(subgraph_nodes) - 1} upstream nodes")

        return await self.run_workflow(
            subgraph_nodes,
            subgraph_edges,
            context=context,
            on_node_start=on_node_start,
            on_node_complete=on_node_complete,
            on_node_error=on_node_error,
            on_progress=on_progress,
        )

    async def stream_workflow(
        self,
        nodes: Sequence[NodeData],
        edges: Sequence[EdgeData],
        context: ContextLike = None,
    ) -> AsyncIterator[ExecutionEvent]:
        """
        Run a workflow and yield its notifications as events

        Events arrive in callback order; the last one is RUN_COMPLETE and
        carries the WorkflowRunResult.
        """
        async for event in self._stream(
            lambda **callbacks: self.run_workflow(nodes, edges, context, **callbacks)
        ):
            yield event

    async def stream_single_node(
        self,
        node_id: NodeID,
        nodes: Sequence[NodeData],
        edges: Sequence[EdgeData],
        context: ContextLike = None,
    ) -> AsyncIterator[ExecutionEvent]:
        """Event stream counterpart of run_single_node"""
        async for event in self._stream(
            lambda **callbacks: self.run_single_node(node_id, nodes, edges, context, **callbacks)
        ):
            yield event

    async def _stream(
        self,
        runner: Callable[..., Awaitable[WorkflowRunResult]]
    ) -> AsyncIterator[ExecutionEvent]:
        """Drive a run with callbacks that push events onto a queue"""
        queue: "asyncio.Queue[Optional[ExecutionEvent]]" = asyncio.Queue()

        callbacks = {
            'on_node_start': lambda node: queue.put_nowait(
                ExecutionEvent(EventType.NODE_START, node=node)),
            'on_node_complete': lambda node, outputs: queue.put_nowait(
                ExecutionEvent(EventType.NODE_COMPLETE, node=node, outputs=outputs)),
            'on_node_error': lambda node, error: queue.put_nowait(
                ExecutionEvent(EventType.NODE_ERROR, node=node, error=error)),
            'on_progress': lambda progress: queue.put_nowait(
                ExecutionEvent(EventType.PROGRESS, progress=progress)),
        }

        async def produce() -> WorkflowRunResult:
            try:
                return await runner(**callbacks)
            finally:
                queue.put_nowait(None)

        task = asyncio.create_task(produce())
        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
            result = await task
        finally:
            if not task.done():
                task.cancel()

        yield ExecutionEvent(EventType.RUN_COMPLETE, result=result)

    async def _execute_layer_node(self, run: _Run, node: NodeData, visible_outputs: NodeOutputs) -> None:
        """Execute one node of the current layer and record its outcome"""
        async with run.slot():
            # A sibling already failed: start nothing new
            if run.halted:
                return

            node_id = node['id']
            result = run.result
            result.node_states[node_id] = NodeState.RUNNING
            node_start_time = time.time()

            try:
                if run.on_node_start:
                    run.on_node_start(node)

                inputs = get_node_inputs(node, run.edges, run.nodes, visible_outputs)
                outputs = await execute_node(node, inputs, run.context)

                result.node_outputs[node_id] = outputs
                result.node_states[node_id] = NodeState.COMPLETED
                result.completed_count += 1

                if run.on_node_complete:
                    run.on_node_complete(node, outputs)

                if run.on_progress:
                    total = len(run.nodes)
                    run.on_progress({
                        'completed': result.completed_count,
                        'total': total,
                        'percentage': _percentage(result.completed_count, total),
                    })

                logger.debug(
                    f"Node {node_id} ({node.get('type')}) executed successfully "
                    f"in {time.time() - node_start_time:.3f}s"
                )
            except Exception as e:
                self._record_failure(run, node, e)

    def _record_failure(self, run: _Run, node: NodeData, error: Exception) -> None:
        """Store a node failure and halt the run"""
        node_id = node['id']
        run.result.node_errors[node_id] = error
        run.result.node_states[node_id] = NodeState.FAILED
        logger.error(f"Error executing node {node_id}: {error}", exc_info=error)

        if run.failed_node is None:
            run.failed_node = node_id

        if run.on_node_error:
            try:
                run.on_node_error(node, error)
            except Exception as callback_error:
                logger.warning(f"on_node_error callback raised for node {node_id}: {callback_error}")

    def _finish(self, run: _Run, start_time: float) -> WorkflowRunResult:
        """Stamp the final state and duration"""
        result = run.result
        result.success = result.error is None
        result.state = RunState.COMPLETED if result.success else RunState.FAILED
        result.duration = time.time() - start_time

        logger.info(
            f"Workflow {result.workflow_id} {'succeeded' if result.success else 'failed'} "
            f"in {result.duration:.3f}s ({result.completed_count}/{len(run.nodes)} nodes)"
        )
        return result


async def run_workflow_dag(
    nodes: Sequence[NodeData],
    edges: Sequence[EdgeData],
    context: ContextLike = None,
    on_node_start: Optional[NodeStartCallback] = None,
    on_node_complete: Optional[NodeCompleteCallback] = None,
    on_node_error: Optional[NodeErrorCallback] = None,
    on_progress: Optional[ProgressCallback] = None,
    max_concurrency: Optional[int] = None,
) -> WorkflowRunResult:
    """Run a whole workflow with a default engine"""
    engine = ExecutionEngine(max_concurrency=max_concurrency)
    return await engine.run_workflow(
        nodes,
        edges,
        context=context,
        on_node_start=on_node_start,
        on_node_complete=on_node_complete,
        on_node_error=on_node_error,
        on_progress=on_progress,
    )


async def run_single_node(
    node_id: NodeID,
    nodes: Sequence[NodeData],
    edges: Sequence[EdgeData],
    context: ContextLike = None,
    on_node_start: Optional[NodeStartCallback] = None,
    on_node_complete: Optional[NodeCompleteCallback] = None,
    on_node_error: Optional[NodeErrorCallback] = None,
    on_progress: Optional[ProgressCallback] = None,
    max_concurrency: Optional[int] = None,
) -> WorkflowRunResult:
    """Run one node and its upstream closure with a default engine"""
    engine = ExecutionEngine(max_concurrency=max_concurrency)
    return await engine.run_single_node(
        node_id,
        nodes,
        edges,
        context=context,
        on_node_start=on_node_start,
        on_node_complete=on_node_complete,
        on_node_error=on_node_error,
        on_progress=on_progress,
    )
