"""
API routes for Noder Core
"""
import json
from typing import Optional, Dict, Any, List

from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

from ..core.execution import ExecutionEngine, NodeNotFoundError, list_node_types
from ..core.types import NodeData, EdgeData

router = APIRouter()


# Request/Response models
class NodeModel(BaseModel):
    """A workflow node as sent by the editor"""
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Unique node id")
    type: str = Field(default="", description="Node type used for dispatch")
    data: Dict[str, Any] = Field(default_factory=dict, description="Node configuration")
    position: Optional[Dict[str, float]] = None

    def to_node_data(self) -> NodeData:
        node = self.model_dump()
        if node.get('position') is None:
            node.pop('position', None)
        return node


class EdgeModel(BaseModel):
    """A connection between two node handles"""
    model_config = ConfigDict(extra="allow")

    source: str
    target: str
    sourceHandle: Optional[str] = None
    targetHandle: Optional[str] = None
    id: Optional[str] = None

    def to_edge_data(self) -> EdgeData:
        return self.model_dump()


class ExecuteWorkflowRequest(BaseModel):
    """Request model for a full workflow run"""
    nodes: List[NodeModel] = Field(default_factory=list)
    edges: List[EdgeModel] = Field(default_factory=list)
    context: Dict[str, Any] = Field(
        default_factory=dict,
        description="Execution context: apiKeys plus free-form variables"
    )

    def graph(self):
        return (
            [node.to_node_data() for node in self.nodes],
            [edge.to_edge_data() for edge in self.edges],
        )


class ExecuteNodeRequest(ExecuteWorkflowRequest):
    """Request model for running one node and its upstream nodes"""
    nodeId: str = Field(..., description="Target node id")


class NodeTypesResponse(BaseModel):
    types: List[str]


def get_engine(request: Request) -> ExecutionEngine:
    """Get ExecutionEngine from app state (injected by FastAPI)"""
    return request.app.state.engine


@router.get("/nodes/types", response_model=NodeTypesResponse)
async def node_types():
    """List registered node types"""
    return NodeTypesResponse(types=list_node_types())


@router.post("/workflow/execute")
async def execute_workflow(request: ExecuteWorkflowRequest, engine: ExecutionEngine = Depends(get_engine)):
    """Run a whole workflow"""
    nodes, edges = request.graph()
    result = await engine.run_workflow(nodes, edges, context=request.context)
    return result.to_dict()


@router.post("/workflow/execute-node")
async def execute_node(request: ExecuteNodeRequest, engine: ExecutionEngine = Depends(get_engine)):
    """Run one node together with its upstream dependencies"""
    nodes, edges = request.graph()
    try:
        result = await engine.run_single_node(request.nodeId, nodes, edges, context=request.context)
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return result.to_dict()


@router.post("/workflow/stream")
async def stream_workflow(request: ExecuteWorkflowRequest, engine: ExecutionEngine = Depends(get_engine)):
    """Run a workflow, streaming its events as newline-delimited JSON"""
    nodes, edges = request.graph()

    async def event_lines():
        async for event in engine.stream_workflow(nodes, edges, context=request.context):
            yield json.dumps(event.to_dict()) + "\n"

    return StreamingResponse(event_lines(), media_type="application/x-ndjson")
