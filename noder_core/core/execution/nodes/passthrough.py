"""
Passthrough Node
Fallback for node types with no registered implementation
"""
from ...types import NodeInputs, NodeOutput
from ..node_base import BaseNode, ExecutionContext


class PassthroughNode(BaseNode):
    """
    Marks that no transformation happened

    Outputs:
        passthrough: Always True
    """

    async def execute(self, inputs: NodeInputs, context: ExecutionContext) -> NodeOutput:
        return {'passthrough': True}
