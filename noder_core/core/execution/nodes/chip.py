"""
Chip Node
Emits a reusable snippet of text for placeholder replacement downstream
"""
from ...types import NodeInputs, NodeOutput
from ..node_base import BaseNode, ExecutionContext


class ChipNode(BaseNode):
    """
    Text source node

    Properties (node data):
        content: Text the chip stands for
        chipId: Placeholder name (defaults to the node id)

    Outputs:
        out: {"type": "text", "value": content, "chipId": ..., "isChip": True}
    """

    async def execute(self, inputs: NodeInputs, context: ExecutionContext) -> NodeOutput:
        chip_content = self.config.get('content') or ''
        chip_id = self.config.get('chipId') or self.node_id

        return {
            'out': {
                'type': 'text',
                'value': chip_content,
                'chipId': chip_id,
                'isChip': True,
            }
        }
