"""
Display Text Node
Output node for display-text and markdown editor nodes
"""
from ...types import NodeInputs, NodeOutput
from ..node_base import BaseNode, ExecutionContext


class DisplayTextNode(BaseNode):
    """
    Receives text and passes it through unchanged

    Inputs:
        text-in: Text from an upstream node (several connections are concatenated
                 in edge order)

    Outputs:
        input: The received text
    """

    INPUT_HANDLE = 'text-in'

    async def execute(self, inputs: NodeInputs, context: ExecutionContext) -> NodeOutput:
        """Execute display text node"""
        text_input = inputs.get(self.INPUT_HANDLE)

        if isinstance(text_input, list):
            value = ''.join(_as_text(item.get('value')) for item in text_input)
        elif text_input is not None:
            value = text_input.get('value') or ''
        else:
            value = ''

        return {
            'input': value
        }


def _as_text(value) -> str:
    return '' if value is None else str(value)
