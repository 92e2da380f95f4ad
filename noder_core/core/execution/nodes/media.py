"""
Media Node
Exposes an uploaded or local media file to downstream nodes
"""
from ...types import NodeInputs, NodeOutput
from ..node_base import BaseNode, ExecutionContext

MEDIA_TYPES = ('image', 'video', 'audio')


class MediaNode(BaseNode):
    """
    Media source node

    Properties (node data):
        mediaType: "image", "video" or "audio" (default "image")
        mediaPath: Local file path
        remoteUrl: URL of an uploaded copy, preferred when present

    Outputs:
        out: {"type": mediaType, "value": url or path, "metadata": {...}}
    """

    async def execute(self, inputs: NodeInputs, context: ExecutionContext) -> NodeOutput:
        """Execute media node"""
        media_type = self.config.get('mediaType') or 'image'
        media_path = self.config.get('mediaPath') or ''
        remote_url = self.config.get('remoteUrl') or None

        if media_type not in MEDIA_TYPES:
            media_type = 'image'

        return {
            'out': {
                'type': media_type,
                'value': remote_url or media_path,
                'metadata': {
                    'isRemoteUrl': bool(remote_url),
                    'localPath': media_path,
                },
            }
        }
