"""
Node implementations for execution engine
"""
from .display_text import DisplayTextNode
from .chip import ChipNode
from .media import MediaNode
from .passthrough import PassthroughNode

__all__ = [
    'DisplayTextNode',
    'ChipNode',
    'MediaNode',
    'PassthroughNode',
]
