"""
Core workflow model and execution engine
"""
from .workflow import build_workflow_document, normalize_workflow, load_workflow, save_workflow

__all__ = ["build_workflow_document", "normalize_workflow", "load_workflow", "save_workflow"]
