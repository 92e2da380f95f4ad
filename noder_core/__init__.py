"""
Noder Core
DAG execution engine for node-based visual workflows
"""
__version__ = "0.1.0"
