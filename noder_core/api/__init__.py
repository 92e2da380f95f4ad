"""
HTTP API for Noder Core
"""
