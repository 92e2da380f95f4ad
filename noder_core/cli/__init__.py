"""
Command line interface for Noder Core
"""
