"""
Space CLI - command line interface for building and publishing nodes.
"""

from .main import cli

__all__ = ["cli"]
