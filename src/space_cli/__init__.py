"""
space_cli - build WASM nodes and publish them to the Space Operator catalog.
"""

__version__ = "0.2.0"
