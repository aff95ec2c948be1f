"""
Python backend module.

Generates Python 3 modules from a class registry.
"""

from .backend import PythonBackend

__all__ = ["PythonBackend"]
