"""
Language-specific backends.

Each subpackage provides one Backend subclass together with its templates.
"""

from .perl import PerlBackend
from .python import PythonBackend

__all__ = ["PerlBackend", "PythonBackend"]
