"""
Perl backend module.

Generates Perl 5 packages from a class registry.
"""

from .backend import PerlBackend

__all__ = ["PerlBackend"]
