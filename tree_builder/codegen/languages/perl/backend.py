"""
Perl backend implementation.

Generates one Perl 5 package per tree class, plus an Exporter-based API
module and a default visitor package, using templates.
"""

from pathlib import Path

from ...core.backend import Backend


class PerlBackend(Backend):
    """Backend for Perl 5 packages (``Op::Plus`` -> ``Op/Plus.pm``)."""

    abstract_template = "abstract_class.pm.j2"
    concrete_template = "concrete_class.pm.j2"
    api_template = "api.pm.j2"
    visitor_template = "visitor.pm.j2"

    default_options = {
        # croak unless class-valued constructor arguments ->isa the field type
        "type_checks": True,
    }

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "perl"

    @property
    def file_extension(self) -> str:
        """Return Perl module file extension."""
        return ".pm"

    def get_template_directory(self) -> Path:
        """Return the Perl templates directory."""
        return Path(__file__).parent / "templates"
