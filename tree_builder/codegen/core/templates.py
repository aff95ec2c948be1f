"""
Jinja2 rendering for backend templates.

Each backend owns one template directory. The engine registers the naming
filters every backend shares; a backend may add its own on top.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
)

from ...errors import RenderError
from ...logging_config import get_logger
from ...naming import simple_name, split_qualified

logger = get_logger(__name__)


def qualified_join(value: str, separator: str = ".") -> str:
    """Re-join a qualified name with another separator (Op::Plus -> Op.Plus)."""
    return separator.join(split_qualified(str(value)))


SHARED_FILTERS: Dict[str, Callable] = {
    "simple_name": simple_name,
    "qualified_join": qualified_join,
}


class TemplateEngine:
    """Loads and renders the templates of one backend."""

    def __init__(
        self,
        template_dir: Path,
        filters: Optional[Dict[str, Callable]] = None,
    ):
        self.template_dir = Path(template_dir)
        # undefined variables raise
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters.update(SHARED_FILTERS)
        if filters:
            self._env.filters.update(filters)

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render one template.

        Raises:
            RenderError: If the template is missing or fails to render.
        """
        try:
            return self._env.get_template(template_name).render(**context)
        except Exception as e:
            logger.debug("template %s failed: %s", template_name, e)
            raise RenderError(
                f"Failed to render template {template_name}: {e}", template_name
            ) from e

    def template_exists(self, template_name: str) -> bool:
        try:
            self._env.get_template(template_name)
        except JinjaTemplateError:
            return False
        return True


def create_template_engine(
    template_dir: Path, filters: Optional[Dict[str, Callable]] = None
) -> TemplateEngine:
    """Create a template engine bound to a backend's template directory."""
    return TemplateEngine(template_dir, filters)
