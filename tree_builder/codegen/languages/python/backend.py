"""
Python backend implementation.

Generates one Python module per tree class (``Op::Plus`` -> ``Op/Plus.py``
defining class ``Plus``), an API module of shorthand constructors and a
default visitor, using templates.

Generated modules import each other under private aliases
(``import Op.Plus as _Op_Plus``) so that classes sharing a simple name in
different namespaces never shadow one another.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence

from ....errors import OutputConflictError
from ....naming import join_qualified, simple_name, split_qualified
from ...core.backend import Backend
from ...core.context import ApiContext, ClassContext, VisitorContext
from .naming import check_class_name, check_field_name, module_alias


class PythonBackend(Backend):
    """Backend for Python 3 modules."""

    abstract_template = "abstract_class.py.j2"
    concrete_template = "concrete_class.py.j2"
    api_template = "api.py.j2"
    visitor_template = "visitor.py.j2"

    default_options = {
        # raise TypeError unless class-valued constructor arguments are
        # instances of the field type
        "type_checks": True,
    }

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def class_reference(self, qualified_name: str, current: str) -> str:
        """Expression naming a class from inside the module of ``current``."""
        if qualified_name == current:
            return simple_name(qualified_name)
        return f"{module_alias(qualified_name)}.{simple_name(qualified_name)}"

    def template_filters(self) -> Dict[str, Callable]:
        return {"module_alias": module_alias}

    def check_layout(self, names: Sequence[str]):
        """
        Reject a class whose module would shadow the package of another.

        ``Op.py`` and the directory ``Op/`` both claim the import name
        ``Op``; Python resolves it to the module, so ``import Op.Plus``
        fails in the generated code.
        """
        modules = set(names)
        for name in names:
            parts = split_qualified(name)
            for depth in range(1, len(parts)):
                package = join_qualified(parts[:depth])
                if package in modules:
                    raise OutputConflictError(
                        package,
                        name,
                        self.output_path(package),
                        f"module {self.output_path(package)} would hide the "
                        f"package of '{name}' in Python",
                    )

    def class_variables(self, context: ClassContext) -> Dict[str, Any]:
        template = (
            self.abstract_template if context.is_abstract else self.concrete_template
        )
        check_class_name(context.name, template)

        variables = super().class_variables(context)
        type_checks = variables["options"].extra.get("type_checks", True)

        imported: List[str] = []

        def need(name: str):
            if name != context.name and name not in imported:
                imported.append(name)

        base_ref = None
        if context.supertype:
            need(context.supertype)
            base_ref = self.class_reference(context.supertype, context.name)

        fields = []
        for f in context.fields:
            check_field_name(f.name, context.name, template)
            type_ref = None
            if f.is_class_ref:
                type_ref = self.class_reference(f.target, context.name)
                if type_checks:
                    need(f.target)
            fields.append(
                {
                    "name": f.name,
                    "accessor": f.accessor,
                    "is_class_ref": f.is_class_ref,
                    "target": f.target,
                    "type_ref": type_ref,
                }
            )

        variables["fields"] = fields
        variables["base_ref"] = base_ref
        variables["imports"] = imported
        return variables

    def api_variables(self, context: ApiContext) -> Dict[str, Any]:
        variables = super().api_variables(context)

        entries = []
        for entry in context.entries:
            check_class_name(entry.class_name, self.api_template)
            for arg in entry.args:
                check_field_name(arg, entry.class_name, self.api_template)
            entries.append(
                {
                    "short_name": entry.short_name,
                    "args": list(entry.args),
                    "ref": self.class_reference(entry.class_name, context.name),
                }
            )

        variables["entries"] = entries
        variables["imports"] = list(context.classes)
        return variables

    def visitor_variables(self, context: VisitorContext) -> Dict[str, Any]:
        check_class_name(context.name, self.visitor_template)
        return super().visitor_variables(context)
