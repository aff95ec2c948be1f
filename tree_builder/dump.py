"""Rich rendering of a finished class registry.

Classes are shown as a hierarchy: every class without a supertype is a
root, and subclasses hang below their supertype in declaration order.
"""

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from .model import ClassDescriptor, ClassRegistry


def _class_label(descriptor: ClassDescriptor) -> str:
    kind = "[magenta]abstract[/magenta] " if descriptor.is_abstract else ""
    label = f"{kind}[bold cyan]{escape(descriptor.name)}[/bold cyan]"
    if descriptor.line:
        label += f" [dim](line {descriptor.line})[/dim]"
    return label


def _field_label(field) -> str:
    name = f"[green]{escape(field.name)}[/green]"
    if field.is_scalar:
        kind = "[yellow]scalar[/yellow]"
    else:
        kind = f"[blue]{escape(field.type_name)}[/blue]"
    suffix = "" if field.explicit else " [dim]derived[/dim]"
    return f"{name}: {kind} -> {field.accessor}(){suffix}"


def _add_class(node: Tree, descriptor: ClassDescriptor, registry: ClassRegistry):
    branch = node.add(_class_label(descriptor))
    for field in descriptor.fields:
        branch.add(_field_label(field))
    for child in registry:
        if child.supertype is descriptor:
            _add_class(branch, child, registry)


def build_tree(registry: ClassRegistry, title: str = "Classes") -> Tree:
    """Build a rich Tree describing ``registry``."""
    tree = Tree(
        f"[bold blue]{escape(title)}[/bold blue] "
        f"[dim]({len(registry)} classes, "
        f"{len(registry.concrete_classes())} concrete)[/dim]"
    )
    for descriptor in registry:
        if descriptor.supertype is None:
            _add_class(tree, descriptor, registry)
    return tree


def print_registry(
    registry: ClassRegistry, title: str = "Classes", console: Console | None = None
) -> None:
    """Print the class hierarchy with fields and accessors."""
    (console or Console()).print(build_tree(registry, title))
