"""
Exception hierarchy for tree_builder.

Every failure in the pipeline is terminal: the first error raised by the
tokenizer, parser, class registry or code generation driver stops the run.
All errors derive from TreeBuildError so callers can catch them in one place.
"""

from typing import List, Optional


class TreeBuildError(Exception):
    """Base exception for all tree_builder errors."""

    pass


# Front end


class LexError(TreeBuildError):
    """Raised when the tokenizer meets a character it cannot classify."""

    def __init__(self, char: str, line: int, column: int = 0):
        self.char = char
        self.line = line
        self.column = column
        super().__init__(f"line {line}: illegal character {char!r}")


class ParseError(TreeBuildError):
    """Raised on an unexpected token or a premature end of input."""

    def __init__(self, message: str, token=None, line: Optional[int] = None):
        self.token = token
        if line is None and token is not None:
            line = token.line
        self.line = line
        self.reason = message
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


# Semantic model


class SemanticError(TreeBuildError):
    """Base class for violated class-registry invariants."""

    def __init__(self, message: str, name: str):
        self.name = name
        super().__init__(message)


class DuplicateClassError(SemanticError):
    """A class name was declared more than once."""

    def __init__(self, name: str):
        super().__init__(f"class '{name}' is already declared", name)


class UnresolvedSupertypeError(SemanticError):
    """A supertype names a class that has not been declared yet."""

    def __init__(self, name: str, class_name: str):
        self.class_name = class_name
        super().__init__(
            f"supertype '{name}' of class '{class_name}' is not declared", name
        )


class UnresolvedFieldTypeError(SemanticError):
    """A field type is neither 'scalar' nor an already declared class."""

    def __init__(self, name: str, class_name: str):
        self.class_name = class_name
        super().__init__(
            f"field type '{name}' in class '{class_name}' is not declared", name
        )


class DuplicateFieldNameError(SemanticError):
    """Two fields of the same class resolve to the same name."""

    def __init__(self, name: str, class_name: str):
        self.class_name = class_name
        super().__init__(
            f"field name '{name}' is used more than once in class '{class_name}'",
            name,
        )


class AbstractWithParamsError(SemanticError):
    """An abstract declaration carried a parameter list."""

    def __init__(self, name: str):
        super().__init__(f"abstract class '{name}' cannot declare fields", name)


# Code generation


class GeneratorError(TreeBuildError):
    """Base exception for code generation errors."""

    pass


class BackendRegistryError(GeneratorError):
    """Exception raised for backend registry errors."""

    pass


class UnknownBackendError(BackendRegistryError):
    """No backend is registered under the requested language identifier."""

    def __init__(self, language: str, available: Optional[List[str]] = None):
        self.language = language
        self.available = list(available or [])
        message = f"No backend registered for language: {language}"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class RenderError(GeneratorError):
    """A backend template failed to render."""

    def __init__(self, message: str, template: Optional[str] = None):
        self.template = template
        super().__init__(message)


class OutputWriteError(GeneratorError):
    """A generated artifact could not be written to the output tree."""

    def __init__(self, message: str, path=None):
        self.path = path
        super().__init__(message)


class OutputConflictError(GeneratorError):
    """Two artifacts of one run would occupy the same place in the output tree."""

    def __init__(self, name: str, other: str, path=None, reason: Optional[str] = None):
        self.name = name
        self.other = other
        self.path = path
        message = reason or f"'{name}' and '{other}' would both be written to {path}"
        super().__init__(f"class '{name}': {message}")


class ConfigError(TreeBuildError):
    """Exception raised for configuration-related errors."""

    pass


class SourceReadError(TreeBuildError):
    """The class configuration could not be read from a file or stdin."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message)
