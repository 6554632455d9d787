"""Type analysis domain entities."""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from pathlib import Path

MARKED_ALIAS_PREFIX = "_AMA_"


@dataclass(frozen=True)
class FieldDeclaration:
    """Annotated attribute declared in a class body."""

    name: str
    annotation: ast.expr
    has_default: bool


@dataclass(frozen=True)
class ClassDeclaration:
    """Class whose annotated attributes describe an object shape."""

    name: str
    bases: tuple[ast.expr, ...]
    fields: tuple[FieldDeclaration, ...]
    type_params: tuple[str, ...] = ()
    total: bool = True
    members: tuple[tuple[str, ast.expr], ...] = ()


@dataclass(frozen=True)
class AliasDeclaration:
    """Type alias: `type X = ...`, `X: TypeAlias = ...` or `X = <type expression>`."""

    name: str
    value: ast.expr | None
    type_params: tuple[str, ...] = ()
    lineno: int = 0


@dataclass(frozen=True)
class TypeVarDeclaration:
    """Module-level `TypeVar` assignment."""

    name: str


Declaration = ClassDeclaration | AliasDeclaration | TypeVarDeclaration


@dataclass(frozen=True)
class ImportBinding:
    """Local name bound by an import statement.

    `name` is None when the binding refers to a whole module (`import x as y`).
    """

    module: str
    name: str | None


@dataclass(eq=False)
class SourceModule:
    """Parsed declarations of one source file."""

    path: Path
    name: str
    declarations: dict[str, Declaration] = field(default_factory=dict)
    imports: dict[str, ImportBinding] = field(default_factory=dict)
    is_package: bool = False


@dataclass(frozen=True, eq=False)
class MarkedAlias:
    """Alias selected for schema extraction by its name prefix."""

    name: str
    declaring_file: Path
    module: SourceModule
    declaration: AliasDeclaration


@dataclass(frozen=True)
class ResolvedDeclaration:
    """Declaration found in a project module."""

    module: SourceModule
    declaration: Declaration


@dataclass(frozen=True)
class ModuleSymbol:
    """Name bound to a module rather than a declaration."""

    module_name: str


@dataclass(frozen=True)
class ExternalSymbol:
    """Qualified name outside the project, e.g. ``typing.Literal``."""

    qualified_name: str


Symbol = ResolvedDeclaration | ModuleSymbol | ExternalSymbol
