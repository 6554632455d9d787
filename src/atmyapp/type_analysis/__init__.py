"""Type analysis exports."""

from .declaration_models import (
    MARKED_ALIAS_PREFIX,
    AliasDeclaration,
    ClassDeclaration,
    ExternalSymbol,
    MarkedAlias,
    ModuleSymbol,
    ResolvedDeclaration,
    SourceModule,
    Symbol,
    TypeVarDeclaration,
)
from .type_project import DeclarationParseError, TypeProject, parse_source_module

__all__ = [
    "MARKED_ALIAS_PREFIX",
    "AliasDeclaration",
    "ClassDeclaration",
    "DeclarationParseError",
    "ExternalSymbol",
    "MarkedAlias",
    "ModuleSymbol",
    "ResolvedDeclaration",
    "SourceModule",
    "Symbol",
    "TypeProject",
    "TypeVarDeclaration",
    "parse_source_module",
]
