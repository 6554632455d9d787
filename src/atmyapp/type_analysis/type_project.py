"""Static declaration model built from source files with `ast`.

Files are parsed, never imported. Each module records its top-level
declarations and import bindings so that names used in type expressions can
be followed across files, the way a type checker would resolve them.
"""

from __future__ import annotations

import ast
import builtins
import copy
import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from atmyapp.configuration.runtime_settings import AnalysisOptions
from atmyapp.declaration_scanning import IGNORED_DIRECTORIES

from .declaration_models import (
    MARKED_ALIAS_PREFIX,
    AliasDeclaration,
    ClassDeclaration,
    Declaration,
    ExternalSymbol,
    FieldDeclaration,
    ImportBinding,
    MarkedAlias,
    ModuleSymbol,
    ResolvedDeclaration,
    SourceModule,
    Symbol,
    TypeVarDeclaration,
)

LIBRARY_MODULE_PATH = Path(__file__).resolve().parents[1] / "types.py"
LIBRARY_MODULE_NAMES = ("atmyapp.types", "atmyapp")

_TYPE_VARIABLE_FACTORIES = frozenset({"TypeVar", "ParamSpec", "TypeVarTuple"})

_LOGGER = logging.getLogger(__name__)


class DeclarationParseError(Exception):
    """Raised when a source file cannot be read or parsed."""


class TypeProject:
    """In-memory project of parsed declarations."""

    def __init__(self, options: AnalysisOptions | None = None, *, root: Path | str = ".") -> None:
        self._options = options or AnalysisOptions()
        self._root = Path(root).resolve()
        self._modules_by_name: dict[str, SourceModule] = {}
        self._source_modules: list[SourceModule] = []

        library = parse_source_module(LIBRARY_MODULE_PATH, LIBRARY_MODULE_NAMES[0])
        for name in LIBRARY_MODULE_NAMES:
            self._modules_by_name[name] = library
        for search_path in self._options.search_paths:
            self._add_search_path(Path(search_path))

    @property
    def options(self) -> AnalysisOptions:
        return self._options

    @property
    def source_modules(self) -> tuple[SourceModule, ...]:
        """Modules added with `add_source_files`, in insertion order."""
        return tuple(self._source_modules)

    def add_source_files(self, paths: Iterable[Path | str]) -> list[SourceModule]:
        added: list[SourceModule] = []
        for raw_path in paths:
            path = Path(raw_path).resolve()
            module = parse_source_module(path, module_name_for(path, self._root))
            self._modules_by_name[module.name] = module
            self._source_modules.append(module)
            added.append(module)
        _LOGGER.debug("Added %d source files to project", len(added))
        return added

    def find_module(self, name: str) -> SourceModule | None:
        """Return the project module for a dotted import name, if any."""
        exact = self._modules_by_name.get(name)
        if exact is not None:
            return exact
        if name.split(".")[0] in sys.stdlib_module_names:
            return None
        # Module names are derived from paths, so `src.app.models` also answers
        # to `app.models`.
        suffix = f".{name}"
        candidates = sorted(
            (module_name for module_name in self._modules_by_name if module_name.endswith(suffix)),
            key=len,
        )
        return self._modules_by_name[candidates[0]] if candidates else None

    def marked_aliases(self, module: SourceModule) -> list[MarkedAlias]:
        """Return the module's `_AMA_` aliases in declaration order."""
        aliases: list[MarkedAlias] = []
        for declaration in module.declarations.values():
            if not isinstance(declaration, AliasDeclaration):
                continue
            if not declaration.name.startswith(MARKED_ALIAS_PREFIX):
                _LOGGER.debug("Skipping non-AMA type: %s", declaration.name)
                continue
            aliases.append(
                MarkedAlias(
                    name=declaration.name,
                    declaring_file=module.path,
                    module=module,
                    declaration=declaration,
                )
            )
        return aliases

    def lookup(self, module: SourceModule, name: str) -> Symbol | None:
        """Resolve a bare name in the scope of a module."""
        return self._lookup(module, name, set())

    def resolve_symbol(self, module: SourceModule, expr: ast.expr) -> Symbol | None:
        """Resolve a `Name` or dotted `Attribute` expression."""
        if isinstance(expr, ast.Name):
            return self.lookup(module, expr.id)
        if isinstance(expr, ast.Attribute):
            return self._member(self.resolve_symbol(module, expr.value), expr.attr)
        return None

    def render_type_text(self, alias: MarkedAlias) -> str:
        """Render the alias's type text with referenced aliases expanded in place.

        `AmaContentRef[LandingPath, Page]` renders with the literal that
        `LandingPath` stands for, so path literals declared elsewhere still show up.
        """
        value = alias.declaration.value
        if value is None:
            return ""
        expander = _AliasExpander(self, alias.module, frozenset({id(alias.declaration)}))
        return ast.unparse(expander.visit(copy.deepcopy(value)))

    def _lookup(
        self, module: SourceModule, name: str, visited: set[tuple[int, str]]
    ) -> Symbol | None:
        key = (id(module), name)
        if key in visited:
            return None
        visited.add(key)

        declaration = module.declarations.get(name)
        if declaration is not None:
            return ResolvedDeclaration(module=module, declaration=declaration)
        binding = module.imports.get(name)
        if binding is not None:
            return self._resolve_binding(binding, visited)
        if hasattr(builtins, name):
            return ExternalSymbol(f"builtins.{name}")
        return None

    def _resolve_binding(
        self, binding: ImportBinding, visited: set[tuple[int, str]]
    ) -> Symbol | None:
        if binding.name is None:
            return ModuleSymbol(binding.module)
        target = self.find_module(binding.module)
        if target is not None:
            found = self._lookup(target, binding.name, visited)
            if found is not None:
                return found
        submodule = f"{binding.module}.{binding.name}"
        if self.find_module(submodule) is not None:
            return ModuleSymbol(submodule)
        if target is not None:
            return None
        return ExternalSymbol(submodule)

    def _member(self, owner: Symbol | None, attribute: str) -> Symbol | None:
        if isinstance(owner, ExternalSymbol):
            return ExternalSymbol(f"{owner.qualified_name}.{attribute}")
        if not isinstance(owner, ModuleSymbol):
            return None
        target = self.find_module(owner.module_name)
        if target is None:
            return ExternalSymbol(f"{owner.module_name}.{attribute}")
        found = self.lookup(target, attribute)
        if found is not None:
            return found
        submodule = f"{owner.module_name}.{attribute}"
        if self.find_module(submodule) is not None:
            return ModuleSymbol(submodule)
        return None

    def _add_search_path(self, directory: Path) -> None:
        if not directory.is_dir():
            _LOGGER.warning("search path %s is not a directory, skipping", directory)
            return
        for path in sorted(directory.rglob("*.py")):
            relative = path.relative_to(directory)
            if any(part in IGNORED_DIRECTORIES for part in relative.parts[:-1]):
                continue
            try:
                module = parse_source_module(path, module_name_for(path, directory))
            except DeclarationParseError as exc:
                _LOGGER.warning("%s", exc)
                continue
            self._modules_by_name.setdefault(module.name, module)


class _AliasExpander(ast.NodeTransformer):
    """Substitute alias names with their values, recursively and cycle-safe."""

    def __init__(self, project: TypeProject, module: SourceModule, seen: frozenset[int]) -> None:
        self._project = project
        self._module = module
        self._seen = seen

    def visit_Name(self, node: ast.Name) -> ast.expr:  # pylint: disable=invalid-name
        return self._expand(node)

    def visit_Attribute(self, node: ast.Attribute) -> ast.expr:  # pylint: disable=invalid-name
        return self._expand(node)

    def _expand(self, node: ast.Name | ast.Attribute) -> ast.expr:
        symbol = self._project.resolve_symbol(self._module, node)
        if not isinstance(symbol, ResolvedDeclaration):
            return node
        target = symbol.declaration
        if (
            not isinstance(target, AliasDeclaration)
            or target.value is None
            or id(target) in self._seen
        ):
            return node
        nested = _AliasExpander(self._project, symbol.module, self._seen | {id(target)})
        expanded: ast.expr = nested.visit(copy.deepcopy(target.value))
        return expanded


def parse_source_module(path: Path, name: str) -> SourceModule:
    """Parse one file into its top-level declarations and imports."""
    try:
        text = path.read_text(encoding="utf-8")
        tree = ast.parse(text, filename=str(path))
    except (OSError, UnicodeDecodeError, SyntaxError) as exc:
        raise DeclarationParseError(f"Failed to parse {path}: {exc}") from exc

    module = SourceModule(path=path, name=name, is_package=path.name == "__init__.py")
    _collect_statements(module, tree.body)
    return module


def module_name_for(path: Path, root: Path) -> str:
    try:
        relative = path.relative_to(root)
    except ValueError:
        relative = Path(path.name)
    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    if not parts:
        return path.parent.name or "__main__"
    return ".".join(parts)


def _collect_statements(module: SourceModule, statements: list[ast.stmt]) -> None:
    for node in statements:
        if isinstance(node, ast.ClassDef):
            module.declarations[node.name] = _class_declaration(node)
        elif isinstance(node, ast.TypeAlias):
            module.declarations[node.name.id] = AliasDeclaration(
                name=node.name.id,
                value=node.value,
                type_params=tuple(param.name for param in node.type_params),
                lineno=node.lineno,
            )
        elif isinstance(node, ast.AnnAssign):
            if isinstance(node.target, ast.Name) and _is_type_alias_annotation(node.annotation):
                module.declarations[node.target.id] = AliasDeclaration(
                    name=node.target.id, value=node.value, lineno=node.lineno
                )
        elif isinstance(node, ast.Assign):
            if len(node.targets) == 1 and isinstance(node.targets[0], ast.Name):
                name = node.targets[0].id
                declaration = _assignment_declaration(name, node.value, node.lineno)
                if declaration is not None:
                    module.declarations[name] = declaration
        elif isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    module.imports[alias.asname] = ImportBinding(module=alias.name, name=None)
                else:
                    top_level = alias.name.split(".")[0]
                    module.imports[top_level] = ImportBinding(module=top_level, name=None)
        elif isinstance(node, ast.ImportFrom):
            source = _absolute_module_name(module, node.module, node.level)
            for alias in node.names:
                if alias.name == "*":
                    continue
                module.imports[alias.asname or alias.name] = ImportBinding(
                    module=source, name=alias.name
                )
        elif isinstance(node, ast.If) and _is_type_checking_guard(node.test):
            _collect_statements(module, node.body)


def _class_declaration(node: ast.ClassDef) -> ClassDeclaration:
    fields: list[FieldDeclaration] = []
    members: list[tuple[str, ast.expr]] = []
    for statement in node.body:
        if isinstance(statement, ast.AnnAssign) and isinstance(statement.target, ast.Name):
            fields.append(
                FieldDeclaration(
                    name=statement.target.id,
                    annotation=statement.annotation,
                    has_default=statement.value is not None,
                )
            )
        elif (
            isinstance(statement, ast.Assign)
            and len(statement.targets) == 1
            and isinstance(statement.targets[0], ast.Name)
        ):
            members.append((statement.targets[0].id, statement.value))
    return ClassDeclaration(
        name=node.name,
        bases=tuple(node.bases),
        fields=tuple(fields),
        type_params=tuple(param.name for param in node.type_params),
        total=_total_keyword(node.keywords),
        members=tuple(members),
    )


def _assignment_declaration(name: str, value: ast.expr, lineno: int) -> Declaration | None:
    if isinstance(value, ast.Call):
        factory = _callee_name(value.func)
        if factory in _TYPE_VARIABLE_FACTORIES:
            return TypeVarDeclaration(name=name)
        if factory == "TypedDict":
            return _functional_typed_dict(name, value)
        if factory == "NewType" and len(value.args) == 2:
            return AliasDeclaration(name=name, value=value.args[1], lineno=lineno)
        return None
    if _looks_like_type_expression(value):
        return AliasDeclaration(name=name, value=value, lineno=lineno)
    return None


def _functional_typed_dict(name: str, call: ast.Call) -> ClassDeclaration:
    fields: list[FieldDeclaration] = []
    if len(call.args) > 1 and isinstance(call.args[1], ast.Dict):
        for key, annotation in zip(call.args[1].keys, call.args[1].values, strict=True):
            if isinstance(key, ast.Constant) and isinstance(key.value, str):
                fields.append(
                    FieldDeclaration(name=key.value, annotation=annotation, has_default=False)
                )
    return ClassDeclaration(
        name=name,
        bases=(),
        fields=tuple(fields),
        total=_total_keyword(call.keywords),
    )


def _total_keyword(keywords: list[ast.keyword]) -> bool:
    for keyword in keywords:
        if keyword.arg == "total" and isinstance(keyword.value, ast.Constant):
            return bool(keyword.value.value)
    return True


def _looks_like_type_expression(value: ast.expr) -> bool:
    if isinstance(value, (ast.Name, ast.Attribute, ast.Subscript)):
        return True
    if isinstance(value, ast.BinOp) and isinstance(value.op, ast.BitOr):
        return all(_looks_like_type_expression(side) for side in (value.left, value.right))
    return False


def _callee_name(func: ast.expr) -> str | None:
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def _is_type_alias_annotation(annotation: ast.expr) -> bool:
    return _callee_name(annotation) == "TypeAlias"


def _is_type_checking_guard(test: ast.expr) -> bool:
    return _callee_name(test) == "TYPE_CHECKING"


def _absolute_module_name(module: SourceModule, target: str | None, level: int) -> str:
    if level == 0:
        return target or ""
    package_parts = module.name.split(".")
    if not module.is_package:
        package_parts = package_parts[:-1]
    if level > 1:
        package_parts = package_parts[: max(len(package_parts) - (level - 1), 0)]
    if target:
        package_parts = [*package_parts, *target.split(".")]
    return ".".join(package_parts)
