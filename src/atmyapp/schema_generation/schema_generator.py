"""Structural schema generation over the static declaration model.

Every reference is inlined: the emitted tree never contains `$ref`, so a
recursive declaration cannot be represented and fails generation. Object
schemas list all declared fields, mark the required ones, and reject
undeclared properties. Literal types are captured as `const`.
"""

from __future__ import annotations

import ast
import copy
import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field

from atmyapp.json_values import JsonObject, JsonValue
from atmyapp.type_analysis import (
    AliasDeclaration,
    ClassDeclaration,
    ExternalSymbol,
    MarkedAlias,
    ResolvedDeclaration,
    SourceModule,
    Symbol,
    TypeProject,
    TypeVarDeclaration,
)

from .extraction_errors import SchemaGenerationError

_TYPING_MODULES = frozenset(
    {"builtins", "typing", "typing_extensions", "collections", "collections.abc", "types"}
)
_STRING_TYPES = frozenset({"str", "bytes", "bytearray", "LiteralString"})
_NUMBER_TYPES = frozenset({"float", "complex", "decimal.Decimal"})
_NULL_TYPES = frozenset({"None", "NoneType"})
_ANY_TYPES = frozenset({"Any", "object"})
_TRANSPARENT_FORMS = frozenset({"Annotated", "Required", "NotRequired", "ReadOnly", "Final"})
_SEQUENCE_TYPES = frozenset(
    {"list", "List", "Sequence", "MutableSequence", "Iterable", "Collection", "deque", "Deque"}
)
_SET_TYPES = frozenset({"set", "Set", "frozenset", "FrozenSet", "AbstractSet", "MutableSet"})
_TUPLE_TYPES = frozenset({"tuple", "Tuple"})
_MAPPING_TYPES = frozenset(
    {"dict", "Dict", "Mapping", "MutableMapping", "OrderedDict", "defaultdict", "DefaultDict"}
)
_GENERIC_BASES = frozenset({"Generic", "Protocol"})
_ENUM_BASES = frozenset({"enum.Enum", "enum.IntEnum", "enum.StrEnum", "enum.Flag", "enum.IntFlag"})
_STRING_FORMATS = {
    "datetime.datetime": "date-time",
    "datetime.date": "date",
    "datetime.time": "time",
    "uuid.UUID": "uuid",
}

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Scope:
    module: SourceModule
    bindings: Mapping[str, JsonValue] = field(default_factory=dict)


class SchemaGenerator:
    """Generate fully inlined schemas for marked aliases of a `TypeProject`."""

    def __init__(self, project: TypeProject) -> None:
        self._project = project
        self._options = project.options
        self._expanding_ids: list[int] = []

    @property
    def project(self) -> TypeProject:
        return self._project

    def generate(self, alias: MarkedAlias) -> JsonValue | None:
        """Return the alias's schema, or None when the alias has no value."""
        declaration = alias.declaration
        if declaration.value is None:
            return None
        self._expanding_ids = []
        with self._expanding(declaration):
            bindings: dict[str, JsonValue] = {name: {} for name in declaration.type_params}
            return self._resolve(declaration.value, _Scope(alias.module, bindings))

    def _resolve(self, expr: ast.expr, scope: _Scope) -> JsonValue:
        if isinstance(expr, ast.Constant):
            if expr.value is None:
                return {"type": "null"}
            if isinstance(expr.value, str):
                return self._resolve_forward_reference(expr.value, scope)
            return self._unresolved(ast.unparse(expr))
        if isinstance(expr, ast.Name) and expr.id in scope.bindings:
            return copy.deepcopy(scope.bindings[expr.id])
        if isinstance(expr, (ast.Name, ast.Attribute)):
            symbol = self._project.resolve_symbol(scope.module, expr)
            return self._from_symbol(symbol, (), scope, ast.unparse(expr))
        if isinstance(expr, ast.Subscript):
            if isinstance(expr.value, ast.Name) and expr.value.id in scope.bindings:
                return copy.deepcopy(scope.bindings[expr.value.id])
            symbol = self._project.resolve_symbol(scope.module, expr.value)
            return self._from_symbol(
                symbol, _subscript_arguments(expr), scope, ast.unparse(expr.value)
            )
        if isinstance(expr, ast.BinOp) and isinstance(expr.op, ast.BitOr):
            return self._union([expr.left, expr.right], scope)
        return self._unresolved(ast.unparse(expr))

    def _from_symbol(
        self,
        symbol: Symbol | None,
        args: Sequence[ast.expr],
        scope: _Scope,
        label: str,
    ) -> JsonValue:
        if isinstance(symbol, ResolvedDeclaration):
            declaration = symbol.declaration
            if isinstance(declaration, TypeVarDeclaration):
                return {}
            arguments = [self._resolve(arg, scope) for arg in args]
            if isinstance(declaration, ClassDeclaration):
                return self._class_schema(symbol.module, declaration, arguments)
            return self._alias_schema(symbol.module, declaration, arguments)
        if isinstance(symbol, ExternalSymbol):
            return self._special_form(symbol.qualified_name, args, scope)
        return self._unresolved(label)

    def _alias_schema(
        self, module: SourceModule, declaration: AliasDeclaration, arguments: list[JsonValue]
    ) -> JsonValue:
        if declaration.value is None:
            return self._unresolved(declaration.name)
        with self._expanding(declaration):
            bindings = _bind(declaration.type_params, arguments)
            return self._resolve(declaration.value, _Scope(module, bindings))

    def _class_schema(
        self, module: SourceModule, declaration: ClassDeclaration, arguments: list[JsonValue]
    ) -> JsonValue:
        with self._expanding(declaration):
            if self._is_enum(module, declaration, set()):
                return self._enum_schema(declaration)

            scope = _Scope(module, _bind(self._class_type_params(module, declaration), arguments))
            properties: JsonObject = {}
            required: list[str] = []
            for base in declaration.bases:
                self._merge_base(base, scope, properties, required)

            for field_declaration in declaration.fields:
                annotation, requirement, is_class_var = self._unwrap_qualifiers(
                    field_declaration.annotation, scope
                )
                if is_class_var:
                    continue
                name = field_declaration.name
                properties[name] = self._resolve(annotation, scope)
                if requirement is None:
                    requirement = declaration.total and not field_declaration.has_default
                if name in required:
                    required.remove(name)
                if requirement:
                    required.append(name)

            schema: JsonObject = {"type": "object", "properties": properties}
            if required:
                schema["required"] = list(required)
            schema["additionalProperties"] = False
            return schema

    def _merge_base(
        self,
        base: ast.expr,
        scope: _Scope,
        properties: JsonObject,
        required: list[str],
    ) -> None:
        origin = base.value if isinstance(base, ast.Subscript) else base
        symbol = self._project.resolve_symbol(scope.module, origin)
        if not isinstance(symbol, ResolvedDeclaration):
            return
        if not isinstance(symbol.declaration, ClassDeclaration):
            return
        arguments = (
            [self._resolve(arg, scope) for arg in _subscript_arguments(base)]
            if isinstance(base, ast.Subscript)
            else []
        )
        inherited = self._class_schema(symbol.module, symbol.declaration, arguments)
        if not isinstance(inherited, dict):
            return
        inherited_properties = inherited.get("properties")
        if isinstance(inherited_properties, dict):
            properties.update(inherited_properties)
        inherited_required = inherited.get("required")
        if isinstance(inherited_required, list):
            for name in inherited_required:
                if isinstance(name, str) and name not in required:
                    required.append(name)

    def _class_type_params(
        self, module: SourceModule, declaration: ClassDeclaration
    ) -> tuple[str, ...]:
        if declaration.type_params:
            return declaration.type_params
        implicit: list[str] = []
        for base in declaration.bases:
            if not isinstance(base, ast.Subscript):
                continue
            names = [arg.id for arg in _subscript_arguments(base) if isinstance(arg, ast.Name)]
            origin = self._project.resolve_symbol(module, base.value)
            if (
                isinstance(origin, ExternalSymbol)
                and _special_name(origin.qualified_name) in _GENERIC_BASES
            ):
                return tuple(names)
            for name in names:
                symbol = self._project.lookup(module, name)
                if (
                    isinstance(symbol, ResolvedDeclaration)
                    and isinstance(symbol.declaration, TypeVarDeclaration)
                    and name not in implicit
                ):
                    implicit.append(name)
        return tuple(implicit)

    def _unwrap_qualifiers(
        self, annotation: ast.expr, scope: _Scope
    ) -> tuple[ast.expr, bool | None, bool]:
        """Peel `Required`/`NotRequired`/`ClassVar`-style wrappers off a field annotation."""
        requirement: bool | None = None
        is_class_var = False
        current = annotation
        while True:
            if isinstance(current, ast.Constant) and isinstance(current.value, str):
                parsed = _parse_forward_reference(current.value)
                if parsed is None:
                    break
                current = parsed
                continue
            if isinstance(current, (ast.Name, ast.Attribute)):
                is_class_var = is_class_var or self._qualifier(current, scope) == "ClassVar"
                break
            if not isinstance(current, ast.Subscript):
                break
            qualifier = self._qualifier(current.value, scope)
            if qualifier == "Required":
                requirement = True
            elif qualifier == "NotRequired":
                requirement = False
            elif qualifier == "ClassVar":
                is_class_var = True
            elif qualifier not in _TRANSPARENT_FORMS:
                break
            current = _subscript_arguments(current)[0]
        return current, requirement, is_class_var

    def _qualifier(self, expr: ast.expr, scope: _Scope) -> str | None:
        symbol = self._project.resolve_symbol(scope.module, expr)
        if isinstance(symbol, ExternalSymbol):
            return _special_name(symbol.qualified_name)
        return None

    def _special_form(
        self, qualified_name: str, args: Sequence[ast.expr], scope: _Scope
    ) -> JsonValue:
        name = _special_name(qualified_name)
        if name in _STRING_TYPES:
            return {"type": "string"}
        if name == "int":
            return {"type": self._options.integer_type}
        if name in _NUMBER_TYPES:
            return {"type": "number"}
        if name == "bool":
            return {"type": "boolean"}
        if name in _NULL_TYPES:
            return {"type": "null"}
        if name in _ANY_TYPES:
            return {}
        if name in _STRING_FORMATS:
            return {"type": "string", "format": _STRING_FORMATS[name]}
        if name == "Literal":
            return self._literal(args, scope)
        if name == "Union":
            return self._union(args, scope)
        if name == "Optional" and args:
            return self._union([args[0], ast.Constant(value=None)], scope)
        if name in _TRANSPARENT_FORMS and args:
            return self._resolve(args[0], scope)
        if name in _SEQUENCE_TYPES:
            return self._array(args[0] if args else None, scope)
        if name in _SET_TYPES:
            schema = self._array(args[0] if args else None, scope)
            schema["uniqueItems"] = True
            return schema
        if name in _TUPLE_TYPES:
            return self._tuple(args, scope)
        if name in _MAPPING_TYPES:
            value_schema: JsonValue = self._resolve(args[1], scope) if len(args) > 1 else {}
            return {"type": "object", "additionalProperties": value_schema}
        return self._unresolved(qualified_name)

    def _literal(self, args: Sequence[ast.expr], scope: _Scope) -> JsonValue:
        values: list[JsonValue] = []
        for arg in args:
            values.extend(self._literal_values(arg, scope))
        if not values:
            return self._unresolved("Literal[]")
        return self._literal_schema(values)

    def _literal_values(self, arg: ast.expr, scope: _Scope) -> list[JsonValue]:
        if isinstance(arg, ast.Constant) and isinstance(arg.value, (str, int, float, bool)):
            return [arg.value]
        if isinstance(arg, ast.Constant) and arg.value is None:
            return [None]
        if (
            isinstance(arg, ast.UnaryOp)
            and isinstance(arg.op, ast.USub)
            and isinstance(arg.operand, ast.Constant)
            and isinstance(arg.operand.value, (int, float))
        ):
            return [-arg.operand.value]
        # Nested `Literal[...]` or an alias of one.
        nested = self._resolve(arg, scope)
        if isinstance(nested, dict) and "const" in nested:
            return [nested["const"]]
        if isinstance(nested, dict) and isinstance(nested.get("enum"), list):
            return list(nested["enum"])
        self._unresolved(ast.unparse(arg))
        return []

    def _literal_schema(self, values: list[JsonValue]) -> JsonObject:
        unique = _dedupe(values)
        types = _dedupe([self._json_type(value) for value in unique])
        type_value: JsonValue = types[0] if len(types) == 1 else types
        if len(unique) == 1:
            return {"type": type_value, "const": unique[0]}
        return {"type": type_value, "enum": unique}

    def _json_type(self, value: JsonValue) -> str:
        if isinstance(value, bool):
            return "boolean"
        if isinstance(value, int):
            return self._options.integer_type
        if isinstance(value, float):
            return "number"
        if value is None:
            return "null"
        return "string"

    def _union(self, members: Sequence[ast.expr], scope: _Scope) -> JsonValue:
        schemas: list[JsonValue] = []
        for member in members:
            schema = self._resolve(member, scope)
            if isinstance(schema, dict) and list(schema) == ["anyOf"]:
                nested = schema["anyOf"]
                schemas.extend(nested if isinstance(nested, list) else [schema])
            else:
                schemas.append(schema)

        if schemas and all(_is_literal_schema(schema) for schema in schemas):
            values: list[JsonValue] = []
            for schema in schemas:
                assert isinstance(schema, dict)
                if "const" in schema:
                    values.append(schema["const"])
                else:
                    enum_values = schema["enum"]
                    assert isinstance(enum_values, list)
                    values.extend(enum_values)
            return self._literal_schema(values)

        unique: list[JsonValue] = []
        for schema in schemas:
            if schema not in unique:
                unique.append(schema)
        if len(unique) == 1:
            return unique[0]
        return {"anyOf": unique}

    def _array(self, item: ast.expr | None, scope: _Scope) -> JsonObject:
        items: JsonValue = self._resolve(item, scope) if item is not None else {}
        return {"type": "array", "items": items}

    def _tuple(self, args: Sequence[ast.expr], scope: _Scope) -> JsonObject:
        if not args:
            return {"type": "array"}
        if len(args) == 2 and isinstance(args[1], ast.Constant) and args[1].value is Ellipsis:
            return self._array(args[0], scope)
        items: list[JsonValue] = [self._resolve(arg, scope) for arg in args]
        return {"type": "array", "items": items, "minItems": len(items), "maxItems": len(items)}

    def _is_enum(
        self, module: SourceModule, declaration: ClassDeclaration, seen: set[int]
    ) -> bool:
        if id(declaration) in seen:
            return False
        seen.add(id(declaration))
        for base in declaration.bases:
            symbol = self._project.resolve_symbol(module, base)
            if isinstance(symbol, ExternalSymbol) and symbol.qualified_name in _ENUM_BASES:
                return True
            if (
                isinstance(symbol, ResolvedDeclaration)
                and isinstance(symbol.declaration, ClassDeclaration)
                and self._is_enum(symbol.module, symbol.declaration, seen)
            ):
                return True
        return False

    def _enum_schema(self, declaration: ClassDeclaration) -> JsonValue:
        values: list[JsonValue] = []
        for name, value in declaration.members:
            if name.startswith("_"):
                continue
            if isinstance(value, ast.Constant) and isinstance(value.value, (str, int, float, bool)):
                values.append(value.value)
            else:
                _LOGGER.debug("Skipping non-literal enum member %s.%s", declaration.name, name)
        if not values:
            return self._unresolved(declaration.name)
        return {"type": self._literal_schema(values)["type"], "enum": _dedupe(values)}

    def _resolve_forward_reference(self, text: str, scope: _Scope) -> JsonValue:
        parsed = _parse_forward_reference(text)
        if parsed is None:
            return self._unresolved(repr(text))
        return self._resolve(parsed, scope)

    def _unresolved(self, label: str) -> JsonObject:
        if self._options.ignore_errors:
            _LOGGER.debug("Cannot resolve type '%s', emitting an unconstrained schema", label)
            return {}
        raise SchemaGenerationError(f"Cannot resolve type '{label}'")

    @contextmanager
    def _expanding(self, declaration: AliasDeclaration | ClassDeclaration) -> Iterator[None]:
        if id(declaration) in self._expanding_ids:
            raise SchemaGenerationError(
                f"Recursive type '{declaration.name}' cannot be inlined"
            )
        self._expanding_ids.append(id(declaration))
        try:
            yield
        finally:
            self._expanding_ids.pop()


def _subscript_arguments(expr: ast.Subscript) -> tuple[ast.expr, ...]:
    if isinstance(expr.slice, ast.Tuple):
        return tuple(expr.slice.elts)
    return (expr.slice,)


def _bind(params: Sequence[str], arguments: Sequence[JsonValue]) -> dict[str, JsonValue]:
    # Missing type arguments stay unconstrained.
    return {
        name: arguments[index] if index < len(arguments) else {}
        for index, name in enumerate(params)
    }


def _special_name(qualified_name: str) -> str:
    module, _, name = qualified_name.rpartition(".")
    if module in _TYPING_MODULES:
        return name
    return qualified_name


def _parse_forward_reference(text: str) -> ast.expr | None:
    try:
        return ast.parse(text.strip(), mode="eval").body
    except SyntaxError:
        return None


def _is_literal_schema(schema: JsonValue) -> bool:
    if not isinstance(schema, dict):
        return False
    if "const" not in schema and not isinstance(schema.get("enum"), list):
        return False
    return set(schema) <= {"type", "const", "enum"}


def _dedupe(values: Sequence[JsonValue]) -> list[JsonValue]:
    # Keyed by type so that True and 1 stay distinct.
    seen: set[tuple[str, str]] = set()
    unique: list[JsonValue] = []
    for value in values:
        key = (type(value).__name__, repr(value))
        if key not in seen:
            seen.add(key)
            unique.append(value)
    return unique
