"""Symbols, nested scopes and the manager that tracks every scope."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, TextIO

from minilang.value import Value


class IdKind(Enum):
    VAR = "Var"
    FUNC = "Func"
    CLASS = "Class"
    PARAM = "Param"
    FIELD = "Field"

    @property
    def label(self) -> str:
        return self.value


@dataclass
class SymbolInfo:
    """Everything known about one declared name."""

    name: str = ""
    type: str = ""
    kind: IdKind = IdKind.VAR
    return_type: str = ""
    param_types: list[str] = field(default_factory=list)
    param_names: list[str] = field(default_factory=list)
    body: list[Any] | None = None
    def_scope: SymTable | None = None
    ref_object: SymbolInfo | None = None
    value: str = ""
    field_values: dict[str, Value] = field(default_factory=dict)

    def clone(self) -> SymbolInfo:
        """A copy with its own lists and field map; body and scope links are shared."""
        duplicate = copy.copy(self)
        duplicate.param_types = list(self.param_types)
        duplicate.param_names = list(self.param_names)
        duplicate.field_values = dict(self.field_values)
        return duplicate


class SymTable:
    """One scope: a named set of symbols with an optional enclosing scope."""

    def __init__(self, scope_name: str, parent: SymTable | None = None) -> None:
        self.scope_name = scope_name
        self.parent = parent
        self.symbols: dict[str, SymbolInfo] = {}

    def __repr__(self) -> str:
        return f"SymTable({self.scope_name!r}, symbols={sorted(self.symbols)!r})"

    def __contains__(self, name: object) -> bool:
        return name in self.symbols

    def __iter__(self) -> Iterator[SymbolInfo]:
        for name in sorted(self.symbols):
            yield self.symbols[name]

    def add_symbol(self, symbol: SymbolInfo) -> bool:
        """Add ``symbol`` unless its name is already declared here; report success."""
        if symbol.name in self.symbols:
            return False
        self.symbols[symbol.name] = symbol
        return True

    def lookup(self, name: str) -> SymbolInfo | None:
        """Find ``name`` here or in the nearest enclosing scope."""
        scope: SymTable | None = self
        while scope is not None:
            found = scope.symbols.get(name)
            if found is not None:
                return found
            scope = scope.parent
        return None

    def exists(self, name: str) -> bool:
        """Whether ``name`` is declared in this scope itself."""
        return name in self.symbols

    def write(self, out: TextIO) -> None:
        out.write(f"== Scope: {self.scope_name} ===\n")
        if self.parent is not None:
            out.write(f"Parent scope: {self.parent.scope_name}\n")
        out.write("Symbols:\n")
        for sym in self:
            line = f" Name: {sym.name} , Type: {sym.type}"
            if sym.kind is IdKind.FUNC:
                params = "".join(f"{p} " for p in sym.param_types)
                line += f", Return: {sym.return_type}, Parameters: ({params})"
            line += f", Kind: {sym.kind.label}"
            if sym.value:
                line += f", Value: {sym.value}"
            out.write(line + "\n")
        out.write("\n")


class SymTableManager:
    """Keeps every scope created and the one currently active."""

    def __init__(self) -> None:
        self.current_scope = SymTable("Global")
        self.all_tables: list[SymTable] = [self.current_scope]

    @property
    def global_scope(self) -> SymTable:
        return self.all_tables[0]

    def enter_scope(self, name: str) -> SymTable:
        scope = SymTable(name, self.current_scope)
        self.all_tables.append(scope)
        self.current_scope = scope
        return scope

    def exit_scope(self) -> None:
        if self.current_scope.parent is not None:
            self.current_scope = self.current_scope.parent

    def find_class_scope(self, class_name: str) -> SymTable | None:
        wanted = f"Class_{class_name}"
        return next((t for t in self.all_tables if t.scope_name == wanted), None)

    def class_exists(self, class_name: str) -> bool:
        sym = self.global_scope.lookup(class_name)
        return sym is not None and sym.kind is IdKind.CLASS

    def ensure_object_fields(self, obj: SymbolInfo | None) -> None:
        """Give an object every field of its class, defaulted where still missing."""
        if obj is None or not self.class_exists(obj.type):
            return
        class_scope = self.find_class_scope(obj.type)
        if class_scope is None:
            return
        for sym in class_scope:
            if sym.kind is IdKind.FIELD and sym.name not in obj.field_values:
                obj.field_values[sym.name] = Value.default(sym.type)

    def print_all(self, filename: str) -> None:
        with open(filename, "w", encoding="utf-8") as out:
            for table in self.all_tables:
                table.write(out)