"""Syntax tree nodes of the language and the tree-walking evaluator."""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable

from minilang.symtable import IdKind, SymbolInfo, SymTable, SymTableManager
from minilang.value import Value


class NodeKind(Enum):
    LITERAL = auto()
    ID = auto()
    FIELD = auto()
    OTHER = auto()
    OP = auto()
    CALL = auto()
    IF = auto()
    WHILE = auto()
    RETURN = auto()
    ASSIGN = auto()
    PRINT = auto()
    NEW = auto()


class _ReturnSignal(Exception):
    """Unwinds a function body when a return statement runs."""

    def __init__(self, value: Value) -> None:
        super().__init__()
        self.value = value


def _eval_block(block: list[ASTNode | None] | None, manager: SymTableManager) -> None:
    for node in block or ():
        if node is not None:
            node.eval(manager)


def _eval_args(args: list[ASTNode | None] | None, manager: SymTableManager) -> list[Value]:
    return [node.eval(manager) if node is not None else Value() for node in args or ()]


def _runtime_parent(def_scope: SymTable | None, manager: SymTableManager) -> SymTable:
    if def_scope is not None and def_scope.parent is not None:
        return def_scope.parent
    return manager.global_scope


def _call_scope(func: SymbolInfo, manager: SymTableManager, arg_vals: list[Value]) -> SymTable:
    """Build a fresh activation scope for ``func`` bound to ``arg_vals``."""
    def_scope = func.def_scope
    runtime = SymTable(f"Call_{func.name}", _runtime_parent(def_scope, manager))

    if def_scope is not None:
        for sym in def_scope:
            if sym.kind not in (IdKind.VAR, IdKind.PARAM):
                continue
            local = sym.clone()
            local.param_types = []
            local.param_names = []
            local.body = None
            local.def_scope = None
            local.ref_object = None
            runtime.add_symbol(local)

    for name, type_name, arg in zip(func.param_names, func.param_types, arg_vals):
        existing = runtime.symbols.get(name)
        if existing is not None:
            existing.value = arg.to_str()
        else:
            runtime.add_symbol(
                SymbolInfo(name=name, type=type_name, kind=IdKind.PARAM, value=arg.to_str())
            )

    for sym in list(runtime):
        if manager.class_exists(sym.type):
            manager.ensure_object_fields(sym)
    return runtime


def _invoke(func: SymbolInfo, runtime: SymTable, manager: SymTableManager) -> Value:
    saved = manager.current_scope
    manager.current_scope = runtime
    try:
        _eval_block(func.body, manager)
    except _ReturnSignal as signal:
        return signal.value
    finally:
        manager.current_scope = saved
    return Value.default(func.return_type)


def run_constructor(
    object_var: SymbolInfo, args: list[ASTNode | None] | None, manager: SymTableManager
) -> None:
    """Run the constructor of ``object_var``'s class and store the resulting fields."""
    class_scope = manager.find_class_scope(object_var.type)
    if class_scope is None:
        return
    ctor = class_scope.lookup(object_var.type)
    if ctor is None or ctor.kind is not IdKind.FUNC or ctor.body is None:
        return

    arg_vals = _eval_args(args, manager)
    if len(ctor.param_types) != len(arg_vals):
        return

    runtime = SymTable(f"Constructor_{ctor.name}", _runtime_parent(ctor.def_scope, manager))
    for name, type_name, arg in zip(ctor.param_names, ctor.param_types, arg_vals):
        runtime.add_symbol(
            SymbolInfo(name=name, type=type_name, kind=IdKind.PARAM, value=arg.to_str())
        )

    for sym in class_scope:
        if sym.kind in (IdKind.FIELD, IdKind.VAR):
            local = sym.clone()
            stored = object_var.field_values.get(sym.name)
            if stored is not None:
                local.value = stored.to_str()
            runtime.add_symbol(local)

    saved = manager.current_scope
    manager.current_scope = runtime
    try:
        _eval_block(ctor.body, manager)
    except _ReturnSignal:
        pass  # a return inside a constructor just ends it
    finally:
        manager.current_scope = saved

    for sym in runtime:
        if sym.kind in (IdKind.FIELD, IdKind.VAR):
            object_var.field_values[sym.name] = Value.from_text(sym.type, sym.value)


def _payload(v: Value, type_name: str) -> Any:
    if type_name == "int":
        return v.i
    if type_name == "float":
        return v.f
    if type_name == "bool":
        return v.b
    return v.s


def _make(type_name: str, x: Any) -> Value:
    if type_name == "int":
        return Value.make_int(x)
    if type_name == "float":
        return Value.make_float(x)
    return Value.make_string(x)


def _int_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


_ARITHMETIC: dict[str, tuple[Callable[[Any, Any], Any], tuple[str, ...]]] = {
    "+": (operator.add, ("int", "float", "string")),
    "-": (operator.sub, ("int", "float")),
    "*": (operator.mul, ("int", "float")),
}
_ORDERING = {"<": operator.lt, "<=": operator.le, ">": operator.gt, ">=": operator.ge}
_EQUALITY = {"==": operator.eq, "!=": operator.ne}
_LOGIC = {"AND": lambda x, y: x and y, "OR": lambda x, y: x or y}


def _binary(op: str, a: Value, b: Value) -> Value:
    t = a.type
    if op in _ARITHMETIC:
        func, types = _ARITHMETIC[op]
        if t in types:
            return _make(t, func(_payload(a, t), _payload(b, t)))
        return Value()
    if op == "/":
        if t == "int":
            return Value() if b.i == 0 else Value.make_int(_int_div(a.i, b.i))
        if t == "float":
            return Value() if b.f == 0 else Value.make_float(a.f / b.f)
        return Value()
    if op == "%":
        if t == "int" and b.i != 0:
            return Value.make_int(a.i - b.i * _int_div(a.i, b.i))
        return Value()
    if op in _ORDERING:
        if t in ("int", "float"):
            return Value.make_bool(_ORDERING[op](_payload(a, t), _payload(b, t)))
        return Value()
    if op in _EQUALITY:
        if t in ("int", "float", "bool", "string"):
            return Value.make_bool(_EQUALITY[op](_payload(a, t), _payload(b, t)))
        return Value()
    if op in _LOGIC:
        if t != "bool" or b.type != "bool":
            return Value()
        return Value.make_bool(_LOGIC[op](a.b, b.b))
    return Value()


@dataclass
class ASTNode:
    """One node of a program tree; ``eval`` runs it against a scope manager."""

    kind: NodeKind
    expr_type: str = "error"
    op: str = ""
    id_name: str = ""
    obj_name: str = ""
    field_name: str = ""
    args: list[ASTNode | None] | None = None
    then_block: list[ASTNode | None] | None = None
    else_block: list[ASTNode | None] | None = None
    lit: Value = field(default_factory=Value)
    left: ASTNode | None = None
    right: ASTNode | None = None

    @staticmethod
    def _type_of(expr: ASTNode | None) -> str:
        return expr.expr_type if expr is not None else "error"

    @staticmethod
    def literal(value: Value) -> ASTNode:
        return ASTNode(NodeKind.LITERAL, expr_type=value.type, lit=value)

    @staticmethod
    def new(class_name: str, args: list[ASTNode | None] | None) -> ASTNode:
        return ASTNode(NodeKind.NEW, expr_type=class_name, id_name=class_name, args=args)

    @staticmethod
    def identifier(name: str, type_name: str) -> ASTNode:
        return ASTNode(NodeKind.ID, expr_type=type_name, id_name=name)

    @staticmethod
    def field_access(obj: str, field: str, type_name: str) -> ASTNode:
        return ASTNode(NodeKind.FIELD, expr_type=type_name, obj_name=obj, field_name=field)

    @staticmethod
    def other(type_name: str) -> ASTNode:
        return ASTNode(NodeKind.OTHER, expr_type=type_name)

    @staticmethod
    def operation(
        op: str, left: ASTNode | None, right: ASTNode | None, type_name: str
    ) -> ASTNode:
        return ASTNode(NodeKind.OP, expr_type=type_name, op=op, left=left, right=right)

    @staticmethod
    def assign(name: str, expr: ASTNode | None) -> ASTNode:
        return ASTNode(
            NodeKind.ASSIGN, expr_type=ASTNode._type_of(expr), id_name=name, left=expr
        )

    @staticmethod
    def assign_field(obj: str, field: str, expr: ASTNode | None) -> ASTNode:
        return ASTNode(
            NodeKind.ASSIGN,
            expr_type=ASTNode._type_of(expr),
            obj_name=obj,
            field_name=field,
            left=expr,
        )

    @staticmethod
    def call(name: str, args: list[ASTNode | None] | None, type_name: str) -> ASTNode:
        return ASTNode(NodeKind.CALL, expr_type=type_name, id_name=name, args=args)

    @staticmethod
    def method_call(
        obj: str, method: str, args: list[ASTNode | None] | None, type_name: str
    ) -> ASTNode:
        return ASTNode(
            NodeKind.CALL, expr_type=type_name, obj_name=obj, field_name=method, args=args
        )

    @staticmethod
    def if_(
        cond: ASTNode | None,
        then_block: list[ASTNode | None] | None,
        else_block: list[ASTNode | None] | None,
    ) -> ASTNode:
        return ASTNode(
            NodeKind.IF,
            expr_type="void",
            left=cond,
            then_block=then_block,
            else_block=else_block,
        )

    @staticmethod
    def while_(cond: ASTNode | None, body: list[ASTNode | None] | None) -> ASTNode:
        return ASTNode(NodeKind.WHILE, expr_type="void", left=cond, then_block=body)

    @staticmethod
    def return_(expr: ASTNode | None) -> ASTNode:
        return ASTNode(NodeKind.RETURN, expr_type=ASTNode._type_of(expr), left=expr)

    @staticmethod
    def print_(expr: ASTNode | None) -> ASTNode:
        return ASTNode(NodeKind.PRINT, expr_type=ASTNode._type_of(expr), left=expr)

    def eval(self, manager: SymTableManager) -> Value:
        """Evaluate this node; invalid operations yield an error value."""
        handler = _HANDLERS.get(self.kind)
        return handler(self, manager) if handler is not None else Value()

    def _eval_left(self, manager: SymTableManager) -> Value:
        return self.left.eval(manager) if self.left is not None else Value()

    def _eval_literal(self, manager: SymTableManager) -> Value:
        return self.lit

    def _eval_other(self, manager: SymTableManager) -> Value:
        return Value.default(self.expr_type)

    def _eval_call(self, manager: SymTableManager) -> Value:
        arg_vals = _eval_args(self.args, manager)
        if not self.obj_name:
            func = manager.current_scope.lookup(self.id_name)
            if func is None or func.kind is not IdKind.FUNC or func.body is None:
                return Value()
            return _invoke(func, _call_scope(func, manager, arg_vals), manager)

        obj = manager.current_scope.lookup(self.obj_name)
        if obj is None or not manager.class_exists(obj.type):
            return Value()
        class_scope = manager.find_class_scope(obj.type)
        if class_scope is None:
            return Value()
        method = class_scope.lookup(self.field_name)
        if method is None or method.kind is not IdKind.FUNC or method.body is None:
            return Value()

        manager.ensure_object_fields(obj)
        runtime = _call_scope(method, manager, arg_vals)
        this = runtime.symbols.get("this")
        if this is not None:
            this.ref_object = obj
            this.type = obj.type
        else:
            runtime.add_symbol(
                SymbolInfo(name="this", type=obj.type, kind=IdKind.VAR, ref_object=obj)
            )
        return _invoke(method, runtime, manager)

    def _condition(self, manager: SymTableManager) -> bool | None:
        cond = self.left.eval(manager) if self.left is not None else Value()
        return cond.b if cond.type == "bool" else None

    def _eval_if(self, manager: SymTableManager) -> Value:
        if self.left is None:
            return Value()
        cond = self._condition(manager)
        if cond is None:
            return Value()
        _eval_block(self.then_block if cond else self.else_block, manager)
        return Value()

    def _eval_while(self, manager: SymTableManager) -> Value:
        if self.left is None:
            return Value()
        while self._condition(manager):
            _eval_block(self.then_block, manager)
        return Value()

    def _eval_return(self, manager: SymTableManager) -> Value:
        raise _ReturnSignal(self._eval_left(manager))

    def _resolve_object(self, manager: SymTableManager) -> SymbolInfo | None:
        obj = manager.current_scope.lookup(self.obj_name)
        if obj is None:
            return None
        if obj.ref_object is not None:
            obj = obj.ref_object
        manager.ensure_object_fields(obj)
        return obj

    def _eval_field(self, manager: SymTableManager) -> Value:
        obj = self._resolve_object(manager)
        if obj is None:
            return Value()
        stored = obj.field_values.get(self.field_name)
        return stored if stored is not None else Value.default(self.expr_type)

    def _eval_id(self, manager: SymTableManager) -> Value:
        sym = manager.current_scope.lookup(self.id_name)
        if sym is None:
            return Value()
        if sym.value == "":
            return Value.default(sym.type)
        return Value.from_text(sym.type, sym.value)

    def _eval_assign(self, manager: SymTableManager) -> Value:
        if self.left is None:
            return Value()
        result = self.left.eval(manager)

        if self.obj_name:
            obj = self._resolve_object(manager)
            if obj is None:
                return Value()
            obj.field_values[self.field_name] = result
            return result

        sym = manager.current_scope.lookup(self.id_name)
        if sym is None:
            return Value()
        sym.value = result.to_str()
        if self.left.kind is NodeKind.NEW and manager.class_exists(sym.type):
            manager.ensure_object_fields(sym)
            run_constructor(sym, self.left.args, manager)
        return result

    def _eval_print(self, manager: SymTableManager) -> Value:
        if self.left is None:
            return Value()
        result = self.left.eval(manager)
        print(result.to_str())
        return result

    def _eval_new(self, manager: SymTableManager) -> Value:
        return Value(type=self.id_name)

    def _eval_op(self, manager: SymTableManager) -> Value:
        if self.op == "NOT":
            a = self._eval_left(manager)
            return Value.make_bool(not a.b) if a.type == "bool" else Value()
        if self.op == "UMINUS":
            a = self._eval_left(manager)
            if a.type == "int":
                return Value.make_int(-a.i)
            if a.type == "float":
                return Value.make_float(-a.f)
            return Value()
        a = self._eval_left(manager)
        b = self.right.eval(manager) if self.right is not None else Value()
        return _binary(self.op, a, b)


_HANDLERS: dict[NodeKind, Callable[[ASTNode, SymTableManager], Value]] = {
    NodeKind.LITERAL: ASTNode._eval_literal,
    NodeKind.OTHER: ASTNode._eval_other,
    NodeKind.CALL: ASTNode._eval_call,
    NodeKind.IF: ASTNode._eval_if,
    NodeKind.WHILE: ASTNode._eval_while,
    NodeKind.RETURN: ASTNode._eval_return,
    NodeKind.FIELD: ASTNode._eval_field,
    NodeKind.ID: ASTNode._eval_id,
    NodeKind.ASSIGN: ASTNode._eval_assign,
    NodeKind.PRINT: ASTNode._eval_print,
    NodeKind.NEW: ASTNode._eval_new,
    NodeKind.OP: ASTNode._eval_op,
}