import io

import pytest

from minilang.symtable import IdKind, SymbolInfo, SymTable, SymTableManager
from minilang.value import Value


@pytest.fixture
def manager_with_class():
    manager = SymTableManager()
    manager.global_scope.add_symbol(SymbolInfo("Point", "Point", IdKind.CLASS))
    manager.enter_scope("Class_Point")
    manager.current_scope.add_symbol(SymbolInfo("x", "int", IdKind.FIELD))
    manager.current_scope.add_symbol(SymbolInfo("label", "string", IdKind.FIELD))
    manager.current_scope.add_symbol(SymbolInfo("move", "void", IdKind.FUNC))
    manager.exit_scope()
    return manager


def test_add_and_lookup():
    table = SymTable("Global")
    sym = SymbolInfo("a", "int", IdKind.VAR)
    assert table.add_symbol(sym) is True
    assert table.lookup("a") is sym
    assert table.lookup("b") is None


def test_add_duplicate_is_refused():
    table = SymTable("Global")
    first = SymbolInfo("a", "int", IdKind.VAR)
    table.add_symbol(first)
    assert table.add_symbol(SymbolInfo("a", "float", IdKind.VAR)) is False
    assert table.lookup("a") is first


def test_lookup_walks_parents_and_exists_does_not():
    outer = SymTable("Global")
    inner = SymTable("Inner", outer)
    sym = SymbolInfo("a", "int", IdKind.VAR)
    outer.add_symbol(sym)
    assert inner.lookup("a") is sym
    assert inner.exists("a") is False
    assert outer.exists("a") is True


def test_inner_symbol_shadows_outer():
    outer = SymTable("Global")
    inner = SymTable("Inner", outer)
    outer.add_symbol(SymbolInfo("a", "int", IdKind.VAR))
    shadow = SymbolInfo("a", "string", IdKind.VAR)
    inner.add_symbol(shadow)
    assert inner.lookup("a") is shadow


def test_enter_and_exit_scope():
    manager = SymTableManager()
    global_scope = manager.current_scope
    inner = manager.enter_scope("f")
    assert manager.current_scope is inner
    assert inner.parent is global_scope
    assert manager.all_tables == [global_scope, inner]
    manager.exit_scope()
    assert manager.current_scope is global_scope
    manager.exit_scope()
    assert manager.current_scope is global_scope


def test_find_class_scope(manager_with_class):
    scope = manager_with_class.find_class_scope("Point")
    assert scope.scope_name == "Class_Point"
    assert manager_with_class.find_class_scope("Missing") is None


def test_class_exists(manager_with_class):
    assert manager_with_class.class_exists("Point") is True
    assert manager_with_class.class_exists("x") is False
    assert manager_with_class.class_exists("Missing") is False


def test_ensure_object_fields_fills_defaults(manager_with_class):
    obj = SymbolInfo("p", "Point", IdKind.VAR)
    manager_with_class.ensure_object_fields(obj)
    assert obj.field_values == {
        "x": Value.default("int"),
        "label": Value.default("string"),
    }


def test_ensure_object_fields_keeps_existing(manager_with_class):
    obj = SymbolInfo("p", "Point", IdKind.VAR)
    obj.field_values["x"] = Value.make_int(9)
    manager_with_class.ensure_object_fields(obj)
    assert obj.field_values["x"] == Value.make_int(9)
    assert "move" not in obj.field_values


def test_ensure_object_fields_ignores_non_objects(manager_with_class):
    obj = SymbolInfo("n", "int", IdKind.VAR)
    manager_with_class.ensure_object_fields(obj)
    manager_with_class.ensure_object_fields(None)
    assert obj.field_values == {}


def test_clone_is_independent():
    original = SymbolInfo("f", "int", IdKind.FUNC, param_types=["int"])
    original.field_values["x"] = Value.make_int(1)
    duplicate = original.clone()
    duplicate.param_types.append("float")
    duplicate.field_values["x"] = Value.make_int(2)
    assert original.param_types == ["int"]
    assert original.field_values["x"] == Value.make_int(1)
    assert duplicate.name == original.name


def test_write_format():
    outer = SymTable("Global")
    inner = SymTable("Main", outer)
    func = SymbolInfo("f", "int", IdKind.FUNC, return_type="int", param_types=["int", "bool"])
    var = SymbolInfo("a", "int", IdKind.VAR, value="5")
    inner.add_symbol(var)
    inner.add_symbol(func)
    out = io.StringIO()
    inner.write(out)
    assert out.getvalue().splitlines() == [
        "== Scope: Main ===",
        "Parent scope: Global",
        "Symbols:",
        " Name: a , Type: int, Kind: Var, Value: 5",
        " Name: f , Type: int, Return: int, Parameters: (int bool ), Kind: Func",
        "",
    ]


def test_print_all_writes_every_scope(tmp_path, manager_with_class):
    target = tmp_path / "tables.txt"
    manager_with_class.print_all(str(target))
    text = target.read_text(encoding="utf-8")
    assert text.startswith("== Scope: Global ===\n")
    assert "== Scope: Class_Point ===" in text
    assert " Name: x , Type: int, Kind: Field" in text


def test_kind_labels_in_written_table():
    table = SymTable("Global")
    table.add_symbol(SymbolInfo("a_var", "int", IdKind.VAR))
    table.add_symbol(SymbolInfo("b_func", "int", IdKind.FUNC))
    table.add_symbol(SymbolInfo("c_class", "c_class", IdKind.CLASS))
    table.add_symbol(SymbolInfo("d_param", "int", IdKind.PARAM))
    table.add_symbol(SymbolInfo("e_field", "int", IdKind.FIELD))
    out = io.StringIO()
    table.write(out)
    labels = [
        line.split("Kind: ")[1]
        for line in out.getvalue().splitlines()
        if "Kind: " in line
    ]
    assert labels == ["Var", "Func", "Class", "Param", "Field"]