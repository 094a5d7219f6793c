# minilang

`minilang` is the runtime core of a small, statically typed language that has classes.
It has three modules:

- `minilang.value` provides `Value`, a typed runtime value. Its type is `int`, `float`,
  `bool`, `string` or `error`. Ints wrap to 32 bits and floats are held at single precision.
- `minilang.symtable` provides nested scopes (`SymTable`), symbols (`SymbolInfo`, `IdKind`)
  and a `SymTableManager`. The manager tracks the current scope, finds class scopes and
  fills in the default field values of objects.
- `minilang.ast` provides `ASTNode`, an expression and statement tree that evaluates itself
  against a `SymTableManager`. It also provides `NodeKind` and `run_constructor`. Trees can
  do arithmetic, comparisons and logic. They can assign values, run `if` and `while`,
  `print`, call functions and methods, `return`, create objects and run constructors.

## What the package does not do

The package has no parser, no type checker and no command-line program. It cannot read
source text. Your own code must build the symbol tables and the trees and then call `eval`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Values

```python
from minilang.value import Value

Value.make_int(3).to_str()             # "3"
Value.make_float(1.5).to_str()         # "1.500000"
Value.default("bool").to_str()         # "false"
Value.from_text("int", "42")           # an int Value holding 42
Value.from_text("int", "")             # the default: an int Value holding 0
Value().to_str()                       # "error"
```

`Value.from_text` turns an empty or `"<uninitialized>"` text into the type's default. For any
type name other than the four builtin ones it returns an `error` value. It raises
`ValueError` when an int or float text cannot be parsed or is out of range.

When evaluation meets mismatched or unsupported types it gives an `error` value and raises
no exception. Division or modulo by zero also gives an `error` value. Integer division and
modulo truncate toward zero.

## Symbol tables

```python
from minilang.symtable import IdKind, SymbolInfo, SymTableManager

manager = SymTableManager()            # starts with a "Global" scope
manager.current_scope.add_symbol(SymbolInfo("x", "int", IdKind.VAR))
manager.enter_scope("Block")           # returns the new scope and makes it current
manager.current_scope.lookup("x")      # found in the parent scope
manager.current_scope.exists("x")      # False: "x" is not declared in this scope itself
manager.exit_scope()
manager.print_all("tables.txt")        # writes every scope to a text file
```

`SymTable.add_symbol` returns `False` and keeps the old symbol if the name is already
declared in that scope. A symbol's variable value is stored as text in `SymbolInfo.value`.
An object's fields are stored as `Value`s in `SymbolInfo.field_values`.

A class is declared in two steps. First add a `CLASS` symbol to the global scope. Then add a
scope named `Class_<Name>` that holds the class's `FIELD` and `FUNC` symbols. A `FUNC` symbol
in that scope with the class's own name is its constructor. A function runs from its `body`,
a list of `ASTNode`s. Its parameters come from `param_names` and `param_types`, and its
locals come from `def_scope`.

## Evaluating trees

```python
from minilang.ast import ASTNode
from minilang.symtable import IdKind, SymbolInfo, SymTableManager
from minilang.value import Value

manager = SymTableManager()
manager.current_scope.add_symbol(SymbolInfo("x", "int", IdKind.VAR))

program = [
    ASTNode.assign("x", ASTNode.literal(Value.make_int(2))),
    ASTNode.print_(
        ASTNode.operation(
            "*",
            ASTNode.identifier("x", "int"),
            ASTNode.literal(Value.make_int(21)),
            "int",
        )
    ),
]
for node in program:
    node.eval(manager)                 # prints 42
```

The unary operators are `"NOT"` and `"UMINUS"`. The binary operators are `+ - * / %`,
the comparisons `< <= > >= == !=`, and `"AND"` and `"OR"`. For `+`, `-`, `*`, `/` and the
comparisons, the left operand's type decides the operation.

These are the other node constructors:

- `ASTNode.if_` and `ASTNode.while_` build branches and loops. A condition that is not a `bool` stops them.
- `ASTNode.call` and `ASTNode.method_call` call a function or a method. The call returns the
  value of a `return_` node. With no `return_`, it returns the default of the function's
  `return_type`. Inside a method, the name `this` refers to the object.
- `ASTNode.field_access` and `ASTNode.assign_field` read and write an object's fields.
- `ASTNode.new` builds an object. Assigning a `new` node to a variable of a class type fills
  in the object's default fields and then runs the constructor (see `run_constructor`). The
  constructor runs only if the number of arguments matches its parameters.
- `ASTNode.other` evaluates to the default value of its type.