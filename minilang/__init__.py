"""Typed values, scoped symbol tables and an AST evaluator for a small class-based language."""

__version__ = "0.1.0"
__all__ = ["ast", "symtable", "value"]