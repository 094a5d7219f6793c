"""Typed runtime values of the language: int, float, bool, string or error."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass

_UNSET_TEXTS = frozenset({"", "<uninitialized>"})

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def _wrap_int32(x: int) -> int:
    return (int(x) - _INT_MIN) % 2**32 + _INT_MIN


def _to_float32(x: float) -> float:
    x = float(x)
    if math.isnan(x) or math.isinf(x):
        return x
    try:
        return struct.unpack("f", struct.pack("f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _parse_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid int literal: {text!r}")
    number = int(match.group(1))
    if not _INT_MIN <= number <= _INT_MAX:
        raise ValueError(f"int out of range: {text!r}")
    return number


def _parse_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid float literal: {text!r}")
    literal = match.group(1)
    number = float(literal)
    explicit_special = any(ch.isalpha() and ch not in "eE" for ch in literal)
    if not explicit_special:
        narrowed = _to_float32(number)
        if math.isinf(narrowed):
            raise ValueError(f"float out of range: {text!r}")
        return narrowed
    return number


@dataclass(frozen=True)
class Value:
    """A value tagged with its type name; ``"error"`` marks an invalid value."""

    type: str = "error"
    i: int = 0
    f: float = 0.0
    b: bool = False
    s: str = ""

    @staticmethod
    def make_int(x: int) -> Value:
        return Value(type="int", i=_wrap_int32(x))

    @staticmethod
    def make_float(x: float) -> Value:
        return Value(type="float", f=_to_float32(x))

    @staticmethod
    def make_bool(x: bool) -> Value:
        return Value(type="bool", b=bool(x))

    @staticmethod
    def make_string(x: str) -> Value:
        return Value(type="string", s=x)

    @staticmethod
    def default(type_name: str) -> Value:
        """The zero value of a builtin type, or an error value for anything else."""
        if type_name == "int":
            return Value.make_int(0)
        if type_name == "float":
            return Value.make_float(0.0)
        if type_name == "bool":
            return Value.make_bool(False)
        if type_name == "string":
            return Value.make_string("")
        return Value()

    @staticmethod
    def from_text(type_name: str, text: str) -> Value:
        """Rebuild a value of ``type_name`` from its stored textual form."""
        if type_name not in ("int", "float", "bool", "string"):
            return Value()
        if text in _UNSET_TEXTS:
            return Value.default(type_name)
        if type_name == "int":
            return Value.make_int(_parse_int(text))
        if type_name == "float":
            return Value.make_float(_parse_float(text))
        if type_name == "bool":
            return Value.make_bool(text == "true")
        return Value.make_string(text)

    def to_str(self) -> str:
        if self.type == "int":
            return str(self.i)
        if self.type == "float":
            return f"{self.f:f}"
        if self.type == "bool":
            return "true" if self.b else "false"
        if self.type == "string":
            return self.s
        return "error"

    def __str__(self) -> str:
        return self.to_str()