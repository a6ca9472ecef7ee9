"""
String enum definitions for scorepad concepts.
"""

from enum import Enum


class Operator(str, Enum):
    """Binary operators accepted by the calculator."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"


class CalculatorKey(str, Enum):
    """Non-operator keypad keys."""

    EQUALS = "="
    CLEAR = "C"


class StorageKey(str, Enum):
    """Logical keys of the persisted ledger snapshot."""

    PLAYERS = "players"
    ROUNDS = "rounds"
