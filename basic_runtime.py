"""Variable/array state and the expression evaluator."""
from basic_ast import ArrayAccess, BinaryOp, Literal, Variable
from basic_errors import (
    ArrayTooLarge, DivisionByZero, IndexOutOfBounds, TypeMismatch,
    UndimensionedArray,
)

LETTERS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
MAX_ARRAY_SIZE = 32767


def _slot(name):
    return ord(name) - ord('A')


class RuntimeState:
    """26 slots, one per letter.

    A slot is None (never touched, reads as scalar 0), an int (scalar) or a
    list of ints (array declared by DIM). A letter is never both.
    """

    def __init__(self):
        self.slots = [None] * len(LETTERS)

    def reset(self):
        self.slots = [None] * len(LETTERS)

    # --- scalars ---
    def get_scalar(self, name):
        value = self.slots[_slot(name)]
        if isinstance(value, list):
            raise TypeMismatch(name, "a scalar")
        return 0 if value is None else value

    def set_scalar(self, name, value):
        if isinstance(self.slots[_slot(name)], list):
            raise TypeMismatch(name, "a scalar")
        self.slots[_slot(name)] = value

    # --- arrays ---
    def _array(self, name):
        value = self.slots[_slot(name)]
        if value is None:
            raise UndimensionedArray(name)
        if not isinstance(value, list):
            raise TypeMismatch(name, "an array")
        return value

    def _check_index(self, name, array, index):
        if index < 0 or index >= len(array):
            raise IndexOutOfBounds(name, index, len(array))

    def get_element(self, name, index):
        array = self._array(name)
        self._check_index(name, array, index)
        return array[index]

    def set_element(self, name, index, value):
        array = self._array(name)
        self._check_index(name, array, index)
        array[index] = value

    def dim(self, name, size):
        if size > MAX_ARRAY_SIZE:
            raise ArrayTooLarge(name, size)
        # overwrites any earlier scalar or array under this letter
        self.slots[_slot(name)] = [0] * size

    # --- inspection ---
    def scalars(self):
        return {name: self.slots[i] for i, name in enumerate(LETTERS)
                if self.slots[i] is not None and not isinstance(self.slots[i], list)}

    def arrays(self):
        return {name: list(self.slots[i]) for i, name in enumerate(LETTERS)
                if isinstance(self.slots[i], list)}


def divide(left, right):
    """Integer division truncating toward zero."""
    if right == 0:
        raise DivisionByZero()
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


OPERATIONS = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
    '/': divide,
    '=': lambda a, b: int(a == b),
    '<>': lambda a, b: int(a != b),
    '<': lambda a, b: int(a < b),
    '<=': lambda a, b: int(a <= b),
    '>': lambda a, b: int(a > b),
    '>=': lambda a, b: int(a >= b),
}


def evaluate(expr, state):
    """Evaluate an expression tree to an int, left operand first."""
    if isinstance(expr, Literal):
        return expr.value
    if isinstance(expr, Variable):
        return state.get_scalar(expr.name)
    if isinstance(expr, ArrayAccess):
        index = evaluate(expr.index, state)
        return state.get_element(expr.name, index)
    if isinstance(expr, BinaryOp):
        left = evaluate(expr.left, state)
        right = evaluate(expr.right, state)
        return OPERATIONS[expr.op](left, right)
    raise TypeError(f"Unknown expression node {expr!r}")
