"""Statement and expression nodes.

Every node renders back to canonical BASIC source with str(); parsing that
text again gives an equal node.
"""
from dataclasses import dataclass
from typing import Tuple, Union


# ----- expressions -----

class Expression:
    pass


@dataclass(frozen=True)
class Literal(Expression):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class ArrayAccess(Expression):
    name: str
    index: Expression

    def __str__(self):
        return f"{self.name}({self.index})"


@dataclass(frozen=True)
class BinaryOp(Expression):
    op: str
    left: Expression
    right: Expression

    def __str__(self):
        return f"({self.left} {self.op} {self.right})"


# ----- statements -----

@dataclass(frozen=True)
class StringLiteral:
    text: str

    def __str__(self):
        return f'"{self.text}"'


PrintItem = Union[Expression, StringLiteral]


class Statement:
    pass


@dataclass(frozen=True)
class Print(Statement):
    items: Tuple[PrintItem, ...] = ()

    def __str__(self):
        if not self.items:
            return "PRINT"
        return "PRINT " + ", ".join(str(item) for item in self.items)


@dataclass(frozen=True)
class Let(Statement):
    name: str
    value: Expression

    def __str__(self):
        return f"LET {self.name} = {self.value}"


@dataclass(frozen=True)
class LetArray(Statement):
    name: str
    index: Expression
    value: Expression

    def __str__(self):
        return f"LET {self.name}({self.index}) = {self.value}"


@dataclass(frozen=True)
class Goto(Statement):
    target: Expression

    def __str__(self):
        return f"GOTO {self.target}"


@dataclass(frozen=True)
class If(Statement):
    condition: BinaryOp
    target: int

    def __str__(self):
        # the condition is a bare comparison, not a parenthesized primary
        cond = self.condition
        return f"IF {cond.left} {cond.op} {cond.right} THEN {self.target}"


@dataclass(frozen=True)
class End(Statement):
    def __str__(self):
        return "END"


@dataclass(frozen=True)
class Dim(Statement):
    name: str
    size: Expression

    def __str__(self):
        return f"DIM {self.name}({self.size})"
