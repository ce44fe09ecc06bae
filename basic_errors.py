class BasicError(Exception):
    """Base class for interpreter errors."""

    def __init__(self, reason, line_number=None):
        super().__init__(reason)
        self.reason = reason
        self.line_number = line_number

    def __str__(self):
        if self.line_number is None:
            return self.reason
        return f"{self.reason} in line {self.line_number}"


class LexError(BasicError):
    """Raised when a line cannot be tokenized."""

    def __init__(self, reason, position, line_number=None):
        super().__init__(reason, line_number)
        self.position = position

    def __str__(self):
        return f"{super().__str__()} (column {self.position})"


class ParseError(BasicError):
    """Raised when a token stream is not a valid statement."""

    def __init__(self, reason, position, line_number=None):
        super().__init__(reason, line_number)
        self.position = position

    def __str__(self):
        return f"{super().__str__()} (column {self.position})"


class BasicRuntimeError(BasicError):
    """Raised while a program is running."""


class DivisionByZero(BasicRuntimeError):
    def __init__(self, line_number=None):
        super().__init__("Division by zero", line_number)


class IndexOutOfBounds(BasicRuntimeError):
    def __init__(self, name, index, size, line_number=None):
        super().__init__(
            f"Index {index} out of bounds for array {name} (size {size})", line_number
        )
        self.name = name
        self.index = index
        self.size = size


class TypeMismatch(BasicRuntimeError):
    def __init__(self, name, expected, line_number=None):
        super().__init__(f"Type mismatch: {name} is not {expected}", line_number)
        self.name = name
        self.expected = expected


class UndimensionedArray(BasicRuntimeError):
    def __init__(self, name, line_number=None):
        super().__init__(f"Array {name} not dimensioned", line_number)
        self.name = name


class UndefinedLine(BasicRuntimeError):
    def __init__(self, target, line_number=None):
        super().__init__(f"Undefined line {target}", line_number)
        self.target = target


class ArrayTooLarge(BasicRuntimeError):
    def __init__(self, name, size, line_number=None):
        super().__init__(f"Array {name} too large (size {size})", line_number)
        self.name = name
        self.size = size
