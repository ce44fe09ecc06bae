"""Interpreter session: program store, parser and the execution engine.

The engine is a program-counter state machine. `start` resets the
variables and points the counter at the lowest line; each `step` runs one
statement and either jumps, advances to the next higher line or halts.
"""
import enum
import logging
import re
from dataclasses import dataclass
from typing import Optional

from basic_ast import Dim, End, Goto, If, Let, LetArray, Print, StringLiteral
from basic_errors import BasicError, BasicRuntimeError, ParseError, UndefinedLine
from basic_parser import Parser
from basic_program import Program
from basic_runtime import RuntimeState, evaluate

logger = logging.getLogger(__name__)

LINE_RE = re.compile(r"\s*(\d+)\s*(.*)$", re.DOTALL)


class Halt(enum.Enum):
    END = 'end'                    # explicit END
    FELL_OFF_END = 'fell off end'  # no further line to run
    ERROR = 'error'                # runtime error at `line_number`
    STEP_LIMIT = 'step limit'      # max_steps statements executed


@dataclass
class RunResult:
    halt: Halt
    steps: int
    line_number: Optional[int] = None
    error: Optional[BasicRuntimeError] = None

    @property
    def ok(self):
        return self.halt in (Halt.END, Halt.FELL_OFF_END)


def split_line(text):
    """Split '<number> <body>' into (number, body). Raises ParseError."""
    m = LINE_RE.match(text.rstrip("\r\n"))
    if not m:
        raise ParseError("Line must start with a line number", 0)
    number = int(m.group(1))
    if number <= 0:
        raise ParseError("Line number must be positive", 0, number)
    return number, m.group(2).strip()


class Interpreter:
    def __init__(self, emit=print, max_steps=None):
        self.emit = emit
        self.max_steps = max_steps
        self.program = Program()
        self.state = RuntimeState()
        self.pc = None
        self.steps = 0
        self.last_line = None
        self._parser = Parser()

    # ----- program editing -----
    def _parse(self, text):
        number, body = split_line(text)
        if not body:
            return number, None, body
        try:
            statement = self._parser.parse_line(body, number)
        except BasicError as e:
            e.line_number = number
            raise
        return number, statement, body

    def load_line(self, text):
        """Store, replace or (with an empty body) delete one program line."""
        number, statement, body = self._parse(text)
        if statement is None:
            self.program.remove(number)
        else:
            self.program.set(number, statement, body)
        return number

    def load_program(self, text):
        """Replace the program with the lines of text; all or nothing."""
        parsed = [self._parse(line) for line in text.splitlines() if line.strip()]
        self.program.clear()
        for number, statement, body in parsed:
            if statement is None:
                self.program.remove(number)
            else:
                self.program.set(number, statement, body)
        logger.info("loaded %d lines", len(self.program))
        return len(self.program)

    def list(self):
        return self.program.list()

    def clear(self):
        self.program.clear()

    def serialize(self):
        return self.program.serialize()

    # ----- execution -----
    def start(self):
        self.state.reset()
        self.steps = 0
        self.last_line = None
        self.pc = self.program.first()

    def step(self):
        """Execute the statement at the program counter.

        Returns a Halt when the program stops, None otherwise. Runtime
        errors propagate with the offending line number attached.
        """
        number = self.pc
        statement = None if number is None else self.program.get(number)
        if statement is None:
            self.pc = None
            return Halt.FELL_OFF_END
        logger.debug("%d %s", number, statement)
        self.steps += 1
        self.last_line = number
        try:
            target = self._execute(statement)
        except BasicRuntimeError as e:
            e.line_number = number
            raise
        if target is Halt.END:
            return Halt.END
        self.pc = self.program.next_after(number) if target is None else target
        return None

    def _jump(self, target):
        if target not in self.program:
            raise UndefinedLine(target)
        return target

    def _execute(self, statement):
        state = self.state
        if isinstance(statement, Print):
            parts = []
            for item in statement.items:
                if isinstance(item, StringLiteral):
                    parts.append(item.text)
                else:
                    parts.append(str(evaluate(item, state)))
            self.emit(", ".join(parts))
        elif isinstance(statement, Let):
            state.set_scalar(statement.name, evaluate(statement.value, state))
        elif isinstance(statement, LetArray):
            index = evaluate(statement.index, state)
            value = evaluate(statement.value, state)
            state.set_element(statement.name, index, value)
        elif isinstance(statement, Goto):
            return self._jump(evaluate(statement.target, state))
        elif isinstance(statement, If):
            if evaluate(statement.condition, state):
                return self._jump(statement.target)
        elif isinstance(statement, End):
            return Halt.END
        elif isinstance(statement, Dim):
            state.dim(statement.name, evaluate(statement.size, state))
        else:
            raise TypeError(f"Unknown statement {statement!r}")
        return None

    def run(self):
        """Run from the lowest line until a terminal state is reached."""
        self.start()
        logger.info("RUN (%d lines)", len(self.program))
        while True:
            if self.pc is not None and self.max_steps is not None and self.steps >= self.max_steps:
                logger.warning("stopped after %d steps at line %d", self.steps, self.pc)
                return RunResult(Halt.STEP_LIMIT, self.steps, self.pc)
            try:
                halt = self.step()
            except BasicRuntimeError as e:
                logger.warning("runtime error: %s", e)
                return RunResult(Halt.ERROR, self.steps, e.line_number, e)
            if halt is not None:
                logger.info("halted (%s) after %d steps", halt.value, self.steps)
                return RunResult(halt, self.steps, self.last_line)
