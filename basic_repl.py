"""Tiny BASIC entry point and command loop."""
import argparse
import logging
import sys

from basic_errors import BasicError
from basic_interpreter import Halt, Interpreter

QUIT_COMMANDS = ('QUIT', 'BYE', 'EXIT')


def _path_argument(rest):
    return rest.strip().strip('"')


class Repl:
    """Dispatches RUN/LIST/NEW/LOAD/SAVE/QUIT and program lines."""

    def __init__(self, interpreter, out=print, err=None):
        self.interpreter = interpreter
        self.out = out
        self.err = err or (lambda text: print(text, file=sys.stderr))

    def execute(self, line):
        """Handle one line of input. Returns False when the loop should end."""
        line = line.strip()
        if not line:
            return True
        upper = line.upper()
        word, _, rest = line.partition(' ')
        word = word.upper()
        try:
            if upper in QUIT_COMMANDS:
                return False
            if line[0].isdigit():
                self.interpreter.load_line(line)
            elif upper == 'RUN':
                self.run()
            elif upper == 'LIST':
                self.list()
            elif upper == 'NEW':
                self.interpreter.clear()
                self.out("Program cleared.")
            elif word == 'LOAD' and rest.strip():
                self.load(_path_argument(rest))
            elif word == 'SAVE' and rest.strip():
                self.save(_path_argument(rest))
            else:
                self.err(f"Error: unknown command {line!r}")
        except BasicError as e:
            self.err(f"Error: {e}")
        except OSError as e:
            self.err(f"Error: {e}")
        return True

    def run(self):
        if not len(self.interpreter.program):
            self.out("(No program to run)")
            return None
        result = self.interpreter.run()
        if result.halt is Halt.ERROR:
            self.err(f"Runtime error: {result.error}")
        elif result.halt is Halt.STEP_LIMIT:
            self.err(f"Stopped after {result.steps} steps in line {result.line_number}")
        return result

    def list(self):
        listing = self.interpreter.list()
        if not len(listing):
            self.out("(No program)")
        for number, source in listing:
            self.out(f"{number} {source}")

    def load(self, path):
        with open(path, 'r', encoding='utf-8') as f:
            count = self.interpreter.load_program(f.read())
        self.out(f"Loaded {count} lines from {path}")

    def save(self, path):
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.interpreter.serialize())
        self.out(f"Saved {len(self.interpreter.program)} lines to {path}")

    def loop(self, prompt="> "):
        self.out("Tiny BASIC Interpreter")
        self.out("Commands: LOAD, SAVE, RUN, LIST, NEW, QUIT")
        while True:
            try:
                line = input(prompt)
            except EOFError:
                self.out("")
                break
            if not self.execute(line):
                break
        self.out("Goodbye!")


def run_file(interpreter, path):
    """Load and run a program file. Returns a process exit status."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            interpreter.load_program(f.read())
    except (BasicError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    result = interpreter.run()
    if result.halt is Halt.ERROR:
        print(f"Runtime error: {result.error}", file=sys.stderr)
        return 1
    if result.halt is Halt.STEP_LIMIT:
        print(f"Stopped after {result.steps} steps in line {result.line_number}", file=sys.stderr)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Tiny BASIC interpreter")
    parser.add_argument("program", nargs="?", help="program file to load and run")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="stop a run after this many statements")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(name)s: %(message)s")

    interpreter = Interpreter(max_steps=args.max_steps)
    if args.program is not None:
        return run_file(interpreter, args.program)
    Repl(interpreter).loop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
