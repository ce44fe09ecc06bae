import bisect
import logging

logger = logging.getLogger(__name__)


class Listing:
    """Ascending (line_number, source) pairs; iterable any number of times."""

    def __init__(self, program):
        self._program = program

    def __iter__(self):
        for number in list(self._program.line_numbers):
            yield number, self._program.source(number)

    def __len__(self):
        return len(self._program)


class Program:
    """Line number -> (statement, source text), kept in ascending order."""

    def __init__(self):
        self._lines = {}
        self.line_numbers = []  # sorted keys of _lines

    def set(self, number, statement, source):
        if number not in self._lines:
            bisect.insort(self.line_numbers, number)
        self._lines[number] = (statement, source)
        logger.debug("stored line %d: %s", number, source)

    def remove(self, number):
        if self._lines.pop(number, None) is not None:
            del self.line_numbers[bisect.bisect_left(self.line_numbers, number)]
            logger.debug("removed line %d", number)

    def clear(self):
        self._lines.clear()
        self.line_numbers = []

    def get(self, number):
        entry = self._lines.get(number)
        return None if entry is None else entry[0]

    def source(self, number):
        return self._lines[number][1]

    def first(self):
        return self.line_numbers[0] if self.line_numbers else None

    def next_after(self, number):
        """Smallest stored line number strictly greater than number."""
        i = bisect.bisect_right(self.line_numbers, number)
        return self.line_numbers[i] if i < len(self.line_numbers) else None

    def list(self):
        return Listing(self)

    def serialize(self):
        return "".join(f"{number} {source}\n" for number, source in self.list())

    def __contains__(self, number):
        return number in self._lines

    def __len__(self):
        return len(self._lines)
