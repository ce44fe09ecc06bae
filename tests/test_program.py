"""
Tiny BASIC test.program
Tests for the program store
"""

import unittest

from basic_ast import End, Print, StringLiteral
from basic_program import Program


def make(*numbers):
    program = Program()
    for n in numbers:
        program.set(n, End(), 'END')
    return program


class ProgramTest(unittest.TestCase):

    def test_ascending_order(self):
        program = make(30, 10, 20)
        assert [n for n, _ in program.list()] == [10, 20, 30]
        assert program.first() == 10

    def test_replace(self):
        program = make(10)
        stmt = Print((StringLiteral('x'),))
        program.set(10, stmt, 'PRINT "x"')
        assert program.get(10) == stmt
        assert list(program.list()) == [(10, 'PRINT "x"')]
        assert len(program) == 1

    def test_remove(self):
        program = make(10, 20, 30)
        program.remove(20)
        assert 20 not in program
        assert [n for n, _ in program.list()] == [10, 30]
        # removing a missing line is a no-op
        program.remove(25)
        assert len(program) == 2

    def test_next_after(self):
        program = make(10, 20, 30)
        assert program.next_after(10) == 20
        assert program.next_after(15) == 20
        assert program.next_after(30) is None
        assert program.next_after(0) == 10

    def test_listing_is_restartable(self):
        listing = make(1, 2).list()
        assert list(listing) == list(listing) == [(1, 'END'), (2, 'END')]
        assert len(listing) == 2

    def test_clear(self):
        program = make(10, 20)
        program.clear()
        assert len(program) == 0
        assert program.first() is None
        assert list(program.list()) == []

    def test_get_missing(self):
        assert make(10).get(20) is None

    def test_serialize(self):
        program = Program()
        program.set(20, End(), 'END')
        program.set(10, Print((StringLiteral('hi'),)), 'PRINT "hi"')
        assert program.serialize() == '10 PRINT "hi"\n20 END\n'


if __name__ == '__main__':
    unittest.main()
