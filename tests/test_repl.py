"""
Tiny BASIC test.repl
Tests for the command loop and command line
"""

import contextlib
import io
import os
import shutil
import tempfile
import unittest

from basic_interpreter import Interpreter
from basic_repl import Repl, main


class ReplTest(unittest.TestCase):
    """Commands dispatched by the REPL."""

    def setUp(self):
        self.out = []
        self.err = []
        self.interp = Interpreter(emit=self.out.append)
        self.repl = Repl(self.interp, out=self.out.append, err=self.err.append)
        self._test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self._test_dir)

    def feed(self, *lines):
        for line in lines:
            assert self.repl.execute(line)

    def test_enter_and_run(self):
        self.feed('10 PRINT "hi"', 'RUN')
        assert self.out == ['hi']
        assert self.err == []

    def test_commands_are_case_insensitive(self):
        self.feed('10 PRINT 1', 'run', 'list')
        assert self.out == ['1', '10 PRINT 1']

    def test_list(self):
        self.feed('20 END', '10 PRINT "a"', 'LIST')
        assert self.out == ['10 PRINT "a"', '20 END']

    def test_list_empty(self):
        self.feed('LIST')
        assert self.out == ['(No program)']

    def test_new(self):
        self.feed('10 END', 'NEW', 'LIST')
        assert self.out == ['Program cleared.', '(No program)']

    def test_run_empty(self):
        self.feed('RUN')
        assert self.out == ['(No program to run)']

    def test_quit(self):
        for word in ('QUIT', 'bye', 'Exit'):
            assert not self.repl.execute(word)

    def test_blank_input(self):
        self.feed('', '   ')
        assert self.out == [] and self.err == []

    def test_bad_line_reported(self):
        self.feed('10 PRINT "oops')
        assert len(self.err) == 1
        assert self.err[0].startswith('Error: Unterminated string literal in line 10')

    def test_oversized_dim_reported(self):
        self.feed('10 DIM A(99999999999999999999)', '20 PRINT "ok"', 'RUN')
        assert len(self.err) == 1
        assert self.err[0].startswith('Error: DIM size must be at most 32767')
        assert self.out == ['ok']

    def test_deep_nesting_reported(self):
        self.feed('10 PRINT ' + '(' * 3000 + '1' + ')' * 3000, 'LIST')
        assert self.err[0].startswith('Error: Expression too deeply nested in line 10')
        assert self.out == ['(No program)']

    def test_runtime_error_reported(self):
        self.feed('10 PRINT 1', '20 PRINT 1 / 0', 'RUN')
        assert self.out == ['1']
        assert self.err == ['Runtime error: Division by zero in line 20']

    def test_step_limit_reported(self):
        self.interp.max_steps = 10
        self.feed('10 GOTO 10', 'RUN')
        assert self.err == ['Stopped after 10 steps in line 10']

    def test_unknown_command(self):
        self.feed('FROB')
        assert self.err[0].startswith('Error: unknown command')

    def test_save_and_load(self):
        path = os.path.join(self._test_dir, 'prog.bas')
        self.feed('20 PRINT "b"', '10 PRINT "a"', f'SAVE "{path}"')
        with open(path) as f:
            assert f.read() == '10 PRINT "a"\n20 PRINT "b"\n'
        self.feed('NEW', f'LOAD "{path}"', 'RUN')
        assert self.out[-3:] == [f'Loaded 2 lines from {path}', 'a', 'b']

    def test_load_missing_file(self):
        self.feed('LOAD "' + os.path.join(self._test_dir, 'nope.bas') + '"')
        assert len(self.err) == 1
        assert self.err[0].startswith('Error:')


class MainTest(unittest.TestCase):
    """Running a program file from the command line."""

    def setUp(self):
        self._test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self._test_dir)

    def _write(self, text):
        path = os.path.join(self._test_dir, 'prog.bas')
        with open(path, 'w') as f:
            f.write(text)
        return path

    def _main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            status = main(list(argv))
        return status, stdout.getvalue(), stderr.getvalue()

    def test_run_file(self):
        path = self._write('10 LET X = 6\n20 PRINT X * 7\n')
        status, out, _ = self._main(path)
        assert status == 0
        assert out == '42\n'

    def test_runtime_error_status(self):
        path = self._write('10 GOTO 50\n')
        status, out, err = self._main(path)
        assert status == 1
        assert 'Undefined line 50 in line 10' in err

    def test_load_error_status(self):
        path = self._write('10 PRINT 1\nPRINT 2\n')
        status, _, err = self._main(path)
        assert status == 2
        assert 'line number' in err

    def test_max_steps(self):
        path = self._write('10 GOTO 10\n')
        status, _, err = self._main('--max-steps', '25', path)
        assert status == 0
        assert 'Stopped after 25 steps' in err


if __name__ == '__main__':
    unittest.main()
