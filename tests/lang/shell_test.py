import io
import unittest
from contextlib import redirect_stdout

from dashlang.lang.error import ErrorHandler
from dashlang.lang.output import BufferSink
from dashlang.lang.session import Session
from dashlang.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.sink = BufferSink()
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, sink=self.sink))

    def onecmd(self, line):
        """Returns (stop flag, captured stdout) of running line through the shell."""
        output = io.StringIO()
        with redirect_stdout(output):
            stop = self.shell.onecmd(line)
        return stop, output.getvalue()

    def test_results(self):
        self.assertEqual((None, ""), self.onecmd("let x = 41"))
        self.assertEqual((None, "42\n"), self.onecmd("x + 1"))

        self.onecmd("print(x)")
        self.assertEqual(["41"], self.sink.lines)

    def test_continuation(self):
        self.onecmd("if false {")
        self.assertEqual(". ", self.shell.prompt)
        stop, __ = self.onecmd("exit")  # Dash source while continuing, not a command
        self.assertIsNone(stop)
        self.onecmd("}")
        self.assertEqual("> ", self.shell.prompt)

        self.onecmd("fn add(a, b) {")
        self.assertEqual(". ", self.shell.prompt)

        self.onecmd("return a + b")
        self.onecmd("}")
        self.assertEqual("> ", self.shell.prompt)

        __, output = self.onecmd("add(1, 2)")
        self.assertEqual("3\n", output)

    def test_errors_not_fatal(self):
        __, output = self.onecmd("print(nope)")
        self.assertIn("is not defined", output)

        __, output = self.onecmd("let = 1")
        self.assertIn("error: ", output)

        __, output = self.onecmd("1 + 1")
        self.assertEqual("2\n", output)

    def test_commands(self):
        __, output = self.onecmd("help")
        self.assertIn("Welcome to the Dash interpreter!", output)

        self.assertFalse(self.onecmd("")[0])
        self.assertTrue(self.onecmd("exit")[0])
        self.assertTrue(self.onecmd("EOF")[0])


if __name__ == '__main__':
    unittest.main()
