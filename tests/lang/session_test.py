import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from dashlang.lang.error import DashException, DashNameError, ErrorHandler, ParseError, StackOverflow
from dashlang.lang.output import BufferSink
from dashlang.lang.session import Session
from dashlang.pure.values import Number


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.sink = BufferSink()

    def tearDown(self):
        self.tmp_dir.cleanup()

    def write(self, source, name="test.dash"):
        path = os.path.join(self.tmp_dir.name, name)
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)
        return path

    def test_file_mode(self):
        path = self.write("let x = 2\nprint(x * 21)\nx\n")
        sess = Session(ErrorHandler(), path, cmd_line=False, sink=self.sink)

        self.assertEqual([], self.sink.lines)  # nothing runs before run()
        sess.run()

        self.assertEqual(["42"], self.sink.lines)
        self.assertEqual([Number(2)], sess.results)
        self.assertEqual("2", sess.pop())
        self.assertEqual([], sess.pending)

    def test_file_errors(self):
        missing = os.path.join(self.tmp_dir.name, "missing.dash")
        self.assertRaises(DashException, Session, ErrorHandler(), missing, False)
        self.assertRaises(DashException, Session, ErrorHandler(), Session.SH_FILE, False)

        path = self.write("print(1)\nprint(")
        self.assertRaises(ParseError, Session, ErrorHandler(), path, False, sink=self.sink)
        self.assertEqual([], self.sink.lines)

    def test_runtime_fault(self):
        path = self.write("print(1)\nprint(nope)\nprint(2)")
        sess = Session(ErrorHandler(), path, cmd_line=False, sink=self.sink)

        with self.assertRaises(DashNameError) as context:
            sess.run()
        self.assertEqual(2, context.exception.line)
        self.assertEqual(["1"], self.sink.lines)
        self.assertEqual("print(nope)", sess.error_handler.source_line(2))

    def test_max_depth(self):
        path = self.write("fn down(n) { return down(n + 1) }\ndown(0)")
        sess = Session(ErrorHandler(), path, cmd_line=False, max_depth=20, sink=self.sink)

        with self.assertRaises(StackOverflow) as context:
            sess.run()
        self.assertEqual(20, context.exception.depth)

    def test_empty_file(self):
        path = self.write("// only a comment\n")
        output = io.StringIO()
        with redirect_stdout(output):
            sess = Session(ErrorHandler(), path, cmd_line=False, sink=self.sink)
            sess.run()

        self.assertIn("contains no statements", output.getvalue())
        self.assertEqual([], sess.results)

    def test_cmd_line(self):
        error_handler = ErrorHandler()
        sess = Session(error_handler, Session.SH_FILE, cmd_line=True, sink=self.sink)
        self.assertFalse(error_handler.fatal)

        sess.add("let total = 1")
        sess.run()
        sess.add("fn bump(n) { total = total + n }")
        sess.add("bump(4)")
        sess.run()
        sess.add("total")
        sess.run()

        self.assertEqual("5", sess.pop())
        self.assertEqual([], sess.results)

    def test_cmd_line_recovers(self):
        sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, sink=self.sink)

        sess.add("let a = 1; print(a); a = a + undefined")
        self.assertRaises(DashNameError, sess.run)
        self.assertEqual([], sess.pending)

        sess.add("print(a)")  # bindings made before the fault are kept
        sess.run()
        self.assertEqual(["1", "1"], self.sink.lines)

    def test_checkpoint(self):
        calls = []
        sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, sink=self.sink,
                       checkpoint=lambda: calls.append(1))
        sess.add("let a = 1; let b = 2")
        sess.run()
        self.assertEqual(2, len(calls))

    def test_preprocess_line(self):
        cases = [
            (("print(1)", ""), ("print(1)", False)),
            (("fn f() {", ""), ("fn f() {", True)),
            (("}", "fn f() {"), ("fn f() {\n}", False)),
            (("print(1", "if true {"), ("if true {\nprint(1", True)),
            (("f(", ""), ("f(", True)),
            (("print(\"{\")", ""), ("print(\"{\")", False)),
            (("print(\"\\\"(\")", ""), ("print(\"\\\"(\")", False)),
            (("let x = 1 // {", ""), ("let x = 1 // {", False)),
            (("x)", ""), ("x)", False)),
        ]
        for args, expected in cases:
            self.assertEqual(expected, Session.preprocess_line(*args), args)


if __name__ == '__main__':
    unittest.main()
