import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from dashlang.main import main


PROGRAM = """
fn fact(n) {
    if n <= 1 { return 1 }
    return n * fact(n - 1)
}
let i = 1
while i <= 5 {
    print(fact(i))
    i = i + 1
}
"""


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp_dir.name, "program.dash")
        with open(self.path, "w", encoding="utf-8") as file:
            file.write(PROGRAM)

    def tearDown(self):
        self.tmp_dir.cleanup()

    def test_run_file(self):
        output = io.StringIO()
        with redirect_stdout(output):
            main([self.path])
        self.assertEqual("1\n2\n6\n24\n120\n", output.getvalue())

    def test_max_depth(self):
        output = io.StringIO()
        with redirect_stdout(output):
            with self.assertRaises(SystemExit) as context:
                main([self.path, "--max-depth", "3"])
        self.assertEqual(1, context.exception.code)
        self.assertTrue(output.getvalue().startswith("1\n2\n6\n"))
        self.assertIn("maximum call depth of 3 exceeded", output.getvalue())

    def test_bad_file(self):
        output = io.StringIO()
        with redirect_stdout(output):
            with self.assertRaises(SystemExit) as context:
                main([os.path.join(self.tmp_dir.name, "missing.dash")])
        self.assertEqual(1, context.exception.code)
        self.assertIn("could not be opened", output.getvalue())


if __name__ == '__main__':
    unittest.main()
