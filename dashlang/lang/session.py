"""Session control for Dash. Runs a source file, or keeps a global scope alive across the chunks typed into the
interactive shell.
"""

from dashlang.lang.error import DashException
from dashlang.lang.output import ConsoleSink
from dashlang.pure.builder import parse
from dashlang.pure.environment import Environment
from dashlang.pure.evaluator import Evaluator
from dashlang.pure.values import Unit


class Session:
    """Governs a Dash session, with control over the global scope."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, max_depth=None, sink=None, checkpoint=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment()  # global scope, lives as long as the session
        self.evaluator = Evaluator(sink if sink is not None else ConsoleSink(), checkpoint, max_depth)

        self.pending = []  # parsed Programs waiting to be run
        self.results = []  # non-Unit values of top-level expression statements

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise DashException("{} could not be opened", path)

            self.add(source)
            if not self.pending[-1]:
                self.error_handler.warn("{} contains no statements", path)

        elif not cmd_line:
            raise DashException("{} is a reserved filename", Session.SH_FILE)

    @staticmethod
    def preprocess_line(line, add_to_prev=""):
        """Joins line onto add_to_prev (the unfinished input so far). Returns the joined line and whether it still has
        unclosed braces/parentheses, i.e. whether a line continuation is necessary.
        """
        if add_to_prev:
            line = add_to_prev + "\n" + line

        depth = 0
        in_string = False
        idx = 0
        while idx < len(line):
            char = line[idx]
            if in_string:
                if char == "\\":
                    idx += 1
                elif char == "\"":
                    in_string = False
            elif char == "\"":
                in_string = True
            elif line.startswith("//", idx):
                newline = line.find("\n", idx)
                if newline == -1:
                    break
                idx = newline
            elif char in "({":
                depth += 1
            elif char in ")}":
                depth -= 1
            idx += 1

        return line, depth > 0

    def add(self, source):
        """Parses source and queues it to be run. The whole chunk is parsed before anything runs."""
        self.error_handler.register_file(self.path, source)  # in case error is raised
        self.pending.append(parse(source))

    def run(self):
        """Runs queued programs in order against the session's global scope. Will raise any errors that are
        encountered.
        """
        try:
            while self.pending:
                program = self.pending.pop(0)
                result = self.evaluator.run(program, self.env)
                if result is not Unit:
                    self.results.append(result)
        finally:
            self.pending = []

    def pop(self):
        """Removes latest result and returns it rendered."""
        return self.results.pop().render()
