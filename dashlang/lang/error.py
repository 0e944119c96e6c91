"""Error handling for the Dash language. Only DashExceptions should be encountered while parsing or running a program:
if another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Faults are split in two families. ParseErrors are raised before anything runs; RuntimeFaults abort an evaluation that
is already in progress. Control-flow signals (break/continue/return) are not exceptions at all, see pure/evaluator.py.
"""

import sys

from termcolor import colored


class DashException(Exception):
    """Templates an error message so that it can be rendered by ErrorHandler. msg is a format string whose '{}' fields
    are filled with names (identifiers, operators, kinds); names are highlighted when displayed.
    """

    def __init__(self, msg, names=None, line=None, column=None, internal=False):
        if names is None:
            names = []
        if isinstance(names, str):
            names = [names]

        self.template = msg
        self.names = [str(name) for name in names]
        self.msg = msg.format(*(f"'{name}'" for name in self.names))

        self.line = line
        self.column = column
        self.internal = internal

        super().__init__(self.msg)

    def locate(self, line, column):
        """Sets position of this error if it doesn't have one yet. Returns self so it can be re-raised directly."""
        if self.line is None and line is not None:
            self.line = line
            self.column = column
        return self

    def highlighted(self):
        """Returns self.msg with names bolded."""
        return self.template.format(*(colored(f"'{name}'", attrs=["bold"]) for name in self.names))

    def __str__(self):
        if self.line is None:
            return self.msg
        return f"{self.line}:{self.column}: {self.msg}"


class ParseError(DashException):
    """Source text could not be recognized. Parsing is all-or-nothing, so no part of the program has run."""

    def __init__(self, message, line, column):
        # message is plain text, not a format template
        super().__init__(message.replace("{", "{{").replace("}", "}}"), line=line, column=column)
        self.message = message


class RuntimeFault(DashException):
    """Superclass for every fault raised while a program is being evaluated."""


class DashNameError(RuntimeFault):
    """Undefined variable/function reference, or assignment to an undeclared name."""

    def __init__(self, identifier, assignment=False):
        if assignment:
            super().__init__("cannot assign to {}: name is not defined", identifier)
        else:
            super().__init__("{} is not defined", identifier)
        self.identifier = identifier


class DashTypeError(RuntimeFault):
    """Operand kind mismatch, calling a non-function, or a non-Bool condition."""

    def __init__(self, context, *found_kinds, msg=None):
        if msg is None:
            if len(found_kinds) == 1:
                msg = "{} not supported for " + found_kinds[0]
            else:
                msg = "{} not supported between " + " and ".join(found_kinds)
        super().__init__(msg, context)
        self.context = context
        self.found_kinds = found_kinds


class ArityError(RuntimeFault):
    """Call supplied a different number of arguments than the function declares."""

    def __init__(self, function, expected, got):
        plural = "" if expected == 1 else "s"
        super().__init__(f"{{}} expects {expected} argument{plural}, got {got}", function)
        self.function = function
        self.expected = expected
        self.got = got


class DivideByZero(RuntimeFault):

    def __init__(self):
        super().__init__("division by zero")


class NumericOverflow(RuntimeFault):
    """Number too large to convert, e.g. an integer mixed with a fractional Number."""

    def __init__(self, context):
        super().__init__("result of {} is too large to represent", context)
        self.context = context


class UseError(RuntimeFault):
    """break/continue outside of a loop or return outside of a function."""

    def __init__(self, keyword, where):
        super().__init__("{} outside of " + where, keyword)
        self.keyword = keyword


class StackOverflow(RuntimeFault):
    """Recursion went deeper than the configured ceiling (or deeper than the host allows)."""

    def __init__(self, depth=None):
        if depth is None:
            super().__init__("maximum recursion depth exceeded")
        else:
            super().__init__(f"maximum call depth of {depth} exceeded")
        self.depth = depth


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report Dash errors/warnings instead."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.sources = {}  # dict of path: source text, used to display the offending line
        self.current = None

    def register_file(self, path, source=""):
        """Registers path (and its source text) as the origin of any error raised from now on."""
        self.sources[path] = source
        self.current = path

    def source_line(self, line_num):
        """Returns line line_num (1-based) of the current source, or None if it isn't known."""
        if self.current is None or line_num is None:
            return None

        lines = self.sources.get(self.current, "").splitlines()
        if 0 < line_num <= len(lines):
            return lines[line_num - 1]
        return None

    @staticmethod
    def diagnose(line, column, warning=False):
        """Returns line with a caret under column."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        column = max(column or 1, 1)
        diagnosis = "  " + line + "\n"
        diagnosis += "  " + " " * (column - 1) + colored("^", color, attrs=["bold"])

        return diagnosis

    def _location(self, error):
        location = self.current if self.current is not None else "<unknown>"
        if error.line is not None:
            location += f":{error.line}:{error.column}"
        return colored(location + ": ", attrs=["bold"])

    def warn(self, *args, **kwargs):
        """Generates and prints warning message based on args (same arguments as DashException)."""
        warning = DashException(*args, **kwargs)

        print(self._location(warning) + colored("warning: ", ErrorHandler.WARNING, attrs=["bold"])
              + warning.highlighted())

        line = self.source_line(warning.line)
        if line is not None:
            print(ErrorHandler.diagnose(line, warning.column, warning=True))

    def throw(self, error):
        """Reports error, which must be a DashException. Exits the process if self.fatal."""
        error_msg = self._location(error)
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.highlighted()
        print(error_msg)

        line = self.source_line(error.line)
        if not error.internal and line is not None:
            print(ErrorHandler.diagnose(line, error.column))

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(DashException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(StackOverflow())
        elif exc_type is not None and issubclass(exc_type, DashException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(DashException("unknown error: {}", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
