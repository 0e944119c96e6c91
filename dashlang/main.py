"""Runs .dash files or starts the interactive shell. Called from the dash executable script (see pyproject.toml).
All errors are reported through the ErrorHandler context manager.
"""

import argparse

from dashlang.lang.error import ErrorHandler
from dashlang.lang.session import Session
from dashlang.lang.shell import Shell
from dashlang.pure.evaluator import Evaluator


def main(argv=None):
    """Runs Dash interpreter. Called from dash executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="dash")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--max-depth", type=int, default=Evaluator.MAX_DEPTH,
                            help=f"maximum function call depth (default: {Evaluator.MAX_DEPTH})")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, max_depth=args.max_depth)
            sess.run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, max_depth=args.max_depth)).cmdloop()


if __name__ == "__main__":
    main()
