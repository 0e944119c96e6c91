"""Handles interactive/command-line mode for the Dash interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Dash interpreter shell."""
    intro = "Dash interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary Dash source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(line)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop())

    def onecmd(self, line):
        """Inside a continuation every line is Dash source, even 'help' or 'exit'."""
        if self._tmp_line:
            return self.default(line)
        return super().onecmd(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Dash interpreter!\n\n"
              "Dash is a small language with numbers, strings, booleans, lexically scoped \n"
              "functions, if/else and while loops.\n\n"
              "Try it out by typing 'fn add(a, b) { return a + b }'. This will bind a function \n"
              "to the name 'add'. Next, try typing 'add(1, 2)'. This will print 3. Bindings \n"
              "made with 'let' are kept until you exit.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
