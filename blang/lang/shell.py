"""Handles interactive/command-line mode for the blang interpreter. Uses cmd as backend."""

import cmd

from blang.core.objects import NULL
from blang.lang.session import Session


class Shell(cmd.Cmd):
    """blang interpreter shell."""
    intro = "blang interpreter :: Python backend\nType 'help' for more information."
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "       # also used for prompt swapping in line continuations
    COMMANDS = ("help", "env", "exit")

    def __init__(self, sess, *args, show_ast=False, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.show_ast = show_ast  # print parsed trees instead of evaluating

        self._tmp_line = ""
        self._tmp_line_num = 0
        self.line_num = 0

    def onecmd(self, line):
        """A shell command is a bare command word that the session has not bound as a name. Anything else, and every
        continuation line, is blang source: `env + 1` and `let exit = fn(x) { x }; exit(1)` are both valid input.
        """
        if line == "EOF":
            return self.do_EOF(line)
        if self._tmp_line:
            return self.default(line)

        word = line.strip()
        if not word:
            return self.emptyline()
        if word in Shell.COMMANDS and word not in self.sess.env:
            return super().onecmd(word)
        return self.default(line)

    def default(self, line):
        """Executes arbitrary blang source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._tmp_line_num = self.line_num

            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(line, self._tmp_line_num)

            if self.show_ast:
                __, __, program = self.sess.to_exec.pop()
                print(program.display())
                return

            self.sess.run()

            if self.sess.results:
                result = self.sess.pop()
                if result is not NULL:
                    print(result.inspect())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the blang interpreter!\n\n"
              "blang has integers, booleans, strings, if/else and first-class functions with \n"
              "closures. Bindings persist between prompts; a line with unclosed '(' or '{' \n"
              "continues on the next prompt.\n\n"
              "Try it out by typing 'let add = fn(a, b) { a + b };'. Next, try typing \n"
              "'add(1, 2)'. This will print '3'.\n\n"
              "Commands: 'env' lists bindings, 'exit' (or Ctrl-D) leaves.")

    def do_env(self, arg):
        """Lists top-level bindings."""
        for name in self.sess.env.names():
            print(f"{name} = {self.sess.env.resolve(name).inspect()}")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        return True

