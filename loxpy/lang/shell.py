"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd

from loxpy.lang.error import ErrorHandler
from loxpy.lang.session import Session
from loxpy.syntax.token import TokenKind


class Shell(cmd.Cmd):
    """Lox interpreter shell. Bindings persist from one line to the next."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, or a blank line to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    COMMANDS = ("help", "exit", "EOF")

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.error_handler = ErrorHandler(fatal=False)  # lox errors don't end the session

        self._tmp_line = ""

    def onecmd(self, line):
        """Only COMMANDS are dispatched to do_* methods: anything else is lox code."""
        command = line.strip()
        if command in Shell.COMMANDS and not self._tmp_line:
            return super().onecmd(command)
        if not command:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Executes arbitrary lox code. Lines are joined while there are more '{' than '}' tokens (braces in strings and
        comments don't count).
        """
        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line = self._tmp_line + line

            if Shell.open_braces(line) > 0:
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            result = self.sess.run(line)  # output is echoed while running

            self.error_handler.register_source(self.sess.path, line)
            self.error_handler.throw(*result.diagnostics)
            self.error_handler.remove_source()

    @staticmethod
    def open_braces(line):
        """Number of '{' tokens in line not closed by a '}' token."""
        tokens, __ = Session.tokens(line)
        kinds = [token.kind for token in tokens]
        return kinds.count(TokenKind.LEFT_BRACE) - kinds.count(TokenKind.RIGHT_BRACE)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with numbers, strings, \n"
              "booleans, nil, first-class functions and closures.\n\n"
              "Try it out by typing 'var greeting = \"hello\";'. This will bind the string \n"
              "to a name that the rest of the session can use. Next, try typing \n"
              "'print greeting + \" world\";'. A blank line quits.")

    def emptyline(self):
        """A blank line quits, unless it is part of a line continuation."""
        if self._tmp_line:
            self._tmp_line += "\n"
            return False

        print("Received blank line, quitting")
        return True

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
