"""Session control for the lox language: runs whole source strings through the scanner, parser and interpreter, either
in command-line mode (one line at a time) or file interpretation mode (the whole file at once).
"""

import io
import sys
from typing import List, NamedTuple

from loxpy.lang.error import GenericException, LoxRuntimeError, ParseError
from loxpy.runtime.interpreter import Interpreter
from loxpy.syntax.parser import Parser
from loxpy.syntax.scanner import scan


class Transcript(io.StringIO):
    """Records everything a run prints. If echo, each write also goes straight to the current stdout, so output
    already printed survives an interrupted run.
    """

    def __init__(self, echo=True):
        super().__init__()
        self.echo = echo

    def write(self, text):
        if self.echo:
            sys.stdout.write(text)
        return super().write(text)


class RunResult(NamedTuple):
    """Result of one Session run: the errors found (in order) and what the program printed."""
    diagnostics: List[GenericException]
    output: str

    @property
    def ok(self):
        return not self.diagnostics


class Session:
    """Governs a lox session. If persist, all runs share one Interpreter, and so one global scope. If echo, programs
    print to stdout while they run; either way, RunResult.output holds what was printed.
    """
    SH_FILE = "<stdin>"  # command-line interpreter filename

    def __init__(self, path=SH_FILE, persist=True, echo=True):
        self.path = path        # used for error messages
        self.persist = persist
        self.echo = echo
        self.interpreter = Interpreter()

    @classmethod
    def load(cls, path, persist=True):
        """Returns (session, source) for the file at path."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                source = file.read()
        except OSError:
            raise GenericException("'{}' could not be opened", path)

        return cls(path, persist), source

    @staticmethod
    def tokens(source):
        """Returns (tokens, scan errors) for source."""
        return scan(source)

    def run(self, source):
        """Runs source. Lexical errors are all collected but skip parsing; a parse error skips running; a runtime error
        stops the run but keeps the output printed before it.
        """
        tokens, errors = Session.tokens(source)
        if errors:
            return RunResult(list(errors), "")

        try:
            statements = Parser(tokens).parse()
        except ParseError as error:
            return RunResult([error], "")

        if not self.persist:
            self.interpreter = Interpreter()

        out = Transcript(self.echo)
        self.interpreter.out = out
        try:
            self.interpreter.interpret(statements)
        except LoxRuntimeError as error:
            return RunResult([error], out.getvalue())

        return RunResult([], out.getvalue())
