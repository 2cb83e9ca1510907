"""Error handling for the lox language. Only GenericExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Three kinds of lox errors exist, in increasing severity:
    1. ScanError: recorded by the Scanner, which keeps scanning afterwards
    2. ParseError: aborts the parse, so nothing is run
    3. LoxRuntimeError: aborts the run at the offending statement (earlier statements keep their effects)
"""

import sys

from termcolor import colored

from loxpy.syntax.token import TokenKind


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a lox error. exprs are substituted into msg and are
    highlighted when the error is displayed by ErrorHandler.
    """
    KIND = "error"

    def __init__(self, msg, exprs=None, line=None, column=None, length=1, where="", internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = [str(expr) for expr in exprs]
        self.msg = msg.format(*self.exprs)

        self.line = line        # 1-based source line, None if the error isn't tied to source
        self.column = column    # 0-based column of the offending lexeme, needed for error display
        self.length = length
        self.where = where
        self.internal = internal

        super().__init__(self.msg)

    @property
    def location(self):
        """'[line N] ' prefix, or nothing if this error has no line."""
        return f"[line {self.line}] " if self.line is not None else ""

    def __str__(self):
        return f"{self.location}{self.KIND}{self.where}: {self.msg}"


class ScanError(GenericException):
    """Invalid character or unterminated string."""
    KIND = "lexical error"


class TokenError(GenericException):
    """Error located at a token: the token's line, column and lexeme are used for display."""

    def __init__(self, token, msg, exprs=None):
        if token is None:
            super().__init__(msg, exprs)
            self.token = None
            return

        if token.kind is TokenKind.EOF:
            where = " at end"
        else:
            where = f" at '{token.lexeme}'"

        super().__init__(msg, exprs, line=token.line, column=token.column, length=len(token.lexeme), where=where)
        self.token = token


class ParseError(TokenError):
    """Unexpected or missing token, or invalid assignment target."""
    KIND = "syntax error"


class LoxRuntimeError(TokenError):
    """Undefined variable, bad operand types, bad call."""
    KIND = "runtime error"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report custom lox errors instead."""
    ERROR = "red"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.path = None
        self.source = None

    def register_source(self, path, source):
        """Registers the source errors are reported against. Should be called prior to Session run."""
        self.path = path
        self.source = source

    def remove_source(self):
        """Removes registered source. Should be called after a Session run has been reported."""
        self.source = None

    def diagnose(self, error):
        """Returns the offending source line with the offending lexeme highlighted and underlined, or None if the
        source line isn't known.
        """
        if self.source is None or error.line is None or error.column is None:
            return None

        lines = self.source.split("\n")
        if not 0 < error.line <= len(lines):
            return None

        line = lines[error.line - 1]
        start = min(error.column, len(line))
        end = min(start + max(error.length, 1), max(len(line), start + 1))

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def format(self, error):
        """Returns the displayable message for error, with highlighted exprs."""
        msg = error.template.format(*(colored(expr, attrs=["bold"]) for expr in error.exprs))

        error_msg = ""
        if self.path and error.line is not None:
            column = "" if error.column is None else f"{error.column + 1}:"
            error_msg += colored(f"{self.path}:{error.line}:{column} ", attrs=["bold"])
        elif error.location:
            error_msg += colored(error.location, attrs=["bold"])
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored(f"{error.KIND}{error.where}: ", ErrorHandler.ERROR, attrs=["bold"]) + msg
        return error_msg

    def report(self, error):
        """Prints error and its diagnosis (if any), without exiting."""
        print(self.format(error))

        diagnosis = self.diagnose(error)
        if not error.internal and diagnosis:
            print(diagnosis)

    def throw(self, *errors):
        """Reports errors. If this handler is fatal, exits afterwards."""
        for error in errors:
            self.report(error)

        if errors and self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            raise SystemExit(1) from exc_val  # reported once here, so enclosing handlers only see the exit

        return not do_exit
