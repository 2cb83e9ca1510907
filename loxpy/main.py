"""Runs the lox interpreter on a .lox file, or in command-line mode. Also uses error handling context manager. Called
from the loxpy console script.
"""

import argparse
import sys

from loxpy.lang.error import ErrorHandler
from loxpy.lang.session import Session
from loxpy.lang.shell import Shell
from loxpy.syntax.parser import Parser

RECURSION_LIMIT = 10000  # each lox call takes several Python frames


def dump(sess, source, error_handler, ast=False):
    """Prints the tokens (or, if ast, the syntax trees) of source instead of running it."""
    tokens, errors = sess.tokens(source)
    error_handler.register_source(sess.path, source)

    if not ast:
        for token in tokens:
            print(token)
        error_handler.throw(*errors)
        return

    error_handler.throw(*errors)
    for statement in Parser(tokens).parse():
        print(statement.display())


def main(argv=None):
    """Runs lox interpreter. Called from loxpy console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="loxpy", description="Tree-walking interpreter for the lox language.")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--tokens", help="print the tokens of file instead of running it", action="store_true")
        parser.add_argument("--ast", help="print the syntax trees of file instead of running it", action="store_true")
        args = parser.parse_args(argv)

        sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

        if args.file is None:
            if args.tokens or args.ast:
                parser.error("--tokens and --ast require a file")
            Shell(Session()).cmdloop()
            return

        sess, source = Session.load(args.file, persist=False)

        if args.tokens or args.ast:
            dump(sess, source, error_handler, ast=args.ast)
            return

        result = sess.run(source)  # output is echoed while running

        error_handler.register_source(sess.path, source)
        error_handler.throw(*result.diagnostics)


if __name__ == "__main__":
    main()
