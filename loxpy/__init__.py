"""Lox interpreter.

Basic program flow, per run of a source string:
    1. Scanner (loxpy.syntax.scanner): source text -> tokens, always terminated by an EOF token
        - lexical errors are collected, not raised: a run with any of them goes no further
    2. Parser (loxpy.syntax.parser): tokens -> statement trees (loxpy.syntax.tree)
        - `for` loops are desugared into `while` loops here
        - the first syntax error aborts the whole run
    3. Interpreter (loxpy.runtime.interpreter): walks the statement trees against a chain of Environments
        - the first runtime error stops the run; whatever was printed before it stays printed

loxpy.lang.session ties the three together; loxpy.lang.shell and loxpy.main are the interactive and file drivers.
"""

__version__ = "0.1.0"
