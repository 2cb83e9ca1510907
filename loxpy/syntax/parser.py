"""Recursive-descent parser for the lox language. Builds a list of statement trees from the Scanner's tokens.

Grammar, from lowest to highest precedence:

```
<program>     ::= <declaration>* EOF
<declaration> ::= <var_decl> | <statement>
<var_decl>    ::= "var" IDENTIFIER ( "=" <expression> )? ";"
<statement>   ::= <expr_stmt> | <print_stmt> | <block> | <if_stmt> | <while_stmt> | <for_stmt>
                | <fun_decl> | <return_stmt>
<fun_decl>    ::= "fun" IDENTIFIER "(" ( IDENTIFIER ( "," IDENTIFIER )* )? ")" <block>
<return_stmt> ::= "return" <expression>? ";"                  ; only inside a function body
<for_stmt>    ::= "for" "(" ( <var_decl> | <expr_stmt> | ";" ) <expression>? ";" <expression>? ")" <statement>
                                                              ; desugared into a while loop

<expression>  ::= <assignment>
<assignment>  ::= IDENTIFIER "=" <assignment> | <logic_or>    ; right-associative
<logic_or>    ::= <logic_and> ( "or" <logic_and> )*
<logic_and>   ::= <equality> ( "and" <equality> )*
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <call>
<call>        ::= <primary> ( "(" ( <expression> ( "," <expression> )* )? ")" )*
<primary>     ::= NUMBER | STRING | "true" | "false" | "nil" | IDENTIFIER | "(" <expression> ")"
```

There is no error recovery: the first structural error raises a ParseError and nothing of the program is returned.
"""

from loxpy.lang.error import ParseError
from loxpy.syntax import tree
from loxpy.syntax.token import TokenKind


class Parser:
    """Single-use parser over one token list, which must end with an EOF token."""
    EQUALITY = (TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)
    COMPARISON = (TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL)
    TERM = (TokenKind.MINUS, TokenKind.PLUS)
    FACTOR = (TokenKind.SLASH, TokenKind.STAR)
    UNARY = (TokenKind.BANG, TokenKind.MINUS)

    def __init__(self, tokens):
        self.tokens = tokens
        self.current = 0
        self.function_depth = 0  # > 0 while parsing a function body

    def parse(self):
        """Returns the list of top-level statements. Raises ParseError on the first error."""
        statements = []
        try:
            while not self.is_at_end():
                statements.append(self.declaration())
        except RecursionError:
            raise ParseError(self.peek(), "Too deeply nested.")
        return statements

    # --- statements ---

    def declaration(self):
        if self.match(TokenKind.VAR):
            return self.var_declaration()
        return self.statement()

    def var_declaration(self):
        name = self.consume(TokenKind.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenKind.EQUAL):
            initializer = self.expression()

        self.consume(TokenKind.SEMICOLON, "Expect ';' after variable declaration.")
        return tree.Var(name, initializer)

    def statement(self):
        if self.match(TokenKind.PRINT):
            return self.print_statement()
        if self.match(TokenKind.LEFT_BRACE):
            return tree.Block(self.block())
        if self.match(TokenKind.IF):
            return self.if_statement()
        if self.match(TokenKind.WHILE):
            return self.while_statement()
        if self.match(TokenKind.FOR):
            return self.for_statement()
        if self.match(TokenKind.FUN):
            return self.function()
        if self.match(TokenKind.RETURN):
            return self.return_statement()
        return self.expression_statement()

    def print_statement(self):
        value = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after value.")
        return tree.Print(value)

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after expression.")
        return tree.Expression(expr)

    def block(self):
        """Parses the rest of a block whose "{" has been consumed. Returns its statements."""
        statements = []
        while not self.check(TokenKind.RIGHT_BRACE) and not self.is_at_end():
            statements.append(self.declaration())

        self.consume(TokenKind.RIGHT_BRACE, "Expect {} after block.", "'}'")
        return tuple(statements)

    def if_statement(self):
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenKind.ELSE):
            else_branch = self.statement()

        return tree.If(condition, then_branch, else_branch)

    def while_statement(self):
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after condition.")

        return tree.While(condition, self.statement())

    def for_statement(self):
        """for loops are desugared into while loops:

        for (<init>; <cond>; <incr>) <body>   ==>   { <init> while (<cond>) { <body> <incr>; } }
        """
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenKind.SEMICOLON):
            initializer = None
        elif self.match(TokenKind.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenKind.SEMICOLON):
            condition = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenKind.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = tree.Block((body, tree.Expression(increment)))
        if condition is None:
            condition = tree.Literal(True)
        body = tree.While(condition, body)
        if initializer is not None:
            body = tree.Block((initializer, body))

        return body

    def function(self):
        name = self.consume(TokenKind.IDENTIFIER, "Expect function name.")
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after function name.")

        params = []
        if not self.check(TokenKind.RIGHT_PAREN):
            params.append(self.consume(TokenKind.IDENTIFIER, "Expect parameter name."))
            while self.match(TokenKind.COMMA):
                params.append(self.consume(TokenKind.IDENTIFIER, "Expect parameter name."))
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenKind.LEFT_BRACE, "Expect {} before function body.", "'{'")
        self.function_depth += 1
        try:
            body = self.block()
        finally:
            self.function_depth -= 1

        return tree.Function(name, tuple(params), body)

    def return_statement(self):
        keyword = self.previous()
        if not self.function_depth:
            raise ParseError(keyword, "Can't return from top-level code.")

        value = None
        if not self.check(TokenKind.SEMICOLON):
            value = self.expression()

        self.consume(TokenKind.SEMICOLON, "Expect ';' after return value.")
        return tree.Return(keyword, value)

    # --- expressions ---

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenKind.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, tree.Variable):
                return tree.Assign(expr.name, value)
            raise ParseError(equals, "Invalid assignment target.")

        return expr

    def logic_or(self):
        expr = self.logic_and()
        while self.match(TokenKind.OR):
            operator = self.previous()
            expr = tree.Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self):
        expr = self.equality()
        while self.match(TokenKind.AND):
            operator = self.previous()
            expr = tree.Logical(expr, operator, self.equality())
        return expr

    def binary(self, kinds, operand):
        """Left-associative fold of operand ( <kinds> operand )*."""
        expr = operand()
        while self.match(*kinds):
            operator = self.previous()
            expr = tree.Binary(expr, operator, operand())
        return expr

    def equality(self):
        return self.binary(Parser.EQUALITY, self.comparison)

    def comparison(self):
        return self.binary(Parser.COMPARISON, self.term)

    def term(self):
        return self.binary(Parser.TERM, self.factor)

    def factor(self):
        return self.binary(Parser.FACTOR, self.unary)

    def unary(self):
        if self.match(*Parser.UNARY):
            operator = self.previous()
            return tree.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()

        while self.match(TokenKind.LEFT_PAREN):
            expr = self.finish_call(expr)

        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenKind.RIGHT_PAREN):
            arguments.append(self.expression())
            while self.match(TokenKind.COMMA):
                arguments.append(self.expression())

        paren = self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after arguments.")
        return tree.Call(callee, paren, tuple(arguments))

    def primary(self):
        if self.match(TokenKind.FALSE):
            return tree.Literal(False)
        if self.match(TokenKind.TRUE):
            return tree.Literal(True)
        if self.match(TokenKind.NIL):
            return tree.Literal(None)

        if self.match(TokenKind.NUMBER):
            return tree.Literal(float(self.previous().literal))
        if self.match(TokenKind.STRING):
            return tree.Literal(self.previous().literal)

        if self.match(TokenKind.IDENTIFIER):
            return tree.Variable(self.previous())

        if self.match(TokenKind.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return tree.Grouping(expr)

        raise ParseError(self.peek(), "Expect expression.")

    # --- token helpers ---

    def match(self, *kinds):
        """Consumes the current token if it is one of kinds."""
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind, msg, exprs=None):
        """Consumes and returns the current token, which must be of kind."""
        if self.check(kind):
            return self.advance()
        raise ParseError(self.peek(), msg, exprs)

    def check(self, kind):
        if self.is_at_end():
            return False
        return self.peek().kind is kind

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().kind is TokenKind.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]


def parse(tokens):
    """Returns the statements parsed from tokens. Raises ParseError."""
    return Parser(tokens).parse()
