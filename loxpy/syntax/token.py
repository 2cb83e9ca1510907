"""Tokens: the lexical units passed from the Scanner to the Parser."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TokenKind(Enum):
    # single-character tokens
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    COMMA = ","
    DOT = "."
    MINUS = "-"
    PLUS = "+"
    SEMICOLON = ";"
    SLASH = "/"
    STAR = "*"

    # one or two character tokens
    BANG = "!"
    BANG_EQUAL = "!="
    EQUAL = "="
    EQUAL_EQUAL = "=="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="

    # literals
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"

    # keywords
    AND = "and"
    CLASS = "class"
    ELSE = "else"
    FALSE = "false"
    FOR = "for"
    FUN = "fun"
    IF = "if"
    NIL = "nil"
    OR = "or"
    PRINT = "print"
    RETURN = "return"
    SUPER = "super"
    THIS = "this"
    TRUE = "true"
    VAR = "var"
    WHILE = "while"

    EOF = "eof"


KEYWORDS = {kind.value: kind for kind in (
    TokenKind.AND, TokenKind.CLASS, TokenKind.ELSE, TokenKind.FALSE, TokenKind.FOR, TokenKind.FUN, TokenKind.IF,
    TokenKind.NIL, TokenKind.OR, TokenKind.PRINT, TokenKind.RETURN, TokenKind.SUPER, TokenKind.THIS, TokenKind.TRUE,
    TokenKind.VAR, TokenKind.WHILE,
)}


@dataclass(frozen=True)
class Token:
    """A single lexeme. literal is the decoded text of a string or number, None otherwise. column is only used for
    error display.
    """
    kind: TokenKind
    lexeme: str
    literal: Optional[str]
    line: int
    column: int = 0

    def __str__(self):
        literal = "" if self.literal is None else self.literal
        return f"{self.kind.name} {self.line} {self.lexeme} {literal}".rstrip()
