"""Lexical analysis for the lox language: converts raw source text into tokens. Scanning never fails as a whole: bad
lexemes are recorded in Scanner.errors and scanning carries on with the next character, so that later errors are still
found.

Lexical grammar, loosely:

```
<token>      ::= <symbol> | <string> | <number> | <identifier>
<symbol>     ::= "(" | ")" | "{" | "}" | "," | "." | "-" | "+" | ";" | "/" | "*"
               | "!" | "!=" | "=" | "==" | ">" | ">=" | "<" | "<="     ; two-character form preferred
<string>     ::= '"' <char>* '"'                                        ; may span lines, no escapes
<number>     ::= <digit>+ ( "." <digit>+ )?                             ; no sign, no exponent
<identifier> ::= ( <alpha> | "_" ) ( <alpha> | <digit> | "_" )*        ; keywords are reserved identifiers

<comment>    ::= "//" <char>* <newline>
```
"""

from loxpy.lang.error import ScanError
from loxpy.syntax.token import KEYWORDS, Token, TokenKind


class Scanner:
    """Single-use scanner over one source string."""
    WHITESPACE = " \r\t"
    SINGLE = {kind.value: kind for kind in (
        TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN, TokenKind.LEFT_BRACE, TokenKind.RIGHT_BRACE, TokenKind.COMMA,
        TokenKind.DOT, TokenKind.MINUS, TokenKind.PLUS, TokenKind.SEMICOLON, TokenKind.STAR,
    )}
    # first char: (kind if followed by "=", kind otherwise)
    DOUBLE = {
        "!": (TokenKind.BANG_EQUAL, TokenKind.BANG),
        "=": (TokenKind.EQUAL_EQUAL, TokenKind.EQUAL),
        "<": (TokenKind.LESS_EQUAL, TokenKind.LESS),
        ">": (TokenKind.GREATER_EQUAL, TokenKind.GREATER),
    }

    def __init__(self, source):
        self.source = source
        self.tokens = []
        self.errors = []

        self.start = 0         # offset of the first char of the current lexeme
        self.current = 0       # offset of the char about to be consumed
        self.line = 1
        self.line_start = 0    # offset of the first char of the current line

        self._start_line = 1
        self._start_column = 0

    def scan_tokens(self):
        """Scans the whole source. Always returns a token list terminated by exactly one EOF token."""
        while not self.is_at_end():
            self.start = self.current
            self._start_line = self.line
            self._start_column = self.current - self.line_start
            self.scan_token()

        self.tokens.append(Token(TokenKind.EOF, "", None, self.line, self.current - self.line_start))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])
        elif char in Scanner.DOUBLE:
            with_equal, without = Scanner.DOUBLE[char]
            self.add_token(with_equal if self.match("=") else without)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenKind.SLASH)
        elif char in Scanner.WHITESPACE:
            pass
        elif char == "\n":
            self.newline()
        elif char == '"':
            self.string()
        elif Scanner.is_digit(char):
            self.number()
        elif Scanner.is_alpha(char):
            self.identifier()
        else:
            self.error("Unexpected character '{}'.", char)

    def is_at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        self.current += 1
        return self.source[self.current - 1]

    def match(self, expected):
        """Consumes the next char only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False

        self.current += 1
        return True

    def peek(self):
        return "\0" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        return "\0" if self.current + 1 >= len(self.source) else self.source[self.current + 1]

    def newline(self):
        """Must be called right after consuming a newline char."""
        self.line += 1
        self.line_start = self.current

    def add_token(self, kind, literal=None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(kind, text, literal, self._start_line, self._start_column))

    def error(self, msg, exprs=None, length=None):
        """Records an error located at the start of the current lexeme."""
        length = self.current - self.start if length is None else length
        self.errors.append(ScanError(msg, exprs, line=self._start_line, column=self._start_column, length=length))

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.advance() == "\n":
                self.newline()

        if self.is_at_end():
            self.error("Unterminated string.", length=1)  # points at the opening quote
            return

        self.advance()  # closing "
        self.add_token(TokenKind.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while Scanner.is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and Scanner.is_digit(self.peek_next()):
            self.advance()
            while Scanner.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenKind.NUMBER, self.source[self.start:self.current])

    def identifier(self):
        while Scanner.is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenKind.IDENTIFIER))

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"

    @staticmethod
    def is_alphanumeric(char):
        return Scanner.is_alpha(char) or Scanner.is_digit(char)


def scan(source):
    """Returns (tokens, errors) for source."""
    scanner = Scanner(source)
    return scanner.scan_tokens(), scanner.errors
