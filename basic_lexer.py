# pip install lark
from lark import Lark, Token
from lark.exceptions import UnexpectedCharacters

from basic_errors import LexError

# ----- terminals (raw) -----
# Keywords are not terminals here: a WORD run is classified after lexing,
# so "PRINTX" is rejected instead of splitting into PRINT X.
TOKEN_GRAMMAR = r"""
start: _token*
_token: NUMBER | WORD | STRING
      | LE | GE | NE | LT | GT | EQ
      | PLUS | MINUS | STAR | SLASH
      | LPAR | RPAR | COMMA

NUMBER: /[0-9]+/
WORD: /[A-Z]+/
STRING: /"[^"]*"/

LE: "<="
GE: ">="
NE: "<>"
LT: "<"
GT: ">"
EQ: "="
PLUS: "+"
MINUS: "-"
STAR: "*"
SLASH: "/"
LPAR: "("
RPAR: ")"
COMMA: ","

%import common.WS_INLINE
%ignore WS_INLINE
"""

KEYWORDS = ('PRINT', 'LET', 'GOTO', 'IF', 'THEN', 'END', 'DIM')

OPERATORS = {
    'PLUS': '+', 'MINUS': '-', 'STAR': '*', 'SLASH': '/',
    'EQ': '=', 'NE': '<>', 'LT': '<', 'LE': '<=', 'GT': '>', 'GE': '>=',
}

PUNCTUATION = {'LPAR': '(', 'RPAR': ')', 'COMMA': ','}

# token type -> kind, for everything the lexer can emit
TOKEN_KINDS = dict(
    NUMBER='number', IDENT='ident', STRING='string',
    **{kw: 'keyword' for kw in KEYWORDS},
    **{op: 'operator' for op in OPERATORS},
    **{p: 'punctuation' for p in PUNCTUATION},
)


def token_kind(tok):
    return TOKEN_KINDS[tok.type]


class Lexer:
    """Tokenizer for the body of one program line.

    Emits lark Tokens; `type` is one of TOKEN_KINDS and `value` is the
    decoded payload (int for NUMBER, unquoted text for STRING).
    """

    def __init__(self):
        self._lark = Lark(TOKEN_GRAMMAR, parser="lalr", lexer="basic")

    def tokenize(self, text):
        text = text.rstrip("\r\n")
        try:
            return [self._convert(tok) for tok in self._lark.lex(text)]
        except UnexpectedCharacters as e:
            if e.char == '"':
                raise LexError("Unterminated string literal", e.pos_in_stream) from None
            raise LexError(f"Unexpected character {e.char!r}", e.pos_in_stream) from None

    def _convert(self, tok):
        if tok.type == 'NUMBER':
            return Token.new_borrow_pos('NUMBER', int(tok), tok)
        if tok.type == 'STRING':
            return Token.new_borrow_pos('STRING', str(tok)[1:-1], tok)
        if tok.type == 'WORD':
            word = str(tok)
            if word in KEYWORDS:
                return Token.new_borrow_pos(word, word, tok)
            if len(word) == 1:
                return Token.new_borrow_pos('IDENT', word, tok)
            raise LexError(f"Invalid identifier {word!r}", tok.start_pos)
        return tok


_default_lexer = None


def tokenize(text):
    global _default_lexer
    if _default_lexer is None:
        _default_lexer = Lexer()
    return _default_lexer.tokenize(text)
