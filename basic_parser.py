# pip install lark
from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput, UnexpectedToken, VisitError
from lark.lexer import Lexer as LarkLexer

from basic_ast import (
    ArrayAccess, BinaryOp, Dim, End, Goto, If, Let, LetArray, Literal,
    Print, StringLiteral, Variable,
)
from basic_errors import BasicRuntimeError, LexError, ParseError
from basic_lexer import OPERATORS, PUNCTUATION, tokenize
from basic_runtime import MAX_ARRAY_SIZE, RuntimeState, evaluate

# ----- Grammar (statement per line, tokens come pre-lexed) -----
GRAMMAR = r"""
%declare NUMBER IDENT STRING
%declare PRINT LET GOTO IF THEN END DIM
%declare PLUS MINUS STAR SLASH EQ NE LT LE GT GE
%declare LPAR RPAR COMMA

statement: PRINT (print_item (COMMA print_item)*)?   -> print_stmt
         | LET IDENT EQ expr                         -> let_stmt
         | LET IDENT LPAR expr RPAR EQ expr          -> let_array_stmt
         | GOTO expr                                 -> goto_stmt
         | IF comparison THEN NUMBER                 -> if_stmt
         | END                                       -> end_stmt
         | DIM IDENT LPAR expr RPAR                  -> dim_stmt

?print_item: STRING      -> string_item
           | expr

// a single comparison binds loosest; no chaining, no AND/OR
?expr: sum
     | comparison
comparison: sum (EQ | NE | LT | LE | GT | GE) sum

?sum: product
    | sum (PLUS | MINUS) product      -> binop
?product: unary
        | product (STAR | SLASH) unary -> binop
?unary: primary
      | MINUS unary                   -> neg
?primary: NUMBER                      -> literal
        | IDENT                       -> variable
        | IDENT LPAR expr RPAR        -> array_access
        | LPAR expr RPAR              -> paren
"""

# readable names for "expected ..." messages
TOKEN_NAMES = dict(
    NUMBER='number', IDENT='variable', STRING='string',
    **OPERATORS, **PUNCTUATION,
)


class TokenStream(LarkLexer):
    """Feeds an already tokenized line to the LALR parser."""

    def __init__(self, lexer_conf):
        pass

    def lex(self, data):
        yield from data


@v_args(inline=True)
class StatementBuilder(Transformer):
    # --- statements ---
    def print_stmt(self, _kw, *items):
        return Print(tuple(it for it in items if getattr(it, 'type', None) != 'COMMA'))

    def string_item(self, tok):
        return StringLiteral(tok.value)

    def let_stmt(self, _kw, name, _eq, value):
        return Let(str(name), value)

    def let_array_stmt(self, _kw, name, _lp, index, _rp, _eq, value):
        return LetArray(str(name), index, value)

    def goto_stmt(self, _kw, target):
        return Goto(target)

    def if_stmt(self, _kw, condition, _then, target):
        return If(condition, target.value)

    def end_stmt(self, _kw):
        return End()

    def dim_stmt(self, _kw, name, lpar, size, _rp):
        return Dim(str(name), fold_size(size, lpar.end_pos))

    # --- expressions ---
    def comparison(self, left, op, right):
        return BinaryOp(OPERATORS[op.type], left, right)

    def binop(self, left, op, right):
        return BinaryOp(OPERATORS[op.type], left, right)

    def neg(self, _minus, operand):
        return BinaryOp('-', Literal(0), operand)

    def literal(self, tok):
        return Literal(tok.value)

    def variable(self, tok):
        return Variable(str(tok))

    def array_access(self, name, _lp, index, _rp):
        return ArrayAccess(str(name), index)

    def paren(self, _lp, expr, _rp):
        return expr


def is_constant(expr):
    if isinstance(expr, Literal):
        return True
    if isinstance(expr, BinaryOp):
        return is_constant(expr.left) and is_constant(expr.right)
    return False


def fold_size(size, position):
    """Fold a DIM size to a positive Literal."""
    if not is_constant(size):
        raise ParseError("DIM size must be a constant", position)
    try:
        value = evaluate(size, RuntimeState())
    except BasicRuntimeError as e:
        raise ParseError(f"Invalid DIM size: {e.reason}", position) from None
    if value <= 0:
        raise ParseError(f"DIM size must be positive, got {value}", position)
    if value > MAX_ARRAY_SIZE:
        raise ParseError(f"DIM size must be at most {MAX_ARRAY_SIZE}, got {value}", position)
    return Literal(value)


def _describe(tok):
    if tok.type == '$END':
        return "end of line"
    if tok.type == 'STRING':
        return f'"{tok.value}"'
    return repr(str(tok))


TOO_DEEP = "Expression too deeply nested"


class Parser:
    def __init__(self):
        self._lark = Lark(GRAMMAR, parser="lalr", lexer=TokenStream, start="statement")
        self._builder = StatementBuilder()

    def parse_tokens(self, tokens, end_position=None, line_number=None):
        """Parse one line's tokens into a Statement.

        end_position is the column reported when the line ends early; it
        defaults to just past the last token.
        """
        if end_position is None:
            end_position = tokens[-1].end_pos if tokens else 0
        if not tokens:
            raise ParseError("Expected statement", end_position, line_number)
        try:
            tree = self._lark.parse(tokens)
        except UnexpectedToken as e:
            tok = e.token
            position = end_position if tok.type == '$END' else tok.start_pos
            expected = sorted(TOKEN_NAMES.get(t, t) for t in e.expected if t != '$END')
            reason = f"Unexpected {_describe(tok)}"
            if tok.type != '$END' and '$END' in e.expected:
                reason = f"Unexpected {_describe(tok)} after end of statement"
            elif expected:
                reason += ", expected " + " or ".join(expected)
            raise ParseError(reason, position, line_number) from None
        except UnexpectedInput as e:
            raise ParseError(str(e), end_position, line_number) from None
        except RecursionError:
            raise ParseError(TOO_DEEP, end_position, line_number) from None
        try:
            return self._builder.transform(tree)
        except RecursionError:
            raise ParseError(TOO_DEEP, end_position, line_number) from None
        except VisitError as e:
            if isinstance(e.orig_exc, ParseError):
                e.orig_exc.line_number = line_number
                raise e.orig_exc from None
            if isinstance(e.orig_exc, RecursionError):
                raise ParseError(TOO_DEEP, end_position, line_number) from None
            raise

    def parse_line(self, text, line_number=None):
        """Tokenize and parse the statement text of one line."""
        text = text.rstrip("\r\n")
        try:
            tokens = tokenize(text)
        except LexError as e:
            e.line_number = line_number
            raise
        return self.parse_tokens(tokens, len(text), line_number)


_default_parser = None


def parse_statement(text, line_number=None):
    global _default_parser
    if _default_parser is None:
        _default_parser = Parser()
    return _default_parser.parse_line(text, line_number)
