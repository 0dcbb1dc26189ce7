# kalc: a command-line arithmetic calculator.
#
# An expression such as "2 + 3 x 4" goes through a small pipeline:
#   tokenize -> parse (recursive descent) -> evaluate -> format
# The core functions are pure; only main() touches argv, stdin and stdout.
#
# Grammar (lowest precedence first):
#   additive       : multiplicative (('+' | '-') multiplicative)*
#   multiplicative : primary (('x' | '/') primary)*
#   primary        : NUMBER
#
# Multiplication is written with the letter 'x'. There is no unary minus and no
# grouping; all values are floats.

from __future__ import annotations

import argparse
import logging
import math
import operator
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from prompt_toolkit import PromptSession

from kalc import __version__
from kalc.config import Settings, configure_logging, load_settings

logger = logging.getLogger(__name__)

PROGRAM_NAME = "kalc"
VERSION_STRING = f"{PROGRAM_NAME} v{__version__}"

# --------------------------
# Exceptions
# --------------------------

class KalcError(Exception):
    """Base class for calculator errors."""
    pass

class InvalidExpression(KalcError):
    """Raised for empty input, a non-numeric first character or a malformed literal."""

    def __init__(self, message: str = "Invalid math expression"):
        super().__init__(message)

class UnrecognizedCharacter(KalcError):
    """Raised when the input holds a character outside the token set."""

    def __init__(self, character: str):
        self.character = character
        super().__init__(f"Unrecognized character: {character}")

class NumericParseFailure(KalcError):
    """Raised when a number literal cannot be converted to a float."""

    def __init__(self, literal: str):
        self.literal = literal
        super().__init__(f"Invalid number literal: {literal}")

class ParseFailure(KalcError):
    """Raised when the tokens do not form an expression."""

    def __init__(self, message: str = "unable to parse expression"):
        super().__init__(message)

class NoExpressionProvided(KalcError):
    """Raised when interactive mode reads a blank line."""

    def __init__(self, message: str = "No expression provided"):
        super().__init__(message)

# --------------------------
# Tokenizer
# --------------------------

class TokenType(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "x"
    DIV = "/"
    NUMBER = "NUMBER"
    EOF = "EOF"

@dataclass(frozen=True)
class Token:
    """A lexical token; only NUMBER tokens carry a value."""
    type: TokenType
    value: Optional[float] = None

    def __repr__(self) -> str:
        if self.type is TokenType.NUMBER:
            return f"Token({self.type.name}, {self.value!r})"
        return f"Token({self.type.name})"

_OPERATOR_CHARS: Dict[str, TokenType] = {
    '+': TokenType.ADD,
    '-': TokenType.SUB,
    'x': TokenType.MUL,
    '/': TokenType.DIV,
}

_SKIPPED_CHARS = {' ', '\n'}

class Tokenizer:
    """Single pass scanner with one character of lookahead."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.len = len(text)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < self.len else ''

    def _advance(self) -> str:
        ch = self.text[self.pos]
        self.pos += 1
        return ch

    def _read_number(self) -> Token:
        start = self.pos
        has_dot = False
        self._advance()
        while True:
            ch = self._peek()
            if ch.isdigit():
                self._advance()
            elif ch == '.':
                if has_dot:
                    raise InvalidExpression(
                        f"Invalid math expression: second decimal point at position {self.pos}"
                    )
                has_dot = True
                self._advance()
            else:
                break
        raw = self.text[start:self.pos]
        # float() also accepts non-ASCII decimal digits; literals are ASCII only.
        if not raw.isascii():
            raise NumericParseFailure(raw)
        try:
            value = float(raw)
        except ValueError as e:
            raise NumericParseFailure(raw) from e
        return Token(TokenType.NUMBER, value)

    def tokenize(self) -> List[Token]:
        # The first character must be numeric; leading blanks and operators are rejected.
        if not self.text or not self.text[0].isdigit():
            raise InvalidExpression()

        tokens: List[Token] = []
        while self.pos < self.len:
            ch = self._peek()
            if ch in _OPERATOR_CHARS:
                tokens.append(Token(_OPERATOR_CHARS[ch]))
                self._advance()
            elif '0' <= ch <= '9':
                tokens.append(self._read_number())
            elif ch in _SKIPPED_CHARS:
                self._advance()
            else:
                raise UnrecognizedCharacter(ch)
        tokens.append(Token(TokenType.EOF))
        return tokens

def tokenize(text: str) -> List[Token]:
    return Tokenizer(text).tokenize()

# --------------------------
# AST Nodes
# --------------------------

class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "x"
    DIV = "/"

@dataclass(frozen=True)
class Number:
    value: float

@dataclass(frozen=True)
class BinaryOp:
    left: "ASTNode"
    op: Operator
    right: "ASTNode"

ASTNode = Union[Number, BinaryOp]

_ADDITIVE_OPS: Dict[TokenType, Operator] = {
    TokenType.ADD: Operator.ADD,
    TokenType.SUB: Operator.SUB,
}

_MULTIPLICATIVE_OPS: Dict[TokenType, Operator] = {
    TokenType.MUL: Operator.MUL,
    TokenType.DIV: Operator.DIV,
}

# --------------------------
# Parser
# --------------------------

class Parser:
    """
    Recursive descent parser with one token of lookahead.

    Each parse_* method returns None when no node can start at the current token.
    A trailing operator with no operand ends the expression ("5 +" is 5), while two
    numbers with no operator between them raise InvalidExpression.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _match_operator(self, operators: Dict[TokenType, Operator]) -> Optional[Operator]:
        """Return the operator at the current token if it belongs to this level."""
        tok = self._peek()
        if tok is None:
            return None
        if tok.type is TokenType.NUMBER:
            raise InvalidExpression(
                f"Invalid math expression: expected an operator before {format_number(tok.value)}"
            )
        return operators.get(tok.type)

    def parse_program(self) -> Optional[ASTNode]:
        return self.parse_additive()

    def parse_additive(self) -> Optional[ASTNode]:
        expr = self.parse_multiplicative()
        if expr is None:
            return None
        while True:
            op = self._match_operator(_ADDITIVE_OPS)
            if op is None:
                break
            self._advance()
            right = self.parse_multiplicative()
            if right is None:
                break
            expr = BinaryOp(expr, op, right)
        return expr

    def parse_multiplicative(self) -> Optional[ASTNode]:
        expr = self.parse_primary()
        if expr is None:
            return None
        while True:
            op = self._match_operator(_MULTIPLICATIVE_OPS)
            if op is None:
                break
            self._advance()
            right = self.parse_primary()
            if right is None:
                break
            expr = BinaryOp(expr, op, right)
        return expr

    def parse_primary(self) -> Optional[ASTNode]:
        tok = self._peek()
        if tok is None or tok.type is not TokenType.NUMBER:
            return None
        self._advance()
        return Number(tok.value)

def parse(tokens: List[Token]) -> ASTNode:
    """Parse a token list, raising ParseFailure when it holds no expression."""
    node = Parser(tokens).parse_program()
    if node is None:
        raise ParseFailure()
    return node

# --------------------------
# Evaluator
# --------------------------

def _divide(left: float, right: float) -> float:
    # Python raises on float division by zero; produce the IEEE-754 result instead.
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right

_BIN_OPS: Dict[Operator, Callable[[float, float], float]] = {
    Operator.ADD: operator.add,
    Operator.SUB: operator.sub,
    Operator.MUL: operator.mul,
    Operator.DIV: _divide,
}

def evaluate(node: ASTNode) -> float:
    """Fold an AST into a float."""
    if isinstance(node, Number):
        return node.value
    if isinstance(node, BinaryOp):
        left = evaluate(node.left)
        right = evaluate(node.right)
        return _BIN_OPS[node.op](left, right)
    raise TypeError(f"Unsupported AST node: {type(node).__name__}")

# --------------------------
# Formatter
# --------------------------

def format_number(value: float) -> str:
    """Render integral values without a decimal point, everything else with str()."""
    if math.isfinite(value) and value.is_integer():
        return f"{value:.0f}"
    return str(value)

# --------------------------
# Pipeline
# --------------------------

def calculate(expression: str) -> float:
    tokens = tokenize(expression)
    logger.debug("Tokens: %s", tokens)
    ast = parse(tokens)
    logger.debug("AST: %s", ast)
    return evaluate(ast)

def evaluate_expression(expression: str) -> str:
    """Run the whole pipeline and return the display string."""
    return format_number(calculate(expression))

# --------------------------
# Command line
# --------------------------

HELP_TEXT = f"""\
{PROGRAM_NAME}

USAGE:
  {PROGRAM_NAME} [OPTIONS] [EXPRESSION]

OPTIONS:
  -h, --help     Display this help message
  -v, --version  Display version information

EXPRESSION SYNTAX:
  Basic arithmetic: +, -, x, /
  Numbers can be integers or decimals

EXAMPLES:
  {PROGRAM_NAME} 2 + 3 x 4
  {PROGRAM_NAME} 5 + 3 / 2
  {PROGRAM_NAME} 3.14 x 2.5

NOTES:
  - If no expression is provided, {PROGRAM_NAME} will read from stdin

VERSION:
  {VERSION_STRING}"""

INTERACTIVE_PROMPT = "Enter an expression (or type 'help' for instructions):"

def show_help() -> str:
    return HELP_TEXT

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Evaluate an arithmetic expression.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Display the help message.",
    )
    parser.add_argument(
        "-v", "--version",
        action="store_true",
        help="Display version information.",
    )
    parser.add_argument(
        "expression",
        nargs=argparse.REMAINDER,
        help="Expression words, joined with single spaces.",
    )
    return parser

_FLAGS = {"-h", "--help", "-v", "--version"}

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse flags; only an exact flag as the first argument is treated as one."""
    if argv is None:
        argv = sys.argv[1:]
    parser = build_arg_parser()
    if argv and argv[0].startswith("-") and argv[0] not in _FLAGS:
        # "-vh", "-q" and the like are expression text and fail in the tokenizer.
        args = parser.parse_args([])
        args.expression = list(argv)
        return args
    return parser.parse_args(argv)

def read_line(prompt_text: str) -> str:
    """Read one line, through prompt_toolkit when attached to a terminal."""
    if sys.stdin.isatty():
        try:
            return PromptSession().prompt(prompt_text)
        except (EOFError, KeyboardInterrupt):
            return ""
    return sys.stdin.readline()

def run_interactive(settings: Settings) -> int:
    print(VERSION_STRING)
    print(INTERACTIVE_PROMPT)
    line = read_line(settings.prompt)
    if line.strip() == "help":
        print(show_help())
        return 0
    if not line.strip():
        raise NoExpressionProvided()
    print(evaluate_expression(line))
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    settings = load_settings()
    configure_logging(settings)

    args = parse_args(argv)
    if args.help:
        print(show_help())
        return 0
    if args.version:
        print(VERSION_STRING)
        return 0

    try:
        if not args.expression:
            return run_interactive(settings)
        expression = " ".join(args.expression)
        logger.debug("Evaluating %r", expression)
        print(evaluate_expression(expression))
        return 0
    except (KalcError, OSError) as e:
        logger.debug("Evaluation failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

if __name__ == '__main__':
    sys.exit(main())
