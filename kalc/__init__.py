"""
kalc: a small command-line calculator.

Expressions use +, -, x and / over floating-point numbers, e.g. "2 + 3 x 4".
"""

__version__ = "0.1.0"

from kalc.main import (  # noqa: E402
    KalcError,
    InvalidExpression,
    UnrecognizedCharacter,
    NumericParseFailure,
    ParseFailure,
    NoExpressionProvided,
    tokenize,
    parse,
    evaluate,
    format_number,
    calculate,
    evaluate_expression,
)

__all__ = [
    'KalcError',
    'InvalidExpression',
    'UnrecognizedCharacter',
    'NumericParseFailure',
    'ParseFailure',
    'NoExpressionProvided',
    'tokenize',
    'parse',
    'evaluate',
    'format_number',
    'calculate',
    'evaluate_expression',
]
