"""Regex front end: tokenizing, explicit concatenation and infix-to-postfix.

Supported syntax:
    - `|` alternation, `*` `+` `?` postfix quantifiers, `(` `)` grouping
    - any other character is a literal symbol
    - `\\x` is the literal character x, except `\\e` which is epsilon
"""

import logging
from typing import List, NamedTuple, Optional

from config import Config
from errors import (
    InvalidExpressionEnd,
    InvalidExpressionStart,
    UnmatchedParenthesis,
    UnterminatedEscape,
)

logger = logging.getLogger(__name__)

LITERAL = "literal"
EPSILON = "epsilon"
CONCAT = "concat"
UNION = "union"
STAR = "star"
PLUS = "plus"
OPTIONAL = "optional"
LPAREN = "lparen"
RPAREN = "rparen"

OPERATOR_KINDS = {
    "|": UNION,
    "*": STAR,
    "+": PLUS,
    "?": OPTIONAL,
    "(": LPAREN,
    ")": RPAREN,
}
OPERATOR_CHARS = {kind: ch for ch, kind in OPERATOR_KINDS.items()}

QUANTIFIERS = {STAR, PLUS, OPTIONAL}
OPERANDS = {LITERAL, EPSILON}

# A token of these kinds can close a sub-expression / open one.
ENDS_EXPRESSION = OPERANDS | QUANTIFIERS | {RPAREN}
BEGINS_EXPRESSION = OPERANDS | {LPAREN}

PRECEDENCE = {
    UNION: 1,
    CONCAT: 2,
    STAR: 3,
    PLUS: 3,
    OPTIONAL: 3,
}


class Token(NamedTuple):
    kind: str
    value: Optional[str] = None
    position: int = 0

    def __str__(self):
        return format_tokens([self])


def tokenize(pattern: str) -> List[Token]:
    tokens = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            if i + 1 >= len(pattern):
                raise UnterminatedEscape("Unterminated escape sequence at end of regex", i)
            escaped = pattern[i + 1]
            if escaped == "e":
                tokens.append(Token(EPSILON, None, i))
            else:
                tokens.append(Token(LITERAL, escaped, i))
            i += 2
            continue
        if ch in OPERATOR_KINDS:
            tokens.append(Token(OPERATOR_KINDS[ch], ch, i))
        else:
            tokens.append(Token(LITERAL, ch, i))
        i += 1
    return tokens


def insert_concatenation(pattern: str) -> List[Token]:
    """Tokenize `pattern` and make every implicit concatenation explicit."""
    result = []
    for token in tokenize(pattern):
        if result and result[-1].kind in ENDS_EXPRESSION and token.kind in BEGINS_EXPRESSION:
            result.append(Token(CONCAT, None, token.position))
        result.append(token)
    return result


def format_tokens(tokens) -> str:
    out = []
    for token in tokens:
        if token.kind == LITERAL:
            if token.value in OPERATOR_KINDS or token.value in ("\\", Config.EPSILON_SYMBOL):
                out.append("\\" + token.value)
            else:
                out.append(token.value)
        elif token.kind == EPSILON:
            out.append(Config.EPSILON_SYMBOL)
        elif token.kind == CONCAT:
            out.append(Config.CONCAT_SYMBOL)
        else:
            out.append(OPERATOR_CHARS[token.kind])
    return "".join(out)


def to_postfix(tokens: List[Token]) -> List[Token]:
    """Shunting-yard reordering of an explicit-concatenation token stream.

    Every operator here is left-associative, so the stack top is popped while
    its precedence is >= the incoming operator's. Parentheses never reach the
    output.
    """
    if not tokens:
        return []

    first = tokens[0]
    if first.kind in (UNION, CONCAT) or first.kind in QUANTIFIERS:
        raise InvalidExpressionStart(f"Invalid start of expression: '{format_tokens([first])}'", first.position)

    output = []
    ops = []
    for token in tokens:
        if token.kind in OPERANDS:
            output.append(token)
        elif token.kind == LPAREN:
            ops.append(token)
        elif token.kind == RPAREN:
            while ops and ops[-1].kind != LPAREN:
                output.append(ops.pop())
            if not ops:
                raise UnmatchedParenthesis("Unmatched closing parenthesis", token.position)
            ops.pop()
        else:
            while ops and ops[-1].kind != LPAREN and PRECEDENCE[ops[-1].kind] >= PRECEDENCE[token.kind]:
                output.append(ops.pop())
            ops.append(token)

    while ops:
        op = ops.pop()
        if op.kind == LPAREN:
            raise UnmatchedParenthesis("Unmatched opening parenthesis", op.position)
        output.append(op)

    # a trailing CONCAT only comes from callers that build token lists by hand
    last = tokens[-1]
    if last.kind in (UNION, CONCAT):
        raise InvalidExpressionEnd(f"Invalid end of expression: '{format_tokens([last])}'", last.position)

    return output


def parse_regex_to_postfix(pattern: str) -> List[Token]:
    expanded = insert_concatenation(pattern)
    logger.debug("expanded %r -> %s", pattern, format_tokens(expanded))
    postfix = to_postfix(expanded)
    logger.debug("postfix %r -> %s", pattern, format_tokens(postfix))
    return postfix
