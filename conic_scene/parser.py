"""Numeric expression parser for editing fields.

Grammar (case-insensitive)::

    expr   := term (('+' | '-') term)*
    term   := unary (('*' | '/') unary)*
    unary  := ('+' | '-') unary | power
    power  := atom ('^' unary)?
    atom   := NUMBER | 'pi' | 'e' | FUNC '(' expr ')' | '(' expr ')'
    FUNC   := 'sqrt' | 'sin' | 'cos' | 'tan'

``^`` is right-associative and binds tighter than unary minus, so ``-2^2``
is ``-4``.  Any failure, including domain errors and non-finite results,
surfaces as ``SyntaxError``; :func:`evaluate_expression` maps it to ``None``.
"""

import logging
import math
import re
from typing import Callable, Dict, List, Optional, Tuple

from .lexer import Token, tokenize
from .numbers import SymbolicNumber

logger = logging.getLogger(__name__)

_ERROR_LOC_RE = re.compile(r"\[col (\d+)\]")

CONSTANTS: Dict[str, float] = {
    'pi': math.pi,
    'e': math.e,
}

FUNCTIONS: Dict[str, Callable[[float], float]] = {
    'sqrt': math.sqrt,
    'sin': math.sin,
    'cos': math.cos,
    'tan': math.tan,
}


class Cursor:
    def __init__(self, tokens: List[Token], end_col: int):
        self.toks = tokens
        self.i = 0
        self.end_col = end_col

    def peek(self):
        return self.toks[self.i] if self.i < len(self.toks) else None

    def match(self, *types: str):
        if self.i < len(self.toks) and self.toks[self.i][0] in types:
            t = self.toks[self.i]
            self.i += 1
            return t
        return None

    def expect(self, *types: str):
        t = self.peek()
        if t and t[0] in types:
            self.i += 1
            return t
        want = '|'.join(types)
        if t:
            raise SyntaxError(f'[col {t[2]}] expected {want}, got {t[1]!r}')
        raise SyntaxError(f'[col {self.end_col}] unexpected end of expression: expected {want}')


def _checked(value: float, col: int) -> float:
    if not math.isfinite(value):
        raise SyntaxError(f'[col {col}] result is not a finite number')
    return value


def parse_expr(cur: Cursor) -> float:
    value = parse_term(cur)
    while True:
        op = cur.match('PLUS', 'DASH')
        if not op:
            return value
        rhs = parse_term(cur)
        value = _checked(value + rhs if op[0] == 'PLUS' else value - rhs, op[2])


def parse_term(cur: Cursor) -> float:
    value = parse_unary(cur)
    while True:
        op = cur.match('STAR', 'SLASH')
        if not op:
            return value
        rhs = parse_unary(cur)
        if op[0] == 'STAR':
            value = _checked(value * rhs, op[2])
        else:
            if rhs == 0:
                raise SyntaxError(f'[col {op[2]}] division by zero')
            value = _checked(value / rhs, op[2])


def parse_unary(cur: Cursor) -> float:
    op = cur.match('PLUS', 'DASH')
    if op:
        value = parse_unary(cur)
        return -value if op[0] == 'DASH' else value
    return parse_power(cur)


def parse_power(cur: Cursor) -> float:
    base = parse_atom(cur)
    op = cur.match('CARET')
    if not op:
        return base
    exponent = parse_unary(cur)
    try:
        return _checked(math.pow(base, exponent), op[2])
    except (OverflowError, ValueError) as exc:
        raise SyntaxError(f'[col {op[2]}] invalid power: {exc}') from exc


def parse_atom(cur: Cursor) -> float:
    t = cur.peek()
    if t is None:
        raise SyntaxError(f'[col {cur.end_col}] unexpected end of expression')
    if t[0] == 'NUMBER':
        cur.i += 1
        return _checked(float(t[1]), t[2])
    if t[0] == 'LPAREN':
        cur.i += 1
        value = parse_expr(cur)
        cur.expect('RPAREN')
        return value
    if t[0] == 'ID':
        cur.i += 1
        name = t[1]
        if name in CONSTANTS:
            return CONSTANTS[name]
        if name in FUNCTIONS:
            cur.expect('LPAREN')
            arg = parse_expr(cur)
            cur.expect('RPAREN')
            try:
                return _checked(FUNCTIONS[name](arg), t[2])
            except ValueError as exc:
                raise SyntaxError(f'[col {t[2]}] {name} domain error: {exc}') from exc
        raise SyntaxError(f'[col {t[2]}] unknown name {name!r}')
    raise SyntaxError(f'[col {t[2]}] unexpected token {t[1]!r}')


def _augment_syntax_error(err: SyntaxError, text: str) -> Optional[SyntaxError]:
    message = str(err)
    if not text or "\n" in message or "\n" in text:
        return None
    match = _ERROR_LOC_RE.search(message)
    if not match:
        return None
    col = max(int(match.group(1)), 1)
    caret_line = " " * (col - 1) + "^"
    snippet = f"    {text.rstrip()}\n    {caret_line}"
    return SyntaxError(f"{message}\n{snippet}")


def _parse(text: str) -> Tuple[float, str]:
    tokens = tokenize(text)
    if not tokens:
        raise SyntaxError('[col 1] empty expression')
    cur = Cursor(tokens, end_col=len(text.rstrip()) + 1)
    value = parse_expr(cur)
    trailing = cur.peek()
    if trailing:
        raise SyntaxError(f'[col {trailing[2]}] unexpected token {trailing[1]!r}')
    return value, text.strip()


def parse_number(text: str) -> SymbolicNumber:
    """Evaluate ``text`` and keep it alongside the value.

    Raises ``SyntaxError`` pointing at the offending column.
    """

    try:
        value, source = _parse(text)
    except SyntaxError as err:
        augmented = _augment_syntax_error(err, text)
        if augmented is None:
            raise
        raise augmented from None
    return SymbolicNumber(text=source, value=value)


def evaluate_expression(text: Optional[str]) -> Optional[float]:
    """Return the finite value of ``text``, or ``None`` if it does not parse."""

    if not text or not text.strip():
        return None
    try:
        return parse_number(text).value
    except SyntaxError as err:
        logger.debug("Rejected numeric input %r: %s", text, str(err).splitlines()[0])
        return None
