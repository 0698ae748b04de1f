"""Formula evaluation for cell display values.

A formula is raw input starting with ``=``. Its body may contain:

* numbers, ``+ - * /`` and parentheses
* cell references (``A1``), resolved one level deep
* aggregate calls over references or ranges: SUM, AVERAGE, COUNT, MIN, MAX, PRODUCT

Arithmetic is parsed into a small AST and evaluated directly; formula text is
never executed as code. Every failure resolves to a sentinel display value
(``#ERROR``, ``#CIRCULAR``, ``#NESTED``) and nothing is raised to the caller.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional, Union

from core.enums import Sentinel
from core.exceptions import CognisheetError
from core.models import Address, CellRange, Sheet

from .address import CELL_REFERENCE_PATTERN, find_references, format_address, parse_address
from .ranges import contains, is_single_cell, iter_rows, parse_range, top_left
from .store import get_cell
from .values import format_number, to_number

_ARITHMETIC_PATTERN = re.compile(r"^[\d\s+\-*/().]*$")
_TOKEN_PATTERN = re.compile(r"\s*(?:(\d+\.?\d*|\.\d+)|(.))")
_FUNCTION_PATTERN = re.compile(r"([A-Za-z]+)\(([^()]*)\)")


class FormulaError(Exception):
    """Internal evaluation failure; ``code`` is the display sentinel"""

    def __init__(self, message: str = "", code: Sentinel = Sentinel.ERROR):
        super().__init__(message)
        self.code = code


# ── Arithmetic AST ────────────────────────────────────────────────

@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


Node = Union[Number, UnaryOp, BinaryOp]


def _tokenize(text: str) -> list[str]:
    tokens = []
    position = 0
    text = text.strip()
    while position < len(text):
        match = _TOKEN_PATTERN.match(text, position)
        if match is None:
            break
        number, symbol = match.groups()
        if number is not None:
            tokens.append(number)
        elif symbol is not None and not symbol.isspace():
            if symbol not in "+-*/()":
                raise FormulaError(f"Unexpected character {symbol!r}")
            tokens.append(symbol)
        position = match.end()
    return tokens


class _Parser:
    """Recursive descent over ``expr := term (('+'|'-') term)*``"""

    def __init__(self, text: str):
        self.tokens = _tokenize(text)
        self.position = 0

    def parse(self) -> Node:
        if not self.tokens:
            raise FormulaError("Empty expression")
        node = self._expression()
        if self.position != len(self.tokens):
            raise FormulaError(f"Unexpected token {self.tokens[self.position]!r}")
        return node

    def _peek(self) -> Optional[str]:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _advance(self) -> str:
        token = self._peek()
        if token is None:
            raise FormulaError("Unexpected end of expression")
        self.position += 1
        return token

    def _expression(self) -> Node:
        node = self._term()
        while self._peek() in ("+", "-"):
            op = self._advance()
            node = BinaryOp(op, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while self._peek() in ("*", "/"):
            op = self._advance()
            node = BinaryOp(op, node, self._unary())
        return node

    def _unary(self) -> Node:
        if self._peek() in ("+", "-"):
            op = self._advance()
            return UnaryOp(op, self._unary())
        return self._primary()

    def _primary(self) -> Node:
        token = self._advance()
        if token == "(":
            node = self._expression()
            if self._advance() != ")":
                raise FormulaError("Unbalanced parentheses")
            return node
        if token in "+-*/)":
            raise FormulaError(f"Unexpected token {token!r}")
        return Number(float(token))


def parse_arithmetic(text: str) -> Node:
    return _Parser(text).parse()


def evaluate_node(node: Node) -> float:
    if isinstance(node, Number):
        return node.value
    if isinstance(node, UnaryOp):
        value = evaluate_node(node.operand)
        return -value if node.op == "-" else value
    left = evaluate_node(node.left)
    right = evaluate_node(node.right)
    if node.op == "+":
        return left + right
    if node.op == "-":
        return left - right
    if node.op == "*":
        return left * right
    if right == 0:
        raise FormulaError("Division by zero")
    return left / right


def evaluate_arithmetic(text: str) -> float:
    """Evaluate a pure arithmetic string such as ``"(1 + 2) * 3"``."""
    if not _ARITHMETIC_PATTERN.match(text):
        raise FormulaError(f"Not arithmetic: {text!r}")
    value = evaluate_node(parse_arithmetic(text))
    if not math.isfinite(value):
        raise FormulaError("Result out of range")
    return value


# ── Reference resolution ──────────────────────────────────────────

def _resolve_reference(
    token: str,
    sheet: Sheet,
    owner: Optional[str],
    text_as_error: bool,
) -> Optional[float]:
    """Numeric value of one referenced cell, following formulas one hop.

    Blank cells give None. Text gives None, or raises when text_as_error.
    """
    raw = get_cell(sheet, token).raw
    if raw.startswith("="):
        inner = raw[1:].strip().upper()
        inner_refs = set(find_references(inner))
        if token in inner_refs or (owner is not None and owner in inner_refs):
            raise FormulaError(f"{token} refers back to itself", Sentinel.CIRCULAR)
        if inner_refs:
            raise FormulaError(f"{token} holds a formula with references", Sentinel.NESTED)
        return evaluate_arithmetic(_substitute_functions(inner, sheet, owner))
    if raw.strip() == "":
        return None
    number = to_number(raw)
    if number is None and text_as_error:
        raise FormulaError(f"{token} is not numeric")
    return number


def _literal(value: float) -> str:
    # Shortest round-trip digits written out without an exponent
    text = format(Decimal(repr(abs(value))), "f")
    return f"(-{text})" if value < 0 else text


def _product(values: list[float]) -> float:
    result = 1.0
    for value in values:
        result *= value
    return result


def _average(values: list[float]) -> float:
    if not values:
        raise FormulaError("AVERAGE of no numbers")
    return sum(values) / len(values)


_FUNCTIONS: dict[str, Callable[[list[float]], float]] = {
    "SUM": sum,
    "AVERAGE": _average,
    "AVG": _average,
    "COUNT": lambda values: float(len(values)),
    "MIN": lambda values: min(values) if values else 0.0,
    "MAX": lambda values: max(values) if values else 0.0,
    "PRODUCT": lambda values: _product(values) if values else 0.0,
}


def _function_arguments(arguments: str, sheet: Sheet, owner: Optional[str]) -> list[float]:
    values: list[float] = []
    for argument in arguments.split(","):
        argument = argument.strip()
        if not argument:
            raise FormulaError("Empty function argument")
        number = to_number(argument)
        if number is not None:
            values.append(number)
            continue
        try:
            cell_range = parse_range(argument)
        except CognisheetError:
            raise FormulaError(f"Bad function argument {argument!r}") from None
        if is_single_cell(cell_range) and format_address(top_left(cell_range)) == owner:
            raise FormulaError(f"{argument} is the formula cell", Sentinel.CIRCULAR)
        for key in _stored_keys(cell_range, sheet):
            # A range skips the cell holding its own aggregate
            if key == owner:
                continue
            value = _resolve_reference(key, sheet, owner, text_as_error=False)
            if value is not None:
                values.append(value)
    return values


def _stored_keys(cell_range: CellRange, sheet: Sheet) -> list[str]:
    """Keys of stored cells inside the range, row by row.

    Blank cells add nothing to an aggregate, so only the sparse store is walked.
    """
    addresses = [
        address
        for address in (parse_address(key) for key in sheet.cells)
        if contains(cell_range, address)
    ]
    addresses.sort(key=lambda address: (address.row, address.column))
    return [format_address(address) for address in addresses]


def _substitute_functions(expression: str, sheet: Sheet, owner: Optional[str]) -> str:
    def replace(match: re.Match) -> str:
        name = match.group(1).upper()
        function = _FUNCTIONS.get(name)
        if function is None:
            raise FormulaError(f"Unknown function {name}")
        return _literal(function(_function_arguments(match.group(2), sheet, owner)))

    return _FUNCTION_PATTERN.sub(replace, expression)


def _substitute_references(expression: str, sheet: Sheet, owner: Optional[str]) -> str:
    resolved: dict[str, float] = {}
    for token in find_references(expression):
        if token not in resolved:
            value = _resolve_reference(token, sheet, owner, text_as_error=True)
            resolved[token] = 0.0 if value is None else value
    return CELL_REFERENCE_PATTERN.sub(lambda m: _literal(resolved[m.group(0)]), expression)


def evaluate(raw: Optional[str], sheet: Sheet, owner: Optional[Address | str] = None) -> str:
    """Display value of raw input.

    Plain input is echoed. Formulas resolve to a formatted number or a sentinel.
    owner is the address holding raw; when given, references back to it are
    reported as circular.
    """
    if raw is None:
        return ""
    if not raw.startswith("="):
        return raw

    try:
        owner_key = None
        if owner is not None:
            owner_key = owner if isinstance(owner, str) else format_address(owner)
            owner_key = owner_key.strip().upper()
        expression = raw[1:].strip().upper()
        expression = _substitute_functions(expression, sheet, owner_key)
        expression = _substitute_references(expression, sheet, owner_key)
        return format_number(evaluate_arithmetic(expression))
    except FormulaError as e:
        return e.code.value
    except (CognisheetError, ValueError, ArithmeticError, RecursionError):
        return Sentinel.ERROR.value


def resolve_cell(sheet: Sheet, address: Address | str) -> str:
    """Display value of the cell at address."""
    key = address if isinstance(address, str) else format_address(address)
    return evaluate(get_cell(sheet, key).raw, sheet, owner=key)


def resolve_range(sheet: Sheet, cell_range: CellRange) -> list[list[str]]:
    """Display values of a range, row by row."""
    return [
        [resolve_cell(sheet, address) for address in row]
        for row in iter_rows(cell_range)
    ]


def is_sentinel(value: str) -> bool:
    return value in {sentinel.value for sentinel in Sentinel}
