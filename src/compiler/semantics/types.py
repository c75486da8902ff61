"""Operand type tracking for arithmetic expressions.

Expression := Term (('+' | '-') Expression)? is right-recursive, so the
operands of one chain arrive one Expression level at a time. The checker
keeps a rolling pair of type slots and a depth marker saying which slot the
next operand fills:

    FIRST   the leftmost operand          var_type1 <- t
    SECOND  the operand after one +/-     var_type2 <- t
    NESTED  every later operand           var_type1 <- var_type2, var_type2 <- t

After an operand is recorded the pair holds the two operands on either side
of the most recent additive operator. One checker covers one chain; the
parser starts a fresh one for every assignment and every parenthesised
sub-expression.
"""

from __future__ import annotations

from enum import Enum, auto

from ..tokens import TOKEN_NAMES, Token, TokenType
from .scope import ScopeStack, VarType


class ExpressionDepth(Enum):
    NONE = auto()
    FIRST = auto()
    SECOND = auto()
    NESTED = auto()


_NEXT_DEPTH = {
    ExpressionDepth.NONE: ExpressionDepth.FIRST,
    ExpressionDepth.FIRST: ExpressionDepth.SECOND,
    ExpressionDepth.SECOND: ExpressionDepth.NESTED,
    ExpressionDepth.NESTED: ExpressionDepth.NESTED,
}


class ExpressionTypeChecker:
    def __init__(self, scopes: ScopeStack):
        self.scopes = scopes
        self.depth = ExpressionDepth.NONE
        self.var_type1 = VarType.UNKNOWN
        self.var_type2 = VarType.UNKNOWN

    def enter_expression(self) -> ExpressionDepth:
        self.depth = _NEXT_DEPTH[self.depth]
        return self.depth

    def operand(self, var_type: VarType):
        """Record the type of the Term just parsed at the current depth."""
        if self.depth == ExpressionDepth.FIRST:
            self.var_type1 = var_type
        elif self.depth == ExpressionDepth.SECOND:
            self.var_type2 = var_type
        elif self.depth == ExpressionDepth.NESTED:
            self.var_type1 = self.var_type2
            self.var_type2 = var_type
        else:
            raise RuntimeError("operand() called before enter_expression()")

    def type_of(self, token: Token) -> VarType:
        """Type an operand token would contribute, without consuming it."""
        if token.type == TokenType.IDENT:
            variable = self.scopes.lookup(token.value)
            return variable.type if variable is not None else VarType.UNKNOWN
        if token.type == TokenType.NUMBER_LIT:
            return VarType.NUMBER
        if token.type == TokenType.STRING_LIT:
            return VarType.STRING
        return VarType.UNKNOWN

    def additive_mismatch(self, operator: TokenType) -> str | None:
        """Check the slot pair against '+' or '-'; return a message on failure."""
        if self.depth in (ExpressionDepth.NONE, ExpressionDepth.FIRST):
            return None
        left, right = self.var_type1, self.var_type2
        symbol = TOKEN_NAMES[operator]
        if operator == TokenType.MINUS and VarType.STRING in (left, right):
            return f"type mismatch: '{symbol}' is not defined for {VarType.STRING.value} operands"
        if left != right:
            return (f"type mismatch: '{symbol}' requires operands of the same type, "
                    f"got {left.value} and {right.value}")
        return None

    @staticmethod
    def multiplicative_mismatch(operator: TokenType, operand: VarType,
                                side: str) -> str | None:
        """'*' and '/' reject STRING on either side."""
        if operand == VarType.STRING:
            symbol = TOKEN_NAMES[operator]
            return f"type mismatch: {side} operand of '{symbol}' is {VarType.STRING.value}"
        return None
