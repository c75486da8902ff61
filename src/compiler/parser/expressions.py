"""Expression productions with operand type checking.

Expression and Term are right-recursive, matching the grammar. Each
production returns the VarType of the value it parsed.
"""

from typing import Optional

from ..diagnostics import TypeMismatchError
from ..semantics.scope import VarType
from ..semantics.types import ExpressionTypeChecker
from ..tokens import OPERAND_STARTS, Token, TokenType
from .core import production


class ExpressionsMixin:

    @production("Expression")
    def _expression(self, operator: Optional[Token] = None,
                    operand_token: Optional[Token] = None) -> VarType:
        """``operator`` is the '+'/'-' that led here from the enclosing
        Expression, ``operand_token`` the token that followed it."""
        types = self.types
        types.enter_expression()
        if not self._check(*OPERAND_STARTS):
            self._invalid_token()

        var_type = self._term()
        types.operand(var_type)
        if operator is not None:
            problem = types.additive_mismatch(operator.type)
            if problem:
                self._fail(problem, kind=TypeMismatchError, token=operand_token)

        if self._check(TokenType.PLUS, TokenType.MINUS):
            op = self.accept_terminal(self.lookahead.type)
            self._expression(op, self.lookahead)
        return var_type

    @production("Term")
    def _term(self) -> VarType:
        if not self._check(*OPERAND_STARTS):
            self._invalid_token()

        var_type = self._factor()
        if not self._check(TokenType.STAR, TokenType.SLASH):
            return var_type

        op = self.accept_terminal(self.lookahead.type).type
        right = self.lookahead
        types = self.types
        problem = (types.multiplicative_mismatch(op, var_type, "left")
                   or types.multiplicative_mismatch(op, types.type_of(right), "right"))
        if problem:
            self._fail(problem, kind=TypeMismatchError, token=right)

        right_type = self._term()
        problem = types.multiplicative_mismatch(op, right_type, "right")
        if problem:
            self._fail(problem, kind=TypeMismatchError, token=right)
        return VarType.NUMBER

    @production("Factor")
    def _factor(self) -> VarType:
        tok = self.lookahead

        if tok.type == TokenType.IDENT:
            variable = self._require_declared()
            self.accept_terminal(TokenType.IDENT)
            return variable.type
        if tok.type == TokenType.NUMBER_LIT:
            self.accept_terminal(TokenType.NUMBER_LIT)
            return VarType.NUMBER
        if tok.type == TokenType.LPAREN:
            self.accept_terminal(TokenType.LPAREN)
            # A parenthesised expression is its own operand chain
            enclosing = self.types
            self.types = ExpressionTypeChecker(self.scopes)
            try:
                var_type = self._expression()
            finally:
                self.types = enclosing
            self.accept_terminal(TokenType.RPAREN)
            return var_type
        self._invalid_token()
