"""Statement productions: program body, statement lists, dispatch,
assignment and procedure calls."""

from ..semantics.scope import Variable, VarType
from ..semantics.types import ExpressionTypeChecker
from ..tokens import OPERAND_STARTS, STATEMENT_STARTS, TokenType
from .core import production


class StatementsMixin:

    @production("StatementPart")
    def _statement_part(self):
        self.accept_terminal(TokenType.BEGIN)
        self._statement_list()
        self.accept_terminal(TokenType.END)

    @production("StatementList")
    def _statement_list(self):
        self._statement()
        if self._check(TokenType.SEMICOLON):
            self.accept_terminal(TokenType.SEMICOLON)
            # A separator may also close the list: "x := 1; end"
            if self._check(*STATEMENT_STARTS):
                self._statement_list()

    @production("Statement")
    def _statement(self):
        tok = self.lookahead

        if tok.type == TokenType.IDENT:
            self._assignment_statement()
        elif tok.type == TokenType.IF:
            self._if_statement()
        elif tok.type == TokenType.WHILE:
            self._while_statement()
        elif tok.type == TokenType.CALL:
            self._procedure_statement()
        elif tok.type == TokenType.DO:
            self._until_statement()
        elif tok.type == TokenType.FOR:
            # The loop header and body share one scope, dropped at 'end loop'
            with self.scopes.loop_scope():
                self._for_statement()
        else:
            self._invalid_token()

    @production("AssignmentStatement")
    def _assignment_statement(self):
        target = self.accept_terminal(TokenType.IDENT)
        self.accept_terminal(TokenType.COLON_EQ)

        start = self.lookahead.type
        if start in OPERAND_STARTS:
            self.types = ExpressionTypeChecker(self.scopes)
            var_type = self._expression()
            if start == TokenType.NUMBER_LIT:
                var_type = VarType.NUMBER
        elif start == TokenType.STRING_LIT:
            self.accept_terminal(TokenType.STRING_LIT)
            var_type = VarType.STRING
        else:
            self._invalid_token()

        self.scopes.declare(
            target.value,
            Variable(target.value, var_type, target.line, target.col),
        )

    @production("ProcedureStatement")
    def _procedure_statement(self):
        self.accept_terminal(TokenType.CALL)
        self.accept_terminal(TokenType.IDENT)
        self.accept_terminal(TokenType.LPAREN)
        self._argument_list()
        self.accept_terminal(TokenType.RPAREN)

    @production("ArgumentList")
    def _argument_list(self):
        self._require_declared()
        self.accept_terminal(TokenType.IDENT)
        if self._check(TokenType.COMMA):
            self.accept_terminal(TokenType.COMMA)
            self._argument_list()
