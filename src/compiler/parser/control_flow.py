"""Control flow productions: if, while, do-until, for, and conditions."""

from ..tokens import RELATIONAL_OPERATORS, TokenType
from .core import production


class ControlFlowMixin:

    @production("IfStatement")
    def _if_statement(self):
        self.accept_terminal(TokenType.IF)
        self._condition()
        self.accept_terminal(TokenType.THEN)
        self._statement_list()

        if self._check(TokenType.END):
            self.accept_terminal(TokenType.END)
            self.accept_terminal(TokenType.IF)
        elif self._check(TokenType.ELSE):
            self.accept_terminal(TokenType.ELSE)
            self._statement_list()
            self.accept_terminal(TokenType.END)
            self.accept_terminal(TokenType.IF)
        else:
            self._invalid_token()

    @production("WhileStatement")
    def _while_statement(self):
        self.accept_terminal(TokenType.WHILE)
        self._condition()
        self.accept_terminal(TokenType.LOOP)
        self._statement_list()
        self.accept_terminal(TokenType.END)
        self.accept_terminal(TokenType.LOOP)

    @production("UntilStatement")
    def _until_statement(self):
        self.accept_terminal(TokenType.DO)
        self._statement_list()
        self.accept_terminal(TokenType.UNTIL)
        self._condition()

    @production("ForStatement")
    def _for_statement(self):
        self.accept_terminal(TokenType.FOR)
        self.accept_terminal(TokenType.LPAREN)
        self._assignment_statement()
        self.accept_terminal(TokenType.SEMICOLON)
        self._condition()
        self.accept_terminal(TokenType.SEMICOLON)
        self._assignment_statement()
        self.accept_terminal(TokenType.RPAREN)
        self.accept_terminal(TokenType.DO)
        self._statement_list()
        self.accept_terminal(TokenType.END)
        self.accept_terminal(TokenType.LOOP)

    @production("Condition")
    def _condition(self):
        self._require_declared()
        self.accept_terminal(TokenType.IDENT)
        self._conditional_operator()

        tok = self.lookahead
        if tok.type == TokenType.IDENT:
            self._require_declared()
            self.accept_terminal(TokenType.IDENT)
        elif tok.type in (TokenType.NUMBER_LIT, TokenType.STRING_LIT):
            self.accept_terminal(tok.type)
        else:
            self._invalid_token()

    @production("ConditionalOperator")
    def _conditional_operator(self):
        tok = self.lookahead
        if tok.type not in RELATIONAL_OPERATORS:
            self._fail(f"expected one of '<', '<=', '=', '/=', '>', '>=', "
                       f"got {tok.describe()}")
        self.accept_terminal(tok.type)
