"""Tests for analysis faults: undeclared variables, type mismatches,
syntax errors and the production chain attached to each."""

import io

import pytest
from src.compiler.diagnostics import (
    AnalysisError, ParseError, TraceError, TypeMismatchError,
    UndeclaredVariableError, format_chain,
)
from src.compiler.parser.parser import analyse_source
from src.compiler.trace import IndentedTraceSink, RecordingTraceSink


def fail(source: str) -> tuple[AnalysisError, RecordingTraceSink]:
    sink = RecordingTraceSink()
    with pytest.raises(AnalysisError) as exc:
        analyse_source(source, sink)
    return exc.value, sink


# --- Undeclared variables ---

class TestUndeclared:
    def test_call_argument_undeclared(self):
        fault, _ = fail("begin call foo(x); end")
        assert isinstance(fault.root, UndeclaredVariableError)
        assert fault.root.message == "undeclared variable 'x'"
        assert (fault.root.line, fault.root.col) == (1, 16)

    def test_loop_variable_out_of_scope_after_loop(self):
        fault, sink = fail(
            "begin for (i := 1; i < 10; i := i + 1) do x := i end loop; "
            "call foo(x); end")
        assert isinstance(fault.root, UndeclaredVariableError)
        assert "'x'" in fault.root.message
        assert [e.name for e in sink.of_kind("remove")] == ["i", "x"]

    def test_expression_operand_undeclared(self):
        fault, _ = fail("begin y := x + 1 end")
        assert isinstance(fault.root, UndeclaredVariableError)
        assert "Factor" in fault.productions

    def test_condition_left_undeclared(self):
        fault, _ = fail("begin while n < 3 loop n := 1 end loop end")
        assert isinstance(fault.root, UndeclaredVariableError)
        assert fault.productions[-1] == "Condition"

    def test_condition_right_undeclared(self):
        fault, _ = fail("begin n := 1; if n < m then n := 2 end if end")
        assert isinstance(fault.root, UndeclaredVariableError)
        assert "'m'" in fault.root.message

    def test_assignment_target_is_not_a_use(self):
        analyse_source("begin fresh := 1 end")


# --- Type mismatches ---

class TestTypeMismatch:
    def test_string_minus_string(self):
        fault, _ = fail('begin a:="hi"; b:=a-a; end')
        assert isinstance(fault.root, TypeMismatchError)
        assert "'-'" in fault.root.message
        # reported at the operand after the operator
        assert fault.root.col == 21

    def test_number_plus_string(self):
        fault, _ = fail('begin a:=1; b:="x"; c:=a+b; end')
        assert isinstance(fault.root, TypeMismatchError)
        assert "NUMBER and STRING" in fault.root.message

    def test_string_plus_string_allowed(self):
        parser = analyse_source('begin a:="x"; b:="y"; c:=a+b end')
        assert parser.scopes.lookup("c").type.value == "STRING"

    def test_mismatch_later_in_chain(self):
        fault, _ = fail('begin n:=1; s:="x"; r:=n+n+s end')
        assert isinstance(fault.root, TypeMismatchError)

    def test_string_left_of_star(self):
        fault, _ = fail('begin s:="x"; n:=s*2 end')
        assert isinstance(fault.root, TypeMismatchError)
        assert fault.root.message == "type mismatch: left operand of '*' is STRING"

    def test_string_right_of_slash(self):
        fault, _ = fail('begin s:="x"; n:=4/s end')
        assert isinstance(fault.root, TypeMismatchError)
        assert "right operand of '/'" in fault.root.message

    def test_string_from_parenthesised_term(self):
        fault, _ = fail('begin s:="x"; n:=2*(s) end')
        assert isinstance(fault.root, TypeMismatchError)

    def test_parentheses_start_a_fresh_chain(self):
        # the inner '+' compares only the operands inside the parentheses
        parser = analyse_source('begin s:="x"; t:=(s+s) end')
        assert parser.scopes.lookup("t").type.value == "STRING"


# --- Syntax errors ---

class TestSyntaxErrors:
    def test_missing_begin(self):
        fault, _ = fail("x := 1 end")
        assert isinstance(fault.root, ParseError)
        assert fault.root.message == "expected 'begin', got identifier 'x'"

    def test_invalid_statement_start(self):
        fault, _ = fail("begin then end")
        assert fault.root.message == "invalid token: then"
        assert fault.productions[-1] == "Statement"

    def test_missing_operator_in_condition(self):
        fault, _ = fail("begin x := 1; if x then x := 2 end if end")
        assert fault.productions[-1] == "ConditionalOperator"

    def test_if_without_end_if(self):
        fault, _ = fail("begin x := 1; if x = 1 then x := 2 end end")
        assert fault.root.message == "expected 'if', got end"

    def test_empty_statement_list(self):
        fault, _ = fail("begin end")
        assert fault.root.message == "invalid token: end"

    def test_assignment_without_value(self):
        fault, _ = fail("begin x := ; end")
        assert fault.productions[-1] == "AssignmentStatement"

    def test_double_semicolon(self):
        fault, _ = fail("begin x := 1;; end")
        assert isinstance(fault.root, ParseError)
        assert fault.root.message == "expected 'end', got ;"


# --- Fault chain ---

class TestFaultChain:
    def test_chain_outermost_first(self):
        fault, _ = fail("begin call foo(x); end")
        assert isinstance(fault, TraceError)
        assert fault.productions == [
            "StatementPart", "StatementList", "Statement",
            "ProcedureStatement", "ArgumentList",
        ]
        links = list(fault.chain())
        assert links[0] is fault
        assert links[-1] is fault.root
        assert len(links) == 6

    def test_python_cause_follows_chain(self):
        fault, _ = fail("begin call foo(x); end")
        assert fault.__cause__ is fault.cause
        assert fault.root.__cause__ is None

    def test_trace_links_carry_production_names(self):
        fault, _ = fail("begin call foo(x); end")
        assert fault.message == "error caught in StatementPart"
        assert fault.cause.production == "StatementList"

    def test_format_chain_indents_causes(self):
        fault, _ = fail("begin call foo(x); end")
        text = format_chain(fault).splitlines()
        assert text[0].startswith("error caught in StatementPart")
        assert text[1].startswith("  caused by: error caught in StatementList")
        assert text[-1] == " " * 10 + "caused by: undeclared variable 'x' at 1:16"

    def test_for_loop_fault_drops_scope(self):
        fault, sink = fail(
            "begin for (i := 1; i < 10; i := i + 1) do y := q end loop end")
        assert isinstance(fault.root, UndeclaredVariableError)
        assert "ForStatement" in fault.productions
        assert sink.of_kind("remove") == []


# --- Error events ---

class TestErrorEvents:
    def test_root_reported_first_then_each_link(self):
        fault, sink = fail("begin call foo(x); end")
        errors = sink.of_kind("error")
        assert errors[0].fault is fault.root
        assert [e.fault for e in errors] == list(reversed(list(fault.chain())))

    def test_only_error_and_end_after_fault(self):
        _, sink = fail('begin a:=1; b:="x"; c:=a+b; d:=1 end')
        first = next(i for i, e in enumerate(sink.events) if e.kind == "error")
        assert {e.kind for e in sink.events[first:]} == {"error", "end"}

    def test_every_open_production_closed(self):
        _, sink = fail("begin x := 1; while x < 2 loop y := z end loop end")
        opened = [e.name for e in sink.of_kind("begin")]
        closed = [e.name for e in sink.of_kind("end")]
        assert sorted(opened) == sorted(closed)

    def test_no_declaration_for_failed_assignment(self):
        _, sink = fail('begin a:="x"; b:=a-a end')
        assert [e.name for e in sink.of_kind("add")] == ["a"]

    def test_indented_error_line(self):
        out = io.StringIO()
        with pytest.raises(AnalysisError):
            analyse_source("begin\ncall foo(x)\nend", IndentedTraceSink(out))
        lines = out.getvalue().splitlines()
        assert "rggERROR undeclared variable 'x' on line 2" in [
            line.strip() for line in lines]
        assert lines[-1] == "rggEND StatementPart"
