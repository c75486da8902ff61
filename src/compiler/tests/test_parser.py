"""Tests for the parser: trace structure, declarations and scoping."""

import io
import sys

import pytest
from src.compiler.diagnostics import AnalysisError, ParseError
from src.compiler.ebnf import get_grammar_info
from src.compiler.lexer import Lexer
from src.compiler.parser.parser import Parser, analyse, analyse_source
from src.compiler.semantics.scope import VarType
from src.compiler.trace import IndentedTraceSink, RecordingTraceSink


def run(source: str):
    sink = RecordingTraceSink()
    parser = analyse_source(source, sink)
    return parser, sink


def names(sink, kind):
    return [e.name for e in sink.of_kind(kind)]


# --- Trace structure ---

class TestTraceStructure:
    def test_begin_end_balanced(self):
        _, sink = run("begin x := 1; y := x * 2 end")
        depth = 0
        for event in sink.events:
            if event.kind == "begin":
                depth += 1
            elif event.kind == "end":
                depth -= 1
            assert depth >= 0
        assert depth == 0

    def test_end_matches_begin(self):
        _, sink = run("begin x := (1 + 2) * 3 end")
        stack = []
        for event in sink.events:
            if event.kind == "begin":
                stack.append(event.name)
            elif event.kind == "end":
                assert stack.pop() == event.name
        assert stack == []

    def test_outermost_production_is_statement_part(self):
        _, sink = run("begin x := 1 end")
        assert sink.events[0].kind == "begin"
        assert sink.events[0].name == "StatementPart"
        assert sink.events[-1].kind == "end"
        assert sink.events[-1].name == "StatementPart"

    def test_one_terminal_per_token(self):
        source = "begin x := 1; if x < 2 then y := x end if end"
        _, sink = run(source)
        # every token except EOF is accepted exactly once
        assert len(sink.of_kind("terminal")) == len(Lexer(source).tokenize()) - 1

    def test_terminals_in_source_order(self):
        _, sink = run('begin s := "hi" end')
        assert [(e.name, e.token.value) for e in sink.of_kind("terminal")] == [
            ("begin", "begin"), ("identifier", "s"), (":=", ":="),
            ("stringConstant", "hi"), ("end", "end"),
        ]

    def test_productions_for_assignment(self):
        _, sink = run("begin x := 1 end")
        assert names(sink, "begin") == [
            "StatementPart", "StatementList", "Statement",
            "AssignmentStatement", "Expression", "Term", "Factor",
        ]

    def test_production_names_match_grammar(self):
        _, sink = run(
            "begin a := 1; if a < 2 then call p(a) else a := (a + 1) * 2 end if; "
            "while a < 5 loop a := a + 1 end loop; do a := a - 1 until a = 0; "
            "for (i := 0; i < 2; i := i + 1) do b := i end loop end")
        assert set(names(sink, "begin")) == set(get_grammar_info().productions)

    def test_no_errors_on_valid_program(self):
        _, sink = run("begin x := 1 end")
        assert sink.of_kind("error") == []


class TestIndentedTrace:
    def test_exact_trace_for_single_assignment(self):
        out = io.StringIO()
        analyse_source("begin x := 1 end", IndentedTraceSink(out))
        assert out.getvalue() == (
            "rggBEGIN StatementPart\n"
            "\trggTOKEN begin on line 1\n"
            "\trggBEGIN StatementList\n"
            "\t\trggBEGIN Statement\n"
            "\t\t\trggBEGIN AssignmentStatement\n"
            "\t\t\t\trggTOKEN identifier 'x' on line 1\n"
            "\t\t\t\trggTOKEN := on line 1\n"
            "\t\t\t\trggBEGIN Expression\n"
            "\t\t\t\t\trggBEGIN Term\n"
            "\t\t\t\t\t\trggBEGIN Factor\n"
            "\t\t\t\t\t\t\trggTOKEN numberConstant '1' on line 1\n"
            "\t\t\t\t\t\trggEND Factor\n"
            "\t\t\t\t\trggEND Term\n"
            "\t\t\t\trggEND Expression\n"
            "\t\t\t\trggDECL x NUMBER\n"
            "\t\t\trggEND AssignmentStatement\n"
            "\t\trggEND Statement\n"
            "\trggEND StatementList\n"
            "\trggTOKEN end on line 1\n"
            "rggEND StatementPart\n"
        )

    def test_marker_is_configurable(self):
        out = io.StringIO()
        analyse_source("begin x := 1 end", IndentedTraceSink(out, marker=">> "))
        assert out.getvalue().startswith(">> BEGIN StatementPart\n")

    def test_repeat_analysis_is_identical(self):
        source = "begin for (i := 1; i < 3; i := i + 1) do s := \"a\" end loop end"
        first, second = io.StringIO(), io.StringIO()
        analyse_source(source, IndentedTraceSink(first))
        analyse_source(source, IndentedTraceSink(second))
        assert first.getvalue() == second.getvalue()
        assert "rggREMOVE i NUMBER" in first.getvalue()


# --- Statements ---

class TestStatements:
    def test_scenario_sequential_assignments(self):
        parser, sink = run("begin x:=1; y:=2; z:=x+y; end")
        assert names(sink, "add") == ["x", "y", "z"]
        assert all(e.variable.type == VarType.NUMBER for e in sink.of_kind("add"))
        assert set(parser.scopes.global_scope) == {"x", "y", "z"}

    def test_string_assignment(self):
        parser, _ = run('begin s := "text" end')
        assert parser.scopes.lookup("s").type == VarType.STRING

    def test_identifier_assignment_copies_type(self):
        parser, _ = run('begin s := "text"; t := s end')
        assert parser.scopes.lookup("t").type == VarType.STRING

    def test_number_literal_start_forces_number(self):
        parser, _ = run("begin n := 2 * (3 + 4) end")
        assert parser.scopes.lookup("n").type == VarType.NUMBER

    def test_declaration_records_position(self):
        parser, _ = run("begin\n  total := 1\nend")
        variable = parser.scopes.lookup("total")
        assert (variable.line, variable.col) == (2, 3)

    def test_reassignment_emits_second_add(self):
        parser, sink = run('begin x := 1; x := "s" end')
        assert names(sink, "add") == ["x", "x"]
        assert parser.scopes.lookup("x").type == VarType.STRING

    def test_procedure_call_with_arguments(self):
        _, sink = run("begin a := 1; b := 2; call show(a, b) end")
        assert "ProcedureStatement" in names(sink, "begin")
        assert names(sink, "begin").count("ArgumentList") == 2

    def test_procedure_name_needs_no_declaration(self):
        run("begin a := 1; call undefinedProcedure(a) end")

    def test_trailing_semicolon_before_end(self):
        run("begin x := 1; end")


class TestControlFlow:
    def test_if_then_end_if(self):
        _, sink = run("begin x := 1; if x = 1 then y := 2 end if end")
        assert "IfStatement" in names(sink, "begin")
        assert "Condition" in names(sink, "begin")

    def test_if_else(self):
        parser, _ = run(
            "begin x := 1; if x /= 1 then y := 2 else y := 3 end if end")
        assert parser.scopes.lookup("y").type == VarType.NUMBER

    def test_while_loop(self):
        _, sink = run("begin x := 0; while x < 10 loop x := x + 1 end loop end")
        assert "WhileStatement" in names(sink, "begin")

    def test_do_until(self):
        _, sink = run("begin x := 0; do x := x + 1 until x >= 5 end")
        assert "UntilStatement" in names(sink, "begin")

    def test_condition_against_string_constant(self):
        run('begin s := "a"; while s = "b" loop s := "b" end loop end')

    def test_while_body_declares_globally(self):
        parser, sink = run(
            "begin x := 0; while x < 1 loop y := 1 end loop end")
        assert parser.scopes.lookup("y") is not None
        assert sink.of_kind("remove") == []


class TestForLoops:
    def test_loop_variables_removed_at_end_loop(self):
        parser, sink = run(
            "begin for (i := 1; i < 10; i := i + 1) do x := i end loop end")
        assert names(sink, "remove") == ["i", "x"]
        assert parser.scopes.lookup("i") is None
        assert parser.scopes.lookup("x") is None
        assert parser.scopes.depth == 0

    def test_remove_follows_loop_body(self):
        _, sink = run(
            "begin for (i := 1; i < 2; i := i + 1) do x := i end loop end")
        kinds = [(e.kind, e.name) for e in sink.events]
        end_loop = max(i for i, k in enumerate(kinds) if k == ("terminal", "loop"))
        first_remove = kinds.index(("remove", "i"))
        assert first_remove > end_loop
        assert kinds.index(("end", "ForStatement")) < first_remove

    def test_global_visible_in_loop(self):
        run("begin n := 3; for (i := 1; i < n; i := i + 1) do x := n end loop end")

    def test_nested_loop_lookup_prefers_outer_scope(self):
        # the inner 'i' is STRING but 'k := i + 1' sees the outer NUMBER 'i'
        parser, sink = run(
            "begin\n"
            "for (i := 1; i < 3; i := i + 1) do\n"
            "  for (j := 1; j < 2; j := j + 1) do\n"
            "    i := \"s\";\n"
            "    k := i + 1\n"
            "  end loop\n"
            "end loop\n"
            "end")
        assert names(sink, "remove") == ["j", "i", "k", "i"]
        assert parser.scopes.depth == 0


# --- Entry points ---

class TestEntryPoints:
    def test_analyse_defaults_to_recording_sink(self):
        parser = analyse(Lexer("begin x := 1 end"))
        assert isinstance(parser, Parser)
        assert isinstance(parser.sink, RecordingTraceSink)

    def test_trailing_tokens_rejected(self):
        with pytest.raises(ParseError) as exc:
            analyse_source("begin x := 1 end x")
        assert "after end of program" in exc.value.message

    def test_missing_end_rejected(self):
        with pytest.raises(AnalysisError) as exc:
            analyse_source("begin x := 1")
        assert isinstance(exc.value.root, ParseError)
        assert exc.value.productions == ["StatementPart"]


class TestLongPrograms:
    def test_thousand_statements(self):
        body = "; ".join(f"x{i} := {i}" for i in range(1000))
        parser, sink = run(f"begin {body} end")
        assert len(parser.scopes.global_scope) == 1000
        assert len(sink.of_kind("begin")) == len(sink.of_kind("end"))

    def test_long_additive_chain(self):
        parser, _ = run("begin x := " + " + ".join(["1"] * 600) + " end")
        assert parser.scopes.lookup("x").type == VarType.NUMBER

    def test_recursion_limit_restored(self):
        before = sys.getrecursionlimit()
        run("begin " + "; ".join(f"x{i} := {i}" for i in range(1000)) + " end")
        assert sys.getrecursionlimit() == before

    def test_recursion_limit_restored_after_fault(self):
        before = sys.getrecursionlimit()
        with pytest.raises(AnalysisError):
            analyse_source("begin call foo(x) end")
        assert sys.getrecursionlimit() == before
