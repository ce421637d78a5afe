"""
Soulite AST Test Suite
======================

Tests for AST node construction, rendering, and the visitor classes.

Test Organization
-----------------
- TestNodes: Construction, equality and immutability
- TestRendering: Canonical to_text() output
- TestProgram: Program container views
- TestVisitor: ASTVisitor dispatch and ASTPrinter output
"""

import dataclasses

import pytest

from soulite.ast import (
    ASTPrinter,
    ASTVisitor,
    Binary,
    BinaryOperator,
    Call,
    FunctionDef,
    Import,
    Literal,
    LiteralKind,
    Program,
    Prototype,
    VarDecl,
    Variable,
)
from soulite.errors import SourceLocation
from soulite.parser import parse_source


# =============================================================================
# Node Tests
# =============================================================================

class TestNodes:
    """Tests for node construction."""

    def test_location_ignored_in_equality(self):
        """Nodes compare equal regardless of location."""
        here = SourceLocation("a.soul", 1, 1)
        there = SourceLocation("b.soul", 9, 4)
        assert Variable("x", location=here) == Variable("x", location=there)

    def test_sequences_become_tuples(self):
        """Lists passed to constructors are stored as tuples."""
        call = Call("f", [Variable("a")])
        assert call.args == (Variable("a"),)
        assert isinstance(Import("m", [Import("n")]).nested, tuple)

    def test_nodes_are_hashable(self):
        """Frozen nodes with tuple children can be hashed."""
        node = Call("f", [Binary(BinaryOperator.PLUS, Variable("a"), Variable("b"))])
        assert hash(node) == hash(Call("f", (Binary(BinaryOperator.PLUS, Variable("a"), Variable("b")),)))

    def test_nodes_are_immutable(self):
        """Assigning to a field raises."""
        node = Variable("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.name = "y"

    def test_prototype_arity_mismatch(self):
        """A prototype needs one name per type."""
        with pytest.raises(ValueError):
            Prototype("f", ["Int", "Int"], ["a"])

    def test_operator_spellings(self):
        """Binary operators are valued by their source spelling."""
        assert BinaryOperator("<|") is BinaryOperator.SHLX
        assert BinaryOperator.EXP.value == "**"


# =============================================================================
# Rendering Tests
# =============================================================================

class TestRendering:
    """Tests for to_text()."""

    @pytest.mark.parametrize("node,expected", [
        (Literal(LiteralKind.INT, 7), "7"),
        (Literal(LiteralKind.FLOAT, 2.5), "2.5"),
        (Literal(LiteralKind.FLOAT, 5.0), "5.0"),
        (Literal(LiteralKind.STRING, "hi"), '"hi"'),
        (Variable("x"), "x"),
        (Call("f"), "f()"),
        (VarDecl("x"), "let x"),
        (VarDecl("y", True, Literal(LiteralKind.INT, 1)), "let mut y = 1"),
        (Prototype("f"), "f()"),
        (Prototype("g", ["Int"], ["n"]), "g(Int n)"),
        (Import("a", [Import("b")]), "a:b"),
    ])
    def test_to_text(self, node, expected):
        """Each node renders in its canonical form."""
        assert node.to_text() == expected

    def test_nested_binary(self):
        """Every binary node is parenthesized."""
        node = Binary(
            BinaryOperator.PLUS,
            Variable("a"),
            Binary(BinaryOperator.STAR, Variable("b"), Variable("c")),
        )
        assert node.to_text() == "(a + (b * c))"

    def test_function_definition(self):
        """A definition renders its prototype and an indented body."""
        func = FunctionDef(
            Prototype("foo", ["Int", "Int"], ["a", "b"], "Int"),
            Binary(BinaryOperator.PLUS, Variable("a"), Variable("b")),
        )
        assert func.to_text() == "foo(Int a, Int b) -> Int {\n\t(a + b)\n}"

    def test_str_is_to_text(self):
        """str() of a node is its canonical text."""
        assert str(Call("f", [Variable("x")])) == "f(x)"


# =============================================================================
# Program Tests
# =============================================================================

class TestProgram:
    """Tests for the Program container."""

    def test_views(self):
        """imports, functions and expressions partition the units."""
        program = parse_source("$io\n.f| = 1\nf()\n$math")
        assert [i.module_name for i in program.imports] == ["io", "math"]
        assert [f.name for f in program.functions] == ["f"]
        assert [e.body.to_text() for e in program.expressions] == ["f()"]

    def test_location(self):
        """A parsed program is located at the start of its source."""
        program = parse_source("1", filename="main.soul")
        assert str(program.location) == "main.soul:1:1"


# =============================================================================
# Visitor Tests
# =============================================================================

class TestVisitor:
    """Tests for ASTVisitor and ASTPrinter."""

    def test_generic_visit_walks_tree(self):
        """Unhandled nodes are walked so nested calls are found."""

        class CallCounter(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_Call(self, node):
                self.names.append(node.callee)
                self.generic_visit(node)

        program = parse_source(".f| = g(h(1) 2)\nk()")
        counter = CallCounter()
        counter.visit(program)
        assert counter.names == ["g", "h", "k"]

    def test_printer_output(self):
        """ASTPrinter indents two spaces per level."""
        program = parse_source("'x = f(1)")
        assert ASTPrinter().print(program) == "\n".join([
            "Program",
            "  Function: <top-level>",
            "    Prototype: ()",
            "    VarDecl (immutable): x",
            "      Call: f",
            "        Literal (int): 1",
        ])

    def test_printer_definition_and_import(self):
        """Definitions, binaries and imports each get a line."""
        program = parse_source("$math:sqrt\n.sq|Int'x= x * x")
        assert ASTPrinter().print(program) == "\n".join([
            "Program",
            "  Import: math",
            "    Import: sqrt",
            "  Function: sq",
            "    Prototype: sq(Int x)",
            "    Binary: *",
            "      Variable: x",
            "      Variable: x",
        ])

    def test_printer_reusable(self):
        """Printing twice gives the same output."""
        printer = ASTPrinter()
        program = parse_source(",y")
        assert printer.print(program) == printer.print(program)
