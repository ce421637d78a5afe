"""
Soulite Abstract Syntax Tree (AST) Definitions
==============================================

This module defines the AST node types built by the Soulite parser.

Node Hierarchy
--------------
ASTNode (base)
├── Program - ordered top-level units of one source file
├── Top-level units
│   ├── Import - module path ($math:sqrt)
│   ├── Prototype - function signature
│   └── FunctionDef - prototype plus body expression
└── Expressions
    ├── Literal - int, float or string constant
    ├── Variable - variable reference
    ├── Binary - binary operator application
    ├── Call - function call
    └── VarDecl - variable declaration ('x = 1, ,y)

Design Notes
------------
- All nodes are frozen dataclasses; sequences are stored as tuples
- The AST is a strict tree: each node owns its children exclusively
- ``location`` is keyword-only and excluded from equality, so nodes built
  by hand compare equal to parsed ones
- ``to_text()`` gives the canonical rendering used by diagnostics and
  golden-output tests, e.g. ``(a + (b * c))``
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from soulite.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node starts (if known)
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )

    def to_text(self) -> str:
        """Render this node in its canonical textual form."""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_text()


@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for nodes that produce a value."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

class LiteralKind(Enum):
    """Kinds of literal constants."""
    INT = "int"
    FLOAT = "float"
    STRING = "string"


class BinaryOperator(Enum):
    """Binary operators, valued by their source spelling."""
    ASSIGN = "="
    RANGE = ".."
    AND = "&&"
    OR = "||"
    BIT_AND = "&"
    BIT_OR = "|"
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    EQ = "=="
    NE = "!="
    SHL = "<<"
    SHR = ">>"
    SHLX = "<|"
    SHRX = "|>"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    EXP = "**"
    DOT = "."


@dataclass(frozen=True)
class Literal(Expression):
    """
    Literal constant.

    Attributes:
        kind: INT, FLOAT or STRING
        value: The Python value (int, float or str)
    """
    kind: LiteralKind
    value: Union[int, float, str]

    def to_text(self) -> str:
        if self.kind == LiteralKind.STRING:
            return f'"{self.value}"'
        if self.kind == LiteralKind.FLOAT:
            return repr(float(self.value))
        return str(self.value)


@dataclass(frozen=True)
class Variable(Expression):
    """Variable reference."""
    name: str

    def to_text(self) -> str:
        return self.name


@dataclass(frozen=True)
class Binary(Expression):
    """
    Binary operation ``lhs op rhs``.

    Attributes:
        op: The binary operator
        lhs: Left operand
        rhs: Right operand
    """
    op: BinaryOperator
    lhs: Expression
    rhs: Expression

    def to_text(self) -> str:
        return f"({self.lhs.to_text()} {self.op.value} {self.rhs.to_text()})"


@dataclass(frozen=True)
class Call(Expression):
    """
    Function call.

    Arguments are written without separators in source and rendered
    space-separated: ``max(a b)``.

    Attributes:
        callee: Name of the called function
        args: Argument expressions in order
    """
    callee: str
    args: tuple[Expression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    def to_text(self) -> str:
        return f"{self.callee}({' '.join(arg.to_text() for arg in self.args)})"


@dataclass(frozen=True)
class VarDecl(Expression):
    """
    Variable declaration.

    ``'x = 5`` declares an immutable binding, ``,x = 5`` a mutable one.
    The initializer is optional.

    Attributes:
        name: Variable name
        mutable: True for ',' declarations
        initializer: Initial value expression, or None
    """
    name: str
    mutable: bool = False
    initializer: Optional[Expression] = None

    def to_text(self) -> str:
        text = f"let mut {self.name}" if self.mutable else f"let {self.name}"
        if self.initializer is not None:
            text += f" = {self.initializer.to_text()}"
        return text


# =============================================================================
# Top-Level Nodes
# =============================================================================

@dataclass(frozen=True)
class Prototype(ASTNode):
    """
    Function signature.

    Source form: ``name|Int Int -> Int'a,b=``

    Attributes:
        name: Function name ("" for a wrapped top-level expression)
        arg_types: Parameter type names in order
        arg_names: Parameter names, one per type
        return_type: Return type name, or None
    """
    name: str
    arg_types: tuple[str, ...] = ()
    arg_names: tuple[str, ...] = ()
    return_type: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "arg_types", tuple(self.arg_types))
        object.__setattr__(self, "arg_names", tuple(self.arg_names))
        if len(self.arg_types) != len(self.arg_names):
            raise ValueError(
                f"prototype '{self.name}' has {len(self.arg_types)} types "
                f"but {len(self.arg_names)} names"
            )

    def to_text(self) -> str:
        params = ", ".join(
            f"{arg_type} {arg_name}"
            for arg_type, arg_name in zip(self.arg_types, self.arg_names)
        )
        text = f"{self.name}({params})"
        if self.return_type is not None:
            text += f" -> {self.return_type}"
        return text


@dataclass(frozen=True)
class FunctionDef(ASTNode):
    """
    Function definition: a prototype and a single body expression.

    Top-level expressions are wrapped in a FunctionDef whose prototype has
    an empty name and no parameters.
    """
    prototype: Prototype
    body: Expression

    @property
    def name(self) -> str:
        return self.prototype.name

    @property
    def is_anonymous(self) -> bool:
        """True for a wrapped top-level expression."""
        return self.prototype.name == ""

    def to_text(self) -> str:
        return f"{self.prototype.to_text()} {{\n\t{self.body.to_text()}\n}}"


@dataclass(frozen=True)
class Import(ASTNode):
    """
    Import path.

    ``$math:sqrt`` is ``Import("math", (Import("sqrt"),))``.

    Attributes:
        module_name: First path component
        nested: Imports below this one
    """
    module_name: str
    nested: tuple["Import", ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "nested", tuple(self.nested))

    def to_text(self) -> str:
        text = self.module_name
        for child in self.nested:
            text += ":" + child.to_text()
        return text


TopLevelUnit = Union[Import, FunctionDef]


@dataclass(frozen=True)
class Program(ASTNode):
    """
    All top-level units parsed from one source, in source order.

    Attributes:
        units: Imports and function definitions
    """
    units: tuple[TopLevelUnit, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "units", tuple(self.units))

    @property
    def imports(self) -> list[Import]:
        return [unit for unit in self.units if isinstance(unit, Import)]

    @property
    def functions(self) -> list[FunctionDef]:
        """Named function definitions."""
        return [
            unit for unit in self.units
            if isinstance(unit, FunctionDef) and not unit.is_anonymous
        ]

    @property
    def expressions(self) -> list[FunctionDef]:
        """Wrapped top-level expressions."""
        return [
            unit for unit in self.units
            if isinstance(unit, FunctionDef) and unit.is_anonymous
        ]

    def to_text(self) -> str:
        return "\n".join(unit.to_text() for unit in self.units)


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; everything else falls back to generic_visit, which walks the
    node's children.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.count = 0

            def visit_Call(self, node):
                self.count += 1
                self.generic_visit(node)
    """

    def visit(self, node: ASTNode):
        """Dispatch to visit_<ClassName>, or generic_visit."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit every child node."""
        for value in node.__dict__.values():
            if isinstance(value, ASTNode):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Indented tree dump of an AST, for debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _children(self, *nodes: Optional[ASTNode]) -> None:
        self.indent_level += 1
        for node in nodes:
            if node is not None:
                self.visit(node)
        self.indent_level -= 1

    def visit_Program(self, node: Program):
        self._emit("Program")
        self._children(*node.units)

    def visit_Import(self, node: Import):
        self._emit(f"Import: {node.module_name}")
        self._children(*node.nested)

    def visit_FunctionDef(self, node: FunctionDef):
        label = "<top-level>" if node.is_anonymous else node.name
        self._emit(f"Function: {label}")
        self._children(node.prototype, node.body)

    def visit_Prototype(self, node: Prototype):
        self._emit(f"Prototype: {node.to_text()}")

    def visit_Literal(self, node: Literal):
        self._emit(f"Literal ({node.kind.value}): {node.to_text()}")

    def visit_Variable(self, node: Variable):
        self._emit(f"Variable: {node.name}")

    def visit_Binary(self, node: Binary):
        self._emit(f"Binary: {node.op.value}")
        self._children(node.lhs, node.rhs)

    def visit_Call(self, node: Call):
        self._emit(f"Call: {node.callee}")
        self._children(*node.args)

    def visit_VarDecl(self, node: VarDecl):
        kind = "mutable" if node.mutable else "immutable"
        self._emit(f"VarDecl ({kind}): {node.name}")
        self._children(node.initializer)
