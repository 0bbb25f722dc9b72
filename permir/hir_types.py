"""Data types of the high-level intermediate representation (HIR)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union


class Permission(Enum):
    """Access permissions a binding may carry."""

    READ = "read"
    WRITE = "write"
    READS = "reads"
    WRITES = "writes"


class Type(Enum):
    """Value types known to the compiler."""

    INT = "Int"
    FLOAT = "Float"
    BOOL = "Bool"
    STRING = "String"

    def __str__(self) -> str:
        return self.value


class TokenType(Enum):
    """Operator tokens that may appear in binary expressions."""

    PLUS = "Plus"
    MINUS = "Minus"
    STAR = "Star"
    SLASH = "Slash"
    PERCENT = "Percent"
    EQUAL_EQUAL = "EqualEqual"
    BANG_EQUAL = "BangEqual"
    LESS = "Less"
    LESS_EQUAL = "LessEqual"
    GREATER = "Greater"
    GREATER_EQUAL = "GreaterEqual"
    AND = "And"
    OR = "Or"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TextPosition:
    """A position in a source file."""

    line: int
    column: int
    offset: int = 0


@dataclass(frozen=True)
class SourceLocation:
    """A span in a source file."""

    file_id: int
    start: TextPosition
    end: TextPosition


@dataclass
class TypeInfo:
    """Type information collected while building the HIR."""

    variables: dict[str, Type] = field(default_factory=dict)
    functions: dict[str, Optional[Type]] = field(default_factory=dict)


# ---------------------------------------------------------------- expressions


@dataclass(frozen=True)
class IntegerLiteral:
    value: int
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Variable:
    name: str
    typ: Type
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Binary:
    left: HirExpression
    operator: TokenType
    right: HirExpression
    result_type: Type


@dataclass(frozen=True)
class Call:
    function: str
    arguments: Sequence[HirExpression]
    result_type: Type

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))


@dataclass(frozen=True)
class Peak:
    """Borrow a value without copying it."""

    expr: HirExpression


@dataclass(frozen=True)
class Clone:
    """Make a copy of a value."""

    expr: HirExpression


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class Conditional:
    condition: HirExpression
    then_expr: HirExpression
    else_expr: HirExpression
    result_type: Type


@dataclass(frozen=True)
class Cast:
    expr: HirExpression
    target_type: Type


HirExpression = Union[
    IntegerLiteral,
    Variable,
    Binary,
    Call,
    Peak,
    Clone,
    BooleanLiteral,
    StringLiteral,
    Conditional,
    Cast,
]


# ----------------------------------------------------------------- statements


@dataclass
class HirVariable:
    """A variable declaration."""

    name: str
    typ: Type
    permissions: list[Permission] = field(default_factory=list)
    initializer: Optional[HirExpression] = None
    location: Optional[SourceLocation] = None


@dataclass
class HirAssignment:
    target: str
    value: HirExpression


@dataclass
class HirParameter:
    name: str
    typ: Type
    permissions: list[Permission] = field(default_factory=list)


@dataclass
class HirFunction:
    name: str
    parameters: list[HirParameter] = field(default_factory=list)
    body: list[HirStatement] = field(default_factory=list)
    return_type: Optional[Type] = None


@dataclass
class Return:
    value: Optional[HirExpression] = None


@dataclass
class Print:
    expr: HirExpression


@dataclass
class ExpressionStatement:
    expr: HirExpression


@dataclass
class Block:
    statements: list[HirStatement] = field(default_factory=list)


@dataclass
class If:
    condition: HirExpression
    then_branch: HirStatement
    else_branch: Optional[HirStatement] = None


@dataclass
class While:
    condition: HirExpression
    body: HirStatement


HirStatement = Union[
    HirVariable,
    HirAssignment,
    HirFunction,
    Return,
    Print,
    ExpressionStatement,
    Block,
    If,
    While,
]


@dataclass
class HirProgram:
    """A complete HIR program."""

    statements: list[HirStatement] = field(default_factory=list)
    type_info: TypeInfo = field(default_factory=TypeInfo)

    def add_statement(self, stmt: HirStatement) -> None:
        """Append a top-level statement."""
        self.statements.append(stmt)