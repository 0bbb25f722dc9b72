"""Validation of HIR programs: undeclared names and type compatibility."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from permir.hir_types import (
    Binary,
    Block,
    BooleanLiteral,
    Call,
    Cast,
    Clone,
    Conditional,
    ExpressionStatement,
    HirAssignment,
    HirExpression,
    HirFunction,
    HirProgram,
    HirStatement,
    HirVariable,
    IntegerLiteral,
    Peak,
    Print,
    Return,
    StringLiteral,
    Type,
    Variable,
)
from permir.scope import ScopeLocation


@dataclass(frozen=True)
class ValidationError:
    """Base class of the problems validation can report."""

    def format(self, source_code: Optional[str] = None) -> str:
        """Render the error for display; only type mismatches have a rendering."""
        return ""


@dataclass(frozen=True)
class UndefinedVariable(ValidationError):
    name: str
    context: str

    def __str__(self) -> str:
        return f"Undefined variable '{self.name}' in {self.context}"


@dataclass(frozen=True)
class PermissionProblem(ValidationError):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OtherValidationError(ValidationError):
    message: str

    def __str__(self) -> str:
        return self.message


_SUGGESTIONS = {
    (Type.INT, Type.BOOL): (
        "Convert the boolean to an integer with a cast, e.g., 'Int(bool_val)' "
        "or use a different variable of integer type."
    ),
    (Type.BOOL, Type.INT): (
        "Convert the integer to a boolean with a comparison, e.g., 'int_val != 0' "
        "or use a different variable of boolean type."
    ),
    (Type.FLOAT, Type.INT): "Convert the integer to a float with a cast, e.g., 'Float(int_val)'.",
    (Type.INT, Type.FLOAT): "Convert the float to an integer with a cast, e.g., 'Int(float_val)'.",
}


def _token_length(line_content: str, column: int) -> int:
    if column > len(line_content):
        return 1
    remainder = line_content[max(column - 1, 0):]
    end = next(
        (i for i, c in enumerate(remainder) if not (c.isalnum() or c == "_")),
        len(remainder),
    )
    return max(end, 1)


@dataclass(frozen=True)
class TypeMismatch(ValidationError):
    expected: Type
    actual: Type
    context: str
    location: Optional[ScopeLocation] = None

    def __str__(self) -> str:
        return f"Type mismatch: expected {self.expected}, found {self.actual} in {self.context}"

    def format(self, source_code: Optional[str] = None) -> str:
        """Render the mismatch with source context and a suggestion."""
        parts = [
            f"Type mismatch error: expected {self.expected}, found {self.actual}\n",
            f"In {self.context}\n",
        ]
        if self.location is not None and source_code is not None:
            parts.append(self._located_excerpt(self.location, source_code))
        elif source_code is not None:
            parts.append(self._guessed_excerpt(source_code))

        parts.append("\nSuggestion: ")
        parts.append(
            _SUGGESTIONS.get(
                (self.expected, self.actual),
                f"Make sure the types match. You cannot assign a value of type "
                f"'{self.actual}' to a variable of type '{self.expected}'.",
            )
        )
        return "".join(parts)

    @staticmethod
    def _located_excerpt(loc: ScopeLocation, source: str) -> str:
        text = f" --> {loc.file}:{loc.line}:{loc.column}\n"
        lines = source.splitlines()
        if 0 < loc.line <= len(lines):
            line_content = lines[loc.line - 1].lstrip()
            underline = "~" * _token_length(line_content, loc.column)
            text += f"   |\n{loc.line} | {line_content}\n"
            text += f"   | {' ' * max(loc.column - 1, 0)}{underline}\n"
        return text

    def _guessed_excerpt(self, source: str) -> str:
        if (
            "assignment to variable" not in self.context
            and "initialization of variable" not in self.context
        ):
            return ""
        pieces = self.context.split("'")
        var_name = pieces[1] if len(pieces) > 1 else ""
        if not var_name:
            return ""
        for line_num, line in enumerate(source.splitlines(), start=1):
            if var_name in line:
                col = line.find(var_name) + 1
                return (
                    f" --> input:{line_num}:{col}\n"
                    f"   |\n{line_num} | {line.lstrip()}\n"
                    f"   | {' ' * (col - 1)}{'~' * len(var_name)}\n"
                )
        return ""


class ValidationFailed(Exception):
    """Raised when validation finds one or more problems."""

    def __init__(self, errors: list[ValidationError]) -> None:
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = list(errors)


def validate_hir_with_source(program: HirProgram, source: str) -> None:
    """Validate a program; raise ValidationFailed carrying every problem found."""
    errors = _undeclared_variable_errors(program)
    errors.extend(_type_errors(program, source))
    if errors:
        raise ValidationFailed(errors)


def check_undeclared_variables(program: HirProgram) -> None:
    """Raise ValidationFailed if a top-level statement uses an undeclared name."""
    errors = _undeclared_variable_errors(program)
    if errors:
        raise ValidationFailed(errors)


def _undeclared_variable_errors(program: HirProgram) -> list[ValidationError]:
    declared: set[str] = set()
    for stmt in program.statements:
        if isinstance(stmt, HirVariable):
            declared.add(stmt.name)
        elif isinstance(stmt, HirFunction):
            declared.update(param.name for param in stmt.parameters)

    errors: list[ValidationError] = []
    for stmt in program.statements:
        match stmt:
            case HirAssignment():
                if stmt.target not in declared:
                    errors.append(UndefinedVariable(stmt.target, "assignment target"))
                _collect_undeclared(stmt.value, declared, errors)
            case ExpressionStatement() | Print():
                _collect_undeclared(stmt.expr, declared, errors)
            case Return():
                if stmt.value is not None:
                    _collect_undeclared(stmt.value, declared, errors)
            case _:
                pass
    return errors


def _collect_undeclared(
    expr: HirExpression, declared: set[str], errors: list[ValidationError]
) -> None:
    match expr:
        case Variable():
            if expr.name not in declared:
                errors.append(UndefinedVariable(expr.name, "variable reference"))
        case Binary():
            _collect_undeclared(expr.left, declared, errors)
            _collect_undeclared(expr.right, declared, errors)
        case Call():
            for arg in expr.arguments:
                _collect_undeclared(arg, declared, errors)
        case Conditional():
            _collect_undeclared(expr.condition, declared, errors)
            _collect_undeclared(expr.then_expr, declared, errors)
            _collect_undeclared(expr.else_expr, declared, errors)
        case Cast() | Peak() | Clone():
            _collect_undeclared(expr.expr, declared, errors)
        case _:
            pass


def _type_errors(program: HirProgram, source: str) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for stmt in program.statements:
        _check_statement_types(stmt, program, source, errors)
    return errors


def _variable_location(expr: HirExpression) -> Optional[ScopeLocation]:
    if isinstance(expr, Variable) and expr.location is not None:
        return ScopeLocation.from_types_location(expr.location)
    return None


def _check_statement_types(
    stmt: HirStatement, program: HirProgram, source: str, errors: list[ValidationError]
) -> None:
    match stmt:
        case HirVariable():
            if stmt.initializer is None:
                return
            init_type = infer_expr_type(stmt.initializer, program)
            if init_type != stmt.typ:
                errors.append(
                    TypeMismatch(
                        expected=stmt.typ,
                        actual=init_type,
                        context=f"initialization of variable '{stmt.name}'",
                        location=_variable_location(stmt.initializer),
                    )
                )
        case HirAssignment():
            target_type = program.type_info.variables.get(stmt.target)
            if target_type is None:
                return
            value_type = infer_expr_type(stmt.value, program)
            if value_type != target_type:
                errors.append(
                    TypeMismatch(
                        expected=target_type,
                        actual=value_type,
                        context=f"assignment to variable '{stmt.target}'",
                        location=_variable_location(stmt.value),
                    )
                )
        case Return():
            if stmt.value is None:
                return
            # Only the first function of the program is considered.
            func = next(
                (s for s in program.statements if isinstance(s, HirFunction)), None
            )
            if func is None or func.return_type is None:
                return
            expr_type = infer_expr_type(stmt.value, program)
            if expr_type != func.return_type:
                errors.append(
                    TypeMismatch(
                        expected=func.return_type,
                        actual=expr_type,
                        context=f"return value in function '{func.name}'",
                    )
                )
        case HirFunction():
            for inner in stmt.body:
                _check_statement_types(inner, program, source, errors)
        case Block():
            for inner in stmt.statements:
                _check_statement_types(inner, program, source, errors)
        case _:
            pass


def infer_expr_type(expr: HirExpression, program: HirProgram) -> Type:
    """Infer the type of an expression using the program's type information."""
    match expr:
        case IntegerLiteral():
            return Type.INT
        case BooleanLiteral():
            return Type.BOOL
        case StringLiteral():
            return Type.STRING
        case Variable():
            return program.type_info.variables.get(expr.name, expr.typ)
        case Binary() | Conditional():
            return expr.result_type
        case Call():
            declared = program.type_info.functions.get(expr.function)
            return declared if declared is not None else expr.result_type
        case Peak() | Clone():
            return infer_expr_type(expr.expr, program)
        case Cast():
            return expr.target_type
        case _:
            raise TypeError(f"not a HIR expression: {expr!r}")