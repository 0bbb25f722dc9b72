"""Human-readable rendering of HIR programs."""

from __future__ import annotations

from typing import Iterator, Optional, Sequence

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
    If,
    IntegerLiteral,
    Peak,
    Permission,
    Print,
    Return,
    StringLiteral,
    Type,
    Variable,
    While,
)

_INDENT = "  "


def pretty_print(program: HirProgram) -> str:
    """Render a HIR program, followed by its type information, as text."""
    lines = [f"HIR Program with {len(program.statements)} statements"]
    for stmt in program.statements:
        lines.extend(_statement_lines(stmt, 0))

    info = program.type_info
    lines.append("")
    lines.append("Type Information:")
    lines.append(f"  Variables: {len(info.variables)} entries")
    lines.extend(f"    {name}: {typ.value}" for name, typ in info.variables.items())
    lines.append(f"  Functions: {len(info.functions)} entries")
    lines.extend(
        f"    {name}() -> {_optional_type(ret)}" for name, ret in info.functions.items()
    )
    return "\n".join(lines) + "\n"


def _optional_type(typ: Optional[Type]) -> str:
    return "None" if typ is None else f"Some({typ.value})"


def _permissions(perms: Sequence[Permission]) -> str:
    return ", ".join(p.value for p in perms)


def _statement_lines(stmt: HirStatement, indent: int) -> Iterator[str]:
    pad = _INDENT * indent
    match stmt:
        case HirVariable():
            yield f"{pad}var {stmt.name} : {stmt.typ.value} [{_permissions(stmt.permissions)}]"
            if stmt.initializer is not None:
                yield f"{pad}{_INDENT}= {_expression(stmt.initializer)}"
        case HirAssignment():
            yield f"{pad}{stmt.target} = {_expression(stmt.value)}"
        case HirFunction():
            yield f"{pad}{_function_header(stmt)} {{"
            for body_stmt in stmt.body:
                yield from _statement_lines(body_stmt, indent + 1)
            yield f"{pad}}}"
        case Return():
            if stmt.value is None:
                yield f"{pad}return"
            else:
                yield f"{pad}return {_expression(stmt.value)}"
        case Print():
            yield f"{pad}print {_expression(stmt.expr)}"
        case ExpressionStatement():
            yield f"{pad}{_expression(stmt.expr)}"
        case Block():
            yield f"{pad}{{"
            for inner in stmt.statements:
                yield from _statement_lines(inner, indent + 1)
            yield f"{pad}}}"
        case If():
            yield f"{pad}if {_expression(stmt.condition)}"
            yield from _statement_lines(stmt.then_branch, indent + 1)
            if stmt.else_branch is not None:
                yield f"{pad}else"
                yield from _statement_lines(stmt.else_branch, indent + 1)
        case While():
            yield f"{pad}while {_expression(stmt.condition)}"
            yield from _statement_lines(stmt.body, indent + 1)
        case _:
            raise TypeError(f"not a HIR statement: {stmt!r}")


def _function_header(func: HirFunction) -> str:
    params = ", ".join(
        f"{p.name}: {p.typ.value} [{_permissions(p.permissions)}]" for p in func.parameters
    )
    header = f"fn {func.name}({params})"
    if func.return_type is not None:
        header += f" -> {func.return_type.value}"
    return header


def _expression(expr: HirExpression) -> str:
    match expr:
        case IntegerLiteral():
            return str(expr.value)
        case BooleanLiteral():
            return "true" if expr.value else "false"
        case StringLiteral():
            return f'"{expr.value}"'
        case Variable():
            return f"{expr.name}: {expr.typ.value}"
        case Binary():
            return (
                f"({_expression(expr.left)} {expr.operator.value} "
                f"{_expression(expr.right)}): {expr.result_type.value}"
            )
        case Call():
            args = ", ".join(_expression(a) for a in expr.arguments)
            return f"{expr.function}({args}): {expr.result_type.value}"
        case Cast():
            return f"cast<{expr.target_type.value}>({_expression(expr.expr)})"
        case Peak():
            return f"peak {_expression(expr.expr)}"
        case Clone():
            return f"clone {_expression(expr.expr)}"
        case Conditional():
            return (
                f"(if {_expression(expr.condition)} then {_expression(expr.then_expr)} "
                f"else {_expression(expr.else_expr)}): {expr.result_type.value}"
            )
        case _:
            raise TypeError(f"not a HIR expression: {expr!r}")