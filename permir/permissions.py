"""Permission checking over HIR programs."""

from __future__ import annotations

from contextlib import contextmanager
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
    IntegerLiteral,
    Peak,
    Permission,
    Print,
    Return,
    StringLiteral,
    Variable,
)
from permir.permission_messages import (
    PermissionViolation,
    alias_denied_message,
    is_exclusive,
    peak_denied_message,
    read_denied_message,
    write_denied_message,
)

_SHAREABLE = (Permission.READS, Permission.WRITES)


def _can_read(perms: Sequence[Permission]) -> bool:
    return Permission.READ in perms or Permission.READS in perms


def _can_write(perms: Sequence[Permission]) -> bool:
    return Permission.WRITE in perms or Permission.WRITES in perms


class PermissionChecker:
    """Walks a HIR program and collects permission violations."""

    def __init__(self) -> None:
        self._permissions: dict[str, list[Permission]] = {}
        self._aliases: dict[str, set[str]] = {}
        self._exclusive_access: dict[str, str] = {}
        self._errors: list[PermissionViolation] = []
        self._locations: dict[str, tuple[int, int]] = {}

    # ------------------------------------------------------------ entry points

    def check_program(self, program: HirProgram) -> list[PermissionViolation]:
        """Check every top-level statement and return all violations so far."""
        for stmt in program.statements:
            self.check_statement(stmt)
        return self.errors()

    def check_program_with_source(
        self, program: HirProgram, source: str
    ) -> list[PermissionViolation]:
        """Check a program, using ``source`` to place diagnostics on lines."""
        lines = source.splitlines()
        for stmt in program.statements:
            if isinstance(stmt, HirVariable):
                self._permissions[stmt.name] = list(stmt.permissions)
                for number, line in enumerate(lines, start=1):
                    column = line.find(stmt.name)
                    if column >= 0:
                        self._locations[stmt.name] = (number, column + 1)
                        break
        for stmt in program.statements:
            self.check_statement(stmt)
        return self.errors()

    def errors(self) -> list[PermissionViolation]:
        """All violations found so far."""
        return list(self._errors)

    # -------------------------------------------------------------- statements

    def check_statement(self, stmt: HirStatement) -> None:
        match stmt:
            case HirVariable():
                self._check_variable_declaration(stmt)
            case HirAssignment():
                if self._check_write_permission(stmt.target):
                    self._check_expression(stmt.value)
            case ExpressionStatement():
                self._check_expression(stmt.expr)
            case Return():
                if stmt.value is not None:
                    self._check_expression(stmt.value)
            case Print():
                self._check_expression(stmt.expr)
            case Block():
                with self._scope():
                    for inner in stmt.statements:
                        self.check_statement(inner)
            case HirFunction():
                with self._scope():
                    for param in stmt.parameters:
                        self._register_variable(param.name, param.permissions)
                    for inner in stmt.body:
                        self.check_statement(inner)
            case _:
                pass

    @contextmanager
    def _scope(self) -> Iterator[None]:
        permissions = dict(self._permissions)
        aliases = {name: set(group) for name, group in self._aliases.items()}
        exclusive = dict(self._exclusive_access)
        try:
            yield
        finally:
            self._permissions = permissions
            self._aliases = aliases
            self._exclusive_access = exclusive

    def _register_variable(self, name: str, perms: Sequence[Permission]) -> None:
        self._permissions[name] = list(perms)
        if is_exclusive(perms):
            self._exclusive_access[name] = name
        self._aliases[name] = {name}

    def register_parameter(self, name: str, permissions: Sequence[Permission]) -> None:
        """Bring a function parameter into the current scope."""
        self._register_variable(name, permissions)

    def _check_variable_declaration(self, var: HirVariable) -> None:
        self._register_variable(var.name, var.permissions)
        init = var.initializer
        if init is None:
            return
        self._check_expression(init)
        if isinstance(init, Variable):
            self._check_aliasing(var.name, init.name, var.permissions)

    # ------------------------------------------------------------- expressions

    def _check_expression(self, expr: HirExpression) -> None:
        match expr:
            case IntegerLiteral() | BooleanLiteral() | StringLiteral():
                pass
            case Variable():
                self._check_read_permission(expr.name)
            case Binary():
                self._check_expression(expr.left)
                self._check_expression(expr.right)
            case Call():
                for arg in expr.arguments:
                    self._check_expression(arg)
            case Conditional():
                self._check_expression(expr.condition)
                self._check_expression(expr.then_expr)
                self._check_expression(expr.else_expr)
            case Cast():
                self._check_expression(expr.expr)
            case Peak():
                if isinstance(expr.expr, Variable):
                    self._check_peak_permission(expr.expr.name)
                else:
                    self._check_expression(expr.expr)
            case Clone():
                self._check_expression(expr.expr)

    def check_function_call(
        self, function_name: str, arguments: Sequence[HirExpression]
    ) -> None:
        """Check the permissions of every argument of a call."""
        for arg in arguments:
            self._check_expression(arg)

    # ---------------------------------------------------------------- aliasing

    def _check_aliasing(
        self, target: str, source: str, target_perms: Sequence[Permission]
    ) -> None:
        if not self._aliasing_permission(source):
            return

        if Permission.WRITE in target_perms:
            conflicting = sorted(
                alias
                for alias in self._aliases.get(source, set())
                if alias != target
                and alias in self._permissions
                and Permission.WRITE in self._permissions[alias]
            )
            for existing in conflicting:
                self._report(
                    f"Cannot create write alias to '{source}' - "
                    f"'{existing}' already has write permission"
                )

        source_aliases = set(self._aliases.get(source, set()))
        self._aliases[target] = source_aliases | {target}
        if source in self._aliases:
            self._aliases[source].add(target)
        for alias in source_aliases:
            if alias not in (target, source) and alias in self._aliases:
                self._aliases[alias].add(target)

    def _aliasing_permission(self, source: str) -> bool:
        perms = self._permissions.get(source)
        if perms is None:
            self._report(f"Cannot alias '{source}' - variable not found")
            return False
        shareable = any(p in _SHAREABLE for p in perms)
        if not shareable and _can_read(perms):
            self._report(alias_denied_message(source, perms))
        return shareable

    # -------------------------------------------------------------- parameters

    def check_parameter_compatibility(
        self, var_name: str, param_name: str, param_perms: Sequence[Permission]
    ) -> None:
        """Record errors if ``var_name`` cannot be passed to the given parameter."""
        var_perms = self._permissions.get(var_name)
        if var_perms is None:
            return

        if is_exclusive(param_perms) and not is_exclusive(var_perms):
            self._report(
                f"Cannot pass '{var_name}' to parameter '{param_name}' - "
                "parameter requires exclusive access"
            )
        if _can_read(param_perms) and not _can_read(var_perms):
            self._report(
                f"Cannot pass '{var_name}' to parameter '{param_name}' - "
                "parameter requires read permission"
            )
        if _can_write(param_perms) and not _can_write(var_perms):
            self._report(
                f"Cannot pass '{var_name}' to parameter '{param_name}' - "
                "parameter requires write permission"
            )
        if Permission.WRITE in param_perms and Permission.WRITES not in param_perms:
            if len(self._aliases.get(var_name, ())) > 1:
                self._report(
                    f"Cannot pass aliased variable '{var_name}' to parameter "
                    f"'{param_name}' requiring exclusive write access"
                )

    def check_variable_aliasing_for_function_arg(
        self,
        var_name: str,
        param_permissions: Sequence[Permission],
        function_name: str,
        param_index: int,
    ) -> Optional[PermissionViolation]:
        """Return a violation if the parameter demands exclusive access."""
        if not is_exclusive(param_permissions):
            return None
        return PermissionViolation(
            f"Parameter {param_index + 1} of function '{function_name}' requires "
            "exclusive permission (like Pony's iso), but this cannot be "
            f"guaranteed for '{var_name}'"
        )

    # ------------------------------------------------------------ access checks

    def _line_of(self, name: str) -> Optional[int]:
        location = self._locations.get(name)
        return None if location is None else location[0]

    def _check_write_permission(self, target: str) -> bool:
        perms = self._permissions.get(target)
        if perms is None:
            self._report(f"Cannot write to '{target}' - variable not found")
            return False
        if not _can_write(perms):
            self._report(write_denied_message(target, perms, self._line_of(target)))
            return False
        return True

    def _check_read_permission(self, target: str) -> bool:
        perms = self._permissions.get(target)
        if perms is None:
            self._report(f"Cannot read from '{target}' - variable not found")
            return False
        if not _can_read(perms):
            self._report(read_denied_message(target, perms, self._line_of(target)))
            return False
        return True

    def _check_peak_permission(self, target: str) -> bool:
        perms = self._permissions.get(target)
        if perms is None:
            self._report(f"Cannot peak '{target}' - variable not found")
            return False
        if not _can_read(perms):
            self._report(peak_denied_message(target, perms, self._line_of(target)))
            return False
        return True

    def _report(self, message: str) -> None:
        self._errors.append(PermissionViolation(message))


def check_permissions(program: HirProgram) -> list[PermissionViolation]:
    """Check a program's permissions with a fresh checker."""
    return PermissionChecker().check_program(program)


def check_permissions_with_source(
    program: HirProgram, source: str
) -> list[PermissionViolation]:
    """Check a program's permissions, placing diagnostics using ``source``."""
    return PermissionChecker().check_program_with_source(program, source)