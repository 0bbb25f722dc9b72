"""Scope tracking and symbol management for the HIR."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from permir.hir_types import Permission, SourceLocation, TextPosition, Type


@dataclass
class ScopeLocation:
    """A line/column location in a named source file (both 1-based)."""

    line: int
    column: int
    file: str

    def to_types_location(self) -> SourceLocation:
        """Convert to a span whose start and end are this position."""
        start = TextPosition(line=self.line, column=self.column, offset=0)
        return SourceLocation(file_id=0, start=start, end=start)

    @classmethod
    def from_types_location(cls, loc: SourceLocation) -> ScopeLocation:
        """Build from the start of a span."""
        return cls(line=loc.start.line, column=loc.start.column, file=f"file_{loc.file_id}")

    @classmethod
    def with_position(cls, line: int, column: int, file: str) -> ScopeLocation:
        """Build from explicit position information."""
        return cls(line=line, column=column, file=file)

    @classmethod
    def from_source_position(cls, source: str, pos: int) -> ScopeLocation:
        """Compute line and column of offset ``pos`` within ``source``."""
        prefix = source[: min(pos, len(source))]
        line = prefix.count("\n") + 1
        line_start = prefix.rfind("\n") + 1
        return cls(line=line, column=pos - line_start + 1, file="input")


@dataclass
class Symbol:
    """An entry in the symbol table."""

    name: str
    typ: Type
    permissions: list[Permission] = field(default_factory=list)
    is_function: bool = False
    location: Optional[ScopeLocation] = None


class ScopeError(Exception):
    """Base class for scope and name-resolution problems."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class NotFound(ScopeError):
    """A symbol is not defined in any scope."""

    def __init__(self, name: str, location: Optional[ScopeLocation] = None) -> None:
        super().__init__(name, f"Cannot find '{name}' in this scope")
        self.location = location


class AlreadyDefined(ScopeError):
    """A symbol is already defined in the current scope."""

    def __init__(self, name: str, previous: Optional[ScopeLocation] = None) -> None:
        super().__init__(name, f"'{name}' is already defined in this scope")
        self.previous = previous


class Shadowing(ScopeError):
    """A symbol shadows an earlier definition; the new symbol is still added."""

    def __init__(self, name: str, previous: Optional[ScopeLocation] = None) -> None:
        super().__init__(name, f"'{name}' shadows a previous definition")
        self.previous = previous


class SymbolTable:
    """A stack of scopes, innermost last, always holding the global scope."""

    def __init__(self) -> None:
        self._scopes: list[dict[str, Symbol]] = [{}]
        self._used_names: set[str] = set()

    def enter_scope(self) -> None:
        self._scopes.append({})

    def exit_scope(self) -> None:
        """Leave the innermost scope; the global scope is never removed."""
        if len(self._scopes) > 1:
            self._scopes.pop()

    def add_symbol(self, symbol: Symbol) -> None:
        """Add a symbol to the current scope.

        Raises AlreadyDefined if the name exists in the current scope. Raises
        Shadowing, after adding the symbol, if a nested scope reuses a name.
        """
        name = symbol.name
        is_shadowing = len(self._scopes) > 1 and name in self._used_names
        previous = None
        if is_shadowing:
            previous = next(
                (scope[name].location for scope in self._scopes[:-1] if name in scope),
                None,
            )

        current = self._scopes[-1]
        if name in current:
            raise AlreadyDefined(name, current[name].location)

        current[name] = symbol
        self._used_names.add(name)

        if is_shadowing:
            raise Shadowing(name, previous)

    def lookup(self, name: str) -> Optional[Symbol]:
        """Find a symbol, searching from the innermost scope outwards."""
        return next(
            (scope[name] for scope in reversed(self._scopes) if name in scope),
            None,
        )

    def lookup_in_current_scope(self, name: str) -> Optional[Symbol]:
        return self._scopes[-1].get(name)

    def current_scope_symbols(self) -> list[Symbol]:
        return list(self._scopes[-1].values())

    def scope_depth(self) -> int:
        """Current nesting depth; 0 is the global scope."""
        return len(self._scopes) - 1