"""Permission violations and the diagnostic text that describes them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Optional

from permir.hir_types import Permission


@dataclass(frozen=True)
class PermissionViolation:
    """A permission problem found while checking a program."""

    message: str
    location: Optional[tuple[int, int]] = None

    def __str__(self) -> str:
        return self.message


def is_exclusive(perms: Collection[Permission]) -> bool:
    """True when the permissions grant exclusive access: read and write, nothing shared."""
    return (
        Permission.READ in perms
        and Permission.WRITE in perms
        and Permission.READS not in perms
        and Permission.WRITES not in perms
    )


def _located(line: int, summary: str) -> str:
    return f"{line} | x = y\n    ~ -> {summary}"


def write_denied_message(
    target: str, perms: Collection[Permission], line: Optional[int] = None
) -> str:
    """Describe a write to ``target``, which lacks write permission."""
    summary = f"Cannot write to '{target}' - no write permission"
    if line is not None:
        if Permission.READS in perms:
            hint = f"reads write {target}"
        elif Permission.READ in perms:
            hint = f"read write {target}"
        else:
            hint = f"write {target}"
        return f"{_located(line, summary)}\nsuggestion: {hint} -> add write permission"

    if Permission.READS in perms:
        hint = f"reads write {target}: Int = ...\n      ~~~~~"
    elif Permission.READ in perms:
        hint = f"read write {target}: Int = ...\n     ~~~~~"
    else:
        hint = f"write {target}: Int = ...\n~~~~~"
    return f"{summary}\n\nSuggestion:\n{hint} -> add write permission here"


def read_denied_message(
    target: str, perms: Collection[Permission], line: Optional[int] = None
) -> str:
    """Describe a read of ``target``, which lacks read permission."""
    summary = f"Cannot read from '{target}' - no read permission"
    if line is not None:
        if Permission.WRITES in perms:
            hint = f"reads writes {target} -> add reads permission"
        elif Permission.WRITE in perms:
            hint = f"read write {target} -> add read permission"
        else:
            hint = f"read {target} -> add read permission"
        return f"{_located(line, summary)}\nsuggestion: {hint}"

    if Permission.WRITES in perms:
        hint = f"reads writes {target}: Int = ...\n~~~~~ -> add reads permission here"
    elif Permission.WRITE in perms:
        hint = f"read write {target}: Int = ...\n~~~~ -> add read permission here"
    else:
        hint = f"read {target}: Int = ...\n~~~~ -> add read permission here"
    return f"{summary}\n\nSuggestion:\n{hint}"


def peak_denied_message(
    target: str, perms: Collection[Permission], line: Optional[int] = None
) -> str:
    """Describe a peak at ``target``, which lacks read permission."""
    summary = f"Cannot peak '{target}' - peak requires read permission"
    if line is not None:
        if Permission.WRITE in perms:
            hint = f"read write {target} -> add read permission"
        elif Permission.WRITES in perms:
            hint = f"reads writes {target} -> add reads permission"
        else:
            hint = f"read {target} -> add read permission"
        return f"{_located(line, summary)}\nsuggestion: {hint}"

    if Permission.WRITE in perms:
        hint = f"read write {target}: Int = ...\n~~~~ -> add read permission here"
    elif Permission.WRITES in perms:
        hint = f"reads writes {target}: Int = ...\n~~~~~ -> add reads permission here"
    else:
        hint = f"read {target}: Int = ...\n~~~~ -> add read permission here"
    return f"{summary}\n\nSuggestion:\n{hint}"


def alias_denied_message(source: str, perms: Collection[Permission]) -> str:
    """Describe an attempt to alias ``source``, whose permissions are not shareable."""
    message = f"Cannot create alias to '{source}' - variable has non-shareable permissions"
    if Permission.READ in perms and Permission.WRITE in perms:
        message += (
            f"\nsuggestion: reads writes {source} -> use shareable permissions "
            "instead of read write"
        )
    elif Permission.READ in perms:
        message += f"\nsuggestion: reads {source} -> use reads instead of read"
    elif Permission.WRITE in perms:
        message += f"\nsuggestion: writes {source} -> use writes instead of write"
    return message