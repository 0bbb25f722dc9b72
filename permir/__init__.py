"""HIR and MIR data models, permission checking, validation, scopes, lowering to MIR and pretty printing."""

__version__ = "0.18.1"

__all__ = [
    "hir_types",
    "scope",
    "hir_pretty_print",
    "permission_messages",
    "mir_types",
    "permissions",
    "mir_pretty_print",
    "validation",
    "mir_converter",
]