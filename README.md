# permir

`permir` is the middle end of a compiler for a small language whose variables
carry access permissions (`read`, `write`, `reads`, `writes`). It works on a
high-level intermediate representation (HIR), checks it, and lowers it to a
mid-level representation (MIR) made of basic blocks and simple instructions.
It has no dependencies outside the standard library.

## Modules

- `permir.hir_types` – the HIR data model. Enums `Permission`, `Type` and
  `TokenType`; `TextPosition`, `SourceLocation` and `TypeInfo`; `HirProgram`
  (with `add_statement`); statements `HirVariable`, `HirAssignment`,
  `HirFunction` (with `HirParameter`), `Return`, `Print`,
  `ExpressionStatement`, `Block`, `If` and `While`; expressions
  `IntegerLiteral`, `BooleanLiteral`, `StringLiteral`, `Variable`, `Binary`,
  `Call`, `Peak`, `Clone`, `Conditional` and `Cast`.
- `permir.permissions` – `PermissionChecker`, plus the shortcuts
  `check_permissions(program)` and `check_permissions_with_source(program, source)`.
  Both return a list of `PermissionViolation` records. They cover reads without
  read permission, writes without write permission, `peak` on a value without
  read permission, and aliases to variables whose permissions are not shareable.
  With source text, the messages for denied reads, writes and peaks give the line
  of the variable's declaration and a short suggestion. The checker also offers
  `check_parameter_compatibility`, `check_variable_aliasing_for_function_arg`,
  `check_function_call` and `register_parameter`. Its `errors()` method
  returns the violations collected so far.
- `permir.permission_messages` – `PermissionViolation`, `is_exclusive(perms)`
  and the message builders that the checker uses.
- `permir.validation` – `validate_hir_with_source(program, source)` and
  `check_undeclared_variables(program)`. Both raise `ValidationFailed` when they
  find problems, and its `errors` attribute holds the `UndefinedVariable` and
  `TypeMismatch` entries. `TypeMismatch.format(source_code)` renders a
  diagnostic with a `-->` location, the offending line underlined with `~`, and a
  suggestion. `infer_expr_type(expr, program)` gives the type of an expression.
- `permir.scope` – `SymbolTable` with nested scopes (`enter_scope`,
  `exit_scope`, `add_symbol`, `lookup`, `lookup_in_current_scope`,
  `current_scope_symbols`, `scope_depth`), `Symbol` and `ScopeLocation`.
  `add_symbol` raises `AlreadyDefined` when a name already exists in the current
  scope. It raises `Shadowing` after adding a nested symbol that reuses a name.
  Both are subclasses of `ScopeError`. `NotFound` is available for callers that
  report failed lookups.
- `permir.mir_types` – the MIR data model: `MirProgram` (with `new_var_id` and
  `new_block_id`), `MirFunction`, `MirVariable`, `BasicBlock`, `VarId`,
  `BlockId`, `BinaryOperation`, the operands `VariableOperand` and
  `ConstantOperand`, and the instructions `Assign`, `BinaryOp`,
  `CallInstruction`, `ReturnInstruction`, `Jump`, `Branch` and `Nop`.
- `permir.mir_converter` – `convert_hir_to_mir(hir)`. A reference to an
  undeclared variable raises `UnknownVariableError`.
- `permir.hir_pretty_print.pretty_print(program)` and
  `permir.mir_pretty_print.pretty_print_program(program)` /
  `pretty_print_function(func)` render programs as text.

## Example

```python
from permir.hir_types import (
    HirProgram, HirFunction, HirVariable, Binary, Variable,
    IntegerLiteral, Return, Permission, Type, TokenType,
)
from permir.permissions import check_permissions
from permir.mir_converter import convert_hir_to_mir
from permir.mir_pretty_print import pretty_print_program

body = [
    HirVariable("x", Type.INT, [Permission.READS], IntegerLiteral(5)),
    HirVariable("y", Type.INT, [Permission.READS], IntegerLiteral(10)),
    HirVariable(
        "result", Type.INT, [Permission.READS],
        Binary(Variable("x", Type.INT), TokenType.PLUS, Variable("y", Type.INT), Type.INT),
    ),
    Return(Variable("result", Type.INT)),
]
program = HirProgram()
program.add_statement(HirFunction("add_numbers", [], body, Type.INT))

assert check_permissions(program) == []
print(pretty_print_program(convert_hir_to_mir(program)))
```

## What it does not do

- It has no lexer or parser, so it cannot read source text into HIR. You build
  HIR programs in Python. Source text is used only to place diagnostics.
- It has no command-line program and no code generation past MIR.
- Lowering is partial:
  - Each function becomes a single entry block.
  - Initializers of top-level declarations are not lowered.
  - `If`, `While`, `Print`, `Block` and expression statements become `Nop`.
  - `Call`, `Conditional` and `Cast` expressions become the constant `0`.
  - Operators that have no MIR counterpart emit a warning and are lowered as
    addition.
- The permission checker and the validator do not look inside `If` and `While`
  statements.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```