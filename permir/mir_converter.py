"""Lowering of HIR programs into MIR."""

from __future__ import annotations

import warnings
from typing import Optional

from permir.hir_types import (
    Binary,
    BooleanLiteral,
    Clone,
    HirAssignment,
    HirExpression,
    HirFunction,
    HirProgram,
    HirStatement,
    HirVariable,
    IntegerLiteral,
    Peak,
    Return,
    StringLiteral,
    TokenType,
    Variable,
)
from permir.mir_types import (
    Assign,
    BasicBlock,
    BinaryOp,
    BinaryOperation,
    ConstantOperand,
    Instruction,
    MirFunction,
    MirProgram,
    MirVariable,
    Nop,
    Operand,
    ReturnInstruction,
    VarId,
    VariableOperand,
)


class UnknownVariableError(LookupError):
    """An expression refers to a variable that was never declared."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown variable: {name}")
        self.name = name


_OPERATORS = {
    TokenType.PLUS: BinaryOperation.ADD,
    TokenType.MINUS: BinaryOperation.SUBTRACT,
    TokenType.STAR: BinaryOperation.MULTIPLY,
    TokenType.SLASH: BinaryOperation.DIVIDE,
    TokenType.EQUAL_EQUAL: BinaryOperation.EQUAL,
    TokenType.BANG_EQUAL: BinaryOperation.NOT_EQUAL,
    TokenType.LESS: BinaryOperation.LESS_THAN,
    TokenType.LESS_EQUAL: BinaryOperation.LESS_THAN_EQUAL,
    TokenType.GREATER: BinaryOperation.GREATER_THAN,
    TokenType.GREATER_EQUAL: BinaryOperation.GREATER_THAN_EQUAL,
}


def convert_hir_to_mir(hir: HirProgram) -> MirProgram:
    """Convert a HIR program into a MIR program.

    Top-level declarations become globals (their initializers are not lowered);
    top-level functions become MIR functions with a single entry block.
    """
    return _Converter().convert_program(hir)


class _Converter:
    def __init__(self) -> None:
        self._mir = MirProgram()
        self._var_map: dict[str, VarId] = {}
        self._function: Optional[MirFunction] = None
        self._block: Optional[BasicBlock] = None

    def convert_program(self, hir: HirProgram) -> MirProgram:
        for stmt in hir.statements:
            if isinstance(stmt, HirVariable):
                var_id = self._mir.new_var_id()
                self._mir.globals[stmt.name] = MirVariable(var_id, stmt.name, stmt.typ)
                self._var_map[stmt.name] = var_id

        for stmt in hir.statements:
            if isinstance(stmt, HirFunction):
                self._mir.functions[stmt.name] = self._convert_function(stmt)

        return self._mir

    def _convert_function(self, func: HirFunction) -> MirFunction:
        entry_id = self._mir.new_block_id()
        mir_func = MirFunction(
            name=func.name, return_type=func.return_type, entry_block=entry_id
        )
        block = BasicBlock(id=entry_id)
        self._function, self._block = mir_func, block

        for param in func.parameters:
            var_id = self._mir.new_var_id()
            mir_func.variables[var_id] = MirVariable(var_id, param.name, param.typ)
            mir_func.parameters.append((var_id, param.typ))
            self._var_map[param.name] = var_id

        for stmt in func.body:
            self._convert_statement(stmt)

        if not block.instructions or not isinstance(
            block.instructions[-1], ReturnInstruction
        ):
            block.instructions.append(ReturnInstruction(None))

        mir_func.blocks.append(block)
        self._function, self._block = None, None
        return mir_func

    def _declare_local(self, name: str, typ) -> VarId:
        var_id = self._mir.new_var_id()
        if self._function is not None:
            self._function.variables[var_id] = MirVariable(var_id, name, typ)
        return var_id

    def _emit(self, instruction: Instruction) -> None:
        if self._block is not None:
            self._block.instructions.append(instruction)

    def _convert_statement(self, stmt: HirStatement) -> None:
        match stmt:
            case HirVariable():
                var_id = self._declare_local(stmt.name, stmt.typ)
                self._var_map[stmt.name] = var_id
                if stmt.initializer is not None:
                    operand = self._convert_expression(stmt.initializer)
                    self._emit(Assign(target=var_id, source=operand))
            case HirAssignment():
                var_id = self._var_map.get(stmt.target)
                if var_id is not None:
                    operand = self._convert_expression(stmt.value)
                    self._emit(Assign(target=var_id, source=operand))
            case Return():
                operand = (
                    None if stmt.value is None else self._convert_expression(stmt.value)
                )
                self._emit(ReturnInstruction(operand))
            case _:
                self._emit(Nop())

    def _convert_expression(self, expr: HirExpression) -> Operand:
        match expr:
            case IntegerLiteral() | BooleanLiteral() | StringLiteral():
                return ConstantOperand(expr.value)
            case Variable():
                var_id = self._var_map.get(expr.name)
                if var_id is None:
                    raise UnknownVariableError(expr.name)
                return VariableOperand(var_id)
            case Binary():
                left = self._convert_expression(expr.left)
                right = self._convert_expression(expr.right)
                result_id = self._mir.new_var_id()
                if self._function is not None:
                    self._function.variables[result_id] = MirVariable(
                        result_id, f"temp_{result_id.index}", expr.result_type
                    )
                op = _OPERATORS.get(expr.operator)
                if op is None:
                    warnings.warn(
                        "Unsupported binary operator encountered in MIR conversion",
                        stacklevel=2,
                    )
                    op = BinaryOperation.ADD
                self._emit(BinaryOp(target=result_id, left=left, op=op, right=right))
                return VariableOperand(result_id)
            case Peak() | Clone():
                # Both read the value directly; for primitives they lower identically.
                return self._convert_expression(expr.expr)
            case _:
                return ConstantOperand(0)