import pytest

from permir.hir_types import Type
from permir.mir_types import (
    BinaryOperation,
    BlockId,
    CallInstruction,
    ConstantOperand,
    MirFunction,
    MirProgram,
    MirVariable,
    VarId,
    VariableOperand,
)


def test_var_ids_are_sequential_from_zero():
    program = MirProgram()
    ids = [program.new_var_id() for _ in range(3)]
    assert ids == [VarId(0), VarId(1), VarId(2)]
    assert program.next_var_id == len(ids)


def test_block_ids_independent_of_var_ids():
    program = MirProgram()
    program.new_var_id()
    program.new_var_id()
    assert program.new_block_id() == BlockId(0)
    assert program.new_block_id() == BlockId(1)
    assert program.next_var_id == 2


def test_ids_are_unique():
    program = MirProgram()
    ids = {program.new_var_id() for _ in range(50)}
    assert len(ids) == 50


def test_var_id_usable_as_key():
    func = MirFunction(name="f")
    var = MirVariable(VarId(7), "x", Type.INT)
    func.variables[VarId(7)] = var
    assert func.variables[VarId(7)].name == "x"
    assert func.entry_block == BlockId(0)


@pytest.mark.parametrize(
    "op, symbol",
    [
        (BinaryOperation.ADD, "+"),
        (BinaryOperation.REMAINDER, "%"),
        (BinaryOperation.LESS_THAN_EQUAL, "<="),
        (BinaryOperation.AND, "&&"),
        (BinaryOperation.OR, "||"),
    ],
)
def test_operation_symbols(op, symbol):
    assert op.symbol == symbol


def test_call_arguments_become_tuple():
    call = CallInstruction(None, "f", [ConstantOperand(1), VariableOperand(VarId(0))])
    assert call.arguments == (ConstantOperand(1), VariableOperand(VarId(0)))


def test_operands_compare_by_value():
    assert VariableOperand(VarId(3)) == VariableOperand(VarId(3))
    assert ConstantOperand("a") == ConstantOperand("a")
    assert VariableOperand(VarId(3)) != VariableOperand(VarId(4))