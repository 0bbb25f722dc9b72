import pytest

from permir.hir_types import (
    Binary,
    BooleanLiteral,
    Clone,
    Conditional,
    HirAssignment,
    HirFunction,
    HirParameter,
    HirProgram,
    HirVariable,
    If,
    IntegerLiteral,
    Peak,
    Permission,
    Print,
    Return,
    StringLiteral,
    TokenType,
    Type,
    Variable,
)
from permir.mir_converter import UnknownVariableError, convert_hir_to_mir
from permir.mir_pretty_print import pretty_print_program
from permir.mir_types import (
    Assign,
    BinaryOp,
    BinaryOperation,
    BlockId,
    ConstantOperand,
    Nop,
    ReturnInstruction,
    VarId,
    VariableOperand,
)

R = [Permission.READS]
RW = [Permission.READS, Permission.WRITE]


def _var(name, typ=Type.INT):
    return Variable(name, typ)


def _instructions(func):
    return [instr for block in func.blocks for instr in block.instructions]


def _program(*statements):
    return HirProgram(statements=list(statements))


def test_simple_arithmetic():
    func = HirFunction(
        name="add_numbers",
        return_type=Type.INT,
        body=[
            HirVariable("x", Type.INT, R, IntegerLiteral(5)),
            HirVariable("y", Type.INT, R, IntegerLiteral(10)),
            HirVariable(
                "result",
                Type.INT,
                R,
                Binary(_var("x"), TokenType.PLUS, _var("y"), Type.INT),
            ),
            Return(_var("result")),
        ],
    )
    mir = convert_hir_to_mir(_program(func))

    assert "add_numbers" in mir.functions
    add_fn = mir.functions["add_numbers"]
    assert add_fn.name == "add_numbers"
    assert len(add_fn.parameters) == 0
    assert add_fn.return_type is Type.INT
    assert add_fn.blocks
    instrs = _instructions(add_fn)
    assert any(
        isinstance(i, BinaryOp) and i.op is BinaryOperation.ADD for i in instrs
    )
    assert any(isinstance(i, ReturnInstruction) for i in instrs)


def test_simple_arithmetic_instruction_sequence():
    func = HirFunction(
        name="add_numbers",
        return_type=Type.INT,
        body=[
            HirVariable("x", Type.INT, R, IntegerLiteral(5)),
            HirVariable("y", Type.INT, R, IntegerLiteral(10)),
            HirVariable(
                "result",
                Type.INT,
                R,
                Binary(_var("x"), TokenType.PLUS, _var("y"), Type.INT),
            ),
            Return(_var("result")),
        ],
    )
    add_fn = convert_hir_to_mir(_program(func)).functions["add_numbers"]
    assert _instructions(add_fn) == [
        Assign(VarId(0), ConstantOperand(5)),
        Assign(VarId(1), ConstantOperand(10)),
        BinaryOp(
            VarId(3), VariableOperand(VarId(0)), BinaryOperation.ADD, VariableOperand(VarId(1))
        ),
        Assign(VarId(2), VariableOperand(VarId(3))),
        ReturnInstruction(VariableOperand(VarId(2))),
    ]
    assert add_fn.variables[VarId(3)].name == "temp_3"


def _peak_function():
    return HirFunction(
        name="test_peak",
        body=[
            HirVariable("c", Type.INT, RW, IntegerLiteral(1)),
            HirVariable("d", Type.INT, [Permission.READ], Peak(_var("c"))),
            Return(_var("d")),
        ],
    )


def test_peak_operation():
    mir = convert_hir_to_mir(_program(_peak_function()))
    assert "test_peak" in mir.functions
    peak_fn = mir.functions["test_peak"]
    assert peak_fn.name == "test_peak"

    assigned = {
        peak_fn.variables[i.target].name
        for i in _instructions(peak_fn)
        if isinstance(i, Assign) and i.target in peak_fn.variables
    }
    assert "c" in assigned
    assert "d" in assigned
    assert _instructions(peak_fn) == [
        Assign(VarId(0), ConstantOperand(1)),
        Assign(VarId(1), VariableOperand(VarId(0))),
        ReturnInstruction(VariableOperand(VarId(1))),
    ]


def test_peak_operation_pretty_printed():
    mir = convert_hir_to_mir(_program(_peak_function()))
    assert pretty_print_program(mir) == (
        "fn test_peak() {\n"
        "    // Local variables\n"
        "    var c: Int [0]\n"
        "    var d: Int [1]\n"
        "\n"
        "    block 0:\n"
        "        c[0] = 1\n"
        "        d[1] = c[0]\n"
        "        return d[1]\n"
        "\n"
        "}\n"
        "\n"
    )


def test_peak_vs_copy():
    func = HirFunction(
        name="test_peak_vs_copy",
        body=[
            HirVariable("original", Type.INT, RW, IntegerLiteral(42)),
            HirVariable("peek_result", Type.INT, [Permission.READ], Peak(_var("original"))),
            HirVariable("mutable", Type.INT, R, IntegerLiteral(100)),
            HirVariable("copy_result", Type.INT, R, Clone(_var("mutable"))),
            Return(
                Binary(_var("peek_result"), TokenType.PLUS, _var("copy_result"), Type.INT)
            ),
        ],
    )
    mir = convert_hir_to_mir(_program(func))
    assert "test_peak_vs_copy" in mir.functions
    test_fn = mir.functions["test_peak_vs_copy"]
    names = {v.name for v in test_fn.variables.values()}
    for name in ["original", "peek_result", "mutable", "copy_result"]:
        assert name in names
    assert _instructions(test_fn) == [
        Assign(VarId(0), ConstantOperand(42)),
        Assign(VarId(1), VariableOperand(VarId(0))),
        Assign(VarId(2), ConstantOperand(100)),
        Assign(VarId(3), VariableOperand(VarId(2))),
        BinaryOp(
            VarId(4), VariableOperand(VarId(1)), BinaryOperation.ADD, VariableOperand(VarId(3))
        ),
        ReturnInstruction(VariableOperand(VarId(4))),
    ]


def test_globals_are_collected_without_initializer_code():
    mir = convert_hir_to_mir(
        _program(
            HirVariable("g", Type.INT, R, IntegerLiteral(7)),
            HirVariable("flag", Type.BOOL, R),
        )
    )
    assert set(mir.globals) == {"g", "flag"}
    assert mir.globals["g"].id == VarId(0)
    assert mir.globals["flag"].id == VarId(1)
    assert mir.globals["flag"].typ is Type.BOOL
    assert mir.functions == {}


def test_function_reads_global():
    mir = convert_hir_to_mir(
        _program(
            HirVariable("g", Type.INT, R, IntegerLiteral(7)),
            HirFunction(name="f", return_type=Type.INT, body=[Return(_var("g"))]),
        )
    )
    assert _instructions(mir.functions["f"]) == [
        ReturnInstruction(VariableOperand(VarId(0)))
    ]


def test_implicit_return_is_appended():
    mir = convert_hir_to_mir(_program(HirFunction(name="empty")))
    assert _instructions(mir.functions["empty"]) == [ReturnInstruction(None)]


def test_parameters_are_registered():
    func = HirFunction(
        name="id",
        parameters=[HirParameter("a", Type.INT, R), HirParameter("b", Type.BOOL, R)],
        return_type=Type.INT,
        body=[Return(_var("a"))],
    )
    mir_fn = convert_hir_to_mir(_program(func)).functions["id"]
    assert mir_fn.parameters == [(VarId(0), Type.INT), (VarId(1), Type.BOOL)]
    assert mir_fn.variables[VarId(1)].name == "b"
    assert _instructions(mir_fn) == [ReturnInstruction(VariableOperand(VarId(0)))]


def test_block_ids_are_allocated_per_function():
    mir = convert_hir_to_mir(_program(HirFunction(name="a"), HirFunction(name="b")))
    assert mir.functions["a"].entry_block == BlockId(0)
    assert mir.functions["b"].entry_block == BlockId(1)
    assert mir.functions["b"].blocks[0].id == BlockId(1)
    assert mir.next_block_id == 2


def test_assignment_to_known_and_unknown_targets():
    func = HirFunction(
        name="f",
        body=[
            HirVariable("x", Type.INT, RW, IntegerLiteral(1)),
            HirAssignment("x", IntegerLiteral(2)),
            HirAssignment("missing", IntegerLiteral(3)),
        ],
    )
    assert _instructions(convert_hir_to_mir(_program(func)).functions["f"]) == [
        Assign(VarId(0), ConstantOperand(1)),
        Assign(VarId(0), ConstantOperand(2)),
        ReturnInstruction(None),
    ]


def test_other_statements_become_nop():
    func = HirFunction(
        name="f",
        body=[
            Print(IntegerLiteral(1)),
            If(BooleanLiteral(True), Return(None)),
        ],
    )
    assert _instructions(convert_hir_to_mir(_program(func)).functions["f"]) == [
        Nop(),
        Nop(),
        ReturnInstruction(None),
    ]


def test_literal_constants():
    func = HirFunction(
        name="f",
        body=[
            HirVariable("b", Type.BOOL, R, BooleanLiteral(True)),
            HirVariable("s", Type.STRING, R, StringLiteral("hi")),
            HirVariable(
                "c",
                Type.INT,
                R,
                Conditional(BooleanLiteral(True), IntegerLiteral(1), IntegerLiteral(2), Type.INT),
            ),
        ],
    )
    instrs = _instructions(convert_hir_to_mir(_program(func)).functions["f"])
    assert instrs[:3] == [
        Assign(VarId(0), ConstantOperand(True)),
        Assign(VarId(1), ConstantOperand("hi")),
        Assign(VarId(2), ConstantOperand(0)),
    ]


def test_unknown_variable_raises():
    func = HirFunction(name="f", body=[Return(_var("nowhere"))])
    with pytest.raises(UnknownVariableError) as info:
        convert_hir_to_mir(_program(func))
    assert info.value.name == "nowhere"
    assert "Unknown variable: nowhere" in str(info.value)


@pytest.mark.parametrize(
    "token, op",
    [
        (TokenType.PLUS, BinaryOperation.ADD),
        (TokenType.MINUS, BinaryOperation.SUBTRACT),
        (TokenType.STAR, BinaryOperation.MULTIPLY),
        (TokenType.SLASH, BinaryOperation.DIVIDE),
        (TokenType.EQUAL_EQUAL, BinaryOperation.EQUAL),
        (TokenType.BANG_EQUAL, BinaryOperation.NOT_EQUAL),
        (TokenType.LESS, BinaryOperation.LESS_THAN),
        (TokenType.LESS_EQUAL, BinaryOperation.LESS_THAN_EQUAL),
        (TokenType.GREATER, BinaryOperation.GREATER_THAN),
        (TokenType.GREATER_EQUAL, BinaryOperation.GREATER_THAN_EQUAL),
    ],
)
def test_operator_mapping(token, op):
    func = HirFunction(
        name="f",
        body=[Return(Binary(IntegerLiteral(1), token, IntegerLiteral(2), Type.INT))],
    )
    instrs = _instructions(convert_hir_to_mir(_program(func)).functions["f"])
    assert instrs[0] == BinaryOp(VarId(0), ConstantOperand(1), op, ConstantOperand(2))


def test_unsupported_operator_falls_back_to_add():
    func = HirFunction(
        name="f",
        body=[
            Return(Binary(IntegerLiteral(7), TokenType.PERCENT, IntegerLiteral(2), Type.INT))
        ],
    )
    with pytest.warns(UserWarning, match="Unsupported binary operator"):
        mir = convert_hir_to_mir(_program(func))
    assert _instructions(mir.functions["f"])[0].op is BinaryOperation.ADD