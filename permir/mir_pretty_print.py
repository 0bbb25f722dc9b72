"""Human-readable rendering of MIR programs."""

from __future__ import annotations

from permir.mir_types import (
    Assign,
    BasicBlock,
    BinaryOp,
    Branch,
    CallInstruction,
    ConstantOperand,
    Instruction,
    Jump,
    MirFunction,
    MirProgram,
    Nop,
    Operand,
    ReturnInstruction,
    VarId,
    VariableOperand,
)


def pretty_print_program(program: MirProgram) -> str:
    """Render globals and every function of a MIR program."""
    parts: list[str] = []
    if program.globals:
        parts.append("// Global Variables\n")
        parts.extend(
            f"var {name}: {var.typ.value} [{var.id.index}]\n"
            for name, var in program.globals.items()
        )
        parts.append("\n")
    for func in program.functions.values():
        parts.append(pretty_print_function(func))
        parts.append("\n")
    return "".join(parts)


def pretty_print_function(func: MirFunction) -> str:
    """Render a single MIR function."""
    params = ", ".join(
        f"{_param_name(func, var_id)}: {typ.value} [{var_id.index}]"
        for var_id, typ in func.parameters
    )
    lines = [f"fn {func.name}({params})"]
    if func.return_type is not None:
        lines[0] += f" -> {func.return_type.value} {{"
    else:
        lines[0] += " {"

    param_ids = {var_id for var_id, _ in func.parameters}
    locals_ = [v for v in func.variables.values() if v.id not in param_ids]
    if locals_:
        lines.append("    // Local variables")
        lines.extend(f"    var {v.name}: {v.typ.value} [{v.id.index}]" for v in locals_)
        lines.append("")

    for block in func.blocks:
        lines.extend(_block_lines(block, func))

    lines.append("}")
    return "\n".join(lines) + "\n"


def _param_name(func: MirFunction, var_id: VarId) -> str:
    var = func.variables.get(var_id)
    return "unknown" if var is None else var.name


def _block_lines(block: BasicBlock, func: MirFunction) -> list[str]:
    lines = [f"    block {block.id.index}:"]
    lines.extend(f"        {_instruction(instr, func)}" for instr in block.instructions)
    lines.append("")
    return lines


def _instruction(instr: Instruction, func: MirFunction) -> str:
    match instr:
        case Assign():
            return f"{_var_name(instr.target, func)} = {_operand(instr.source, func)}"
        case BinaryOp():
            return (
                f"{_var_name(instr.target, func)} = {_operand(instr.left, func)} "
                f"{instr.op.symbol} {_operand(instr.right, func)}"
            )
        case CallInstruction():
            args = ", ".join(_operand(a, func) for a in instr.arguments)
            call = f"call {instr.function}({args})"
            if instr.target is None:
                return call
            return f"{_var_name(instr.target, func)} = {call}"
        case ReturnInstruction():
            if instr.value is None:
                return "return"
            return f"return {_operand(instr.value, func)}"
        case Jump():
            return f"jump block{instr.target.index}"
        case Branch():
            return (
                f"branch {_operand(instr.condition, func)} ? "
                f"block{instr.true_block.index} : block{instr.false_block.index}"
            )
        case Nop():
            return "nop"
        case _:
            raise TypeError(f"not a MIR instruction: {instr!r}")


def _operand(operand: Operand, func: MirFunction) -> str:
    match operand:
        case VariableOperand():
            return _var_name(operand.var, func)
        case ConstantOperand(value=bool() as value):
            return "true" if value else "false"
        case ConstantOperand(value=str() as value):
            return f'"{value}"'
        case ConstantOperand():
            return str(operand.value)
        case _:
            raise TypeError(f"not a MIR operand: {operand!r}")


def _var_name(var_id: VarId, func: MirFunction) -> str:
    var = func.variables.get(var_id)
    if var is None:
        return f"var_{var_id.index}"
    return f"{var.name}[{var_id.index}]"