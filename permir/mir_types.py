"""Data types of the mid-level intermediate representation (MIR)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union

from permir.hir_types import Type


@dataclass(frozen=True, order=True)
class BlockId:
    """Identifier of a basic block."""

    index: int


@dataclass(frozen=True, order=True)
class VarId:
    """Identifier of a variable."""

    index: int


class BinaryOperation(Enum):
    """Binary operations, each carrying its textual operator."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    REMAINDER = "%"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_EQUAL = ">="
    AND = "&&"
    OR = "||"

    @property
    def symbol(self) -> str:
        return self.value


Constant = Union[int, bool, str]


@dataclass(frozen=True)
class VariableOperand:
    var: VarId


@dataclass(frozen=True)
class ConstantOperand:
    value: Constant


Operand = Union[VariableOperand, ConstantOperand]


@dataclass(frozen=True)
class Assign:
    target: VarId
    source: Operand


@dataclass(frozen=True)
class BinaryOp:
    target: VarId
    left: Operand
    op: BinaryOperation
    right: Operand


@dataclass(frozen=True)
class CallInstruction:
    target: Optional[VarId]
    function: str
    arguments: Sequence[Operand] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))


@dataclass(frozen=True)
class ReturnInstruction:
    value: Optional[Operand] = None


@dataclass(frozen=True)
class Jump:
    target: BlockId


@dataclass(frozen=True)
class Branch:
    condition: Operand
    true_block: BlockId
    false_block: BlockId


@dataclass(frozen=True)
class Nop:
    """An instruction that does nothing."""


Instruction = Union[
    Assign, BinaryOp, CallInstruction, ReturnInstruction, Jump, Branch, Nop
]


@dataclass
class BasicBlock:
    id: BlockId
    instructions: list[Instruction] = field(default_factory=list)


@dataclass
class MirVariable:
    id: VarId
    name: str
    typ: Type


@dataclass
class MirFunction:
    name: str
    parameters: list[tuple[VarId, Type]] = field(default_factory=list)
    return_type: Optional[Type] = None
    blocks: list[BasicBlock] = field(default_factory=list)
    entry_block: BlockId = BlockId(0)
    variables: dict[VarId, MirVariable] = field(default_factory=dict)


@dataclass
class MirProgram:
    """A complete MIR program with its id counters."""

    globals: dict[str, MirVariable] = field(default_factory=dict)
    functions: dict[str, MirFunction] = field(default_factory=dict)
    next_var_id: int = 0
    next_block_id: int = 0

    def new_var_id(self) -> VarId:
        """Allocate a fresh variable id."""
        var_id = VarId(self.next_var_id)
        self.next_var_id += 1
        return var_id

    def new_block_id(self) -> BlockId:
        """Allocate a fresh block id."""
        block_id = BlockId(self.next_block_id)
        self.next_block_id += 1
        return block_id