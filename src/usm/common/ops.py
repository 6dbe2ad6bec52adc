from enum import Enum
from dataclasses import dataclass


class Op(Enum):
    NUM = 'NUM'                             # push literal
    POP = 'POP'                             # [--SP] -> output
    CPY = 'CPY'                             # pop C; pop V; push V (C + 1) times
    STACK_COUNT = 'STACK_COUNT'             # depth -> [SP++]
    ADD = 'ADD'                             # A + B
    SUB = 'SUB'                             # A - B
    MUL = 'MUL'                             # A * B
    DIV = 'DIV'                             # A / B
    MOD = 'MOD'                             # A % B
    PUSH_PC = 'PUSH_PROGRAM_COUNTER'        # PC -> [SP++]
    POP_PC = 'POP_PROGRAM_COUNTER'          # [--SP] -> PC
    STD_IN = 'STD_IN'                       # input line -> [SP++]


# Source character -> operation
SYMBOLS = {
    '!': Op.POP,
    '@': Op.CPY,
    '$': Op.STACK_COUNT,
    '+': Op.ADD,
    '-': Op.SUB,
    '*': Op.MUL,
    '/': Op.DIV,
    '%': Op.MOD,
    '<': Op.PUSH_PC,
    '>': Op.POP_PC,
    '?': Op.STD_IN,
}


@dataclass(frozen=True)
class Instruction:
    op: Op
    value: int = 0  # Payload of NUM only

    def __str__(self) -> str:
        if self.op is Op.NUM:
            return f'{self.op.value} {self.value}'

        return self.op.value


def number(value: int) -> Instruction:
    return Instruction(Op.NUM, value)
