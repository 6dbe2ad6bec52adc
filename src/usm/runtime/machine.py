import struct
import logging as lg
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, List

import pyparsing as pp

import usm.common.ops as ops
import usm.asm.grammar as grammar
from usm.asm.parser import Program, ParseSettings, parse_program
from usm.common.machconf import (
    WORD_MASK, WORD_MIN, WORD_MAX, WORD_FMT_SIGNED, WORD_FMT_UNSIGNED
)
from usm.runtime.console import Console


class ExecError(Exception):
    pass


class StackUnderflow(ExecError):
    pass


class DivisionByZero(ExecError):
    pass


class StackOverflow(ExecError):
    pass


class InputError(ExecError):
    pass


@dataclass(frozen=True)
class Outcome:
    halted: bool
    error: ExecError | None = None


def to_word(value: int) -> int:
    (word,) = struct.unpack(WORD_FMT_SIGNED, struct.pack(WORD_FMT_UNSIGNED, value & WORD_MASK))
    return word


def div_trunc(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def mod_trunc(a: int, b: int) -> int:
    return a - b * div_trunc(a, b)


class Machine():
    stack: Deque[int]           # Operand stack, top is the right end
    pc: int                     # Program counter
    ir: ops.Instruction | None  # Instruction being executed
    instructions: Program
    halted: bool
    error: ExecError | None

    def __init__(self, instructions: Iterable[ops.Instruction], console: Console | None = None):
        self.stack = deque()
        self.pc = 0
        self.ir = None
        self.instructions = tuple(instructions)
        self.halted = False
        self.error = None
        self.console = console if console is not None else Console()

    @classmethod
    def from_source(
        cls,
        source: str,
        console: Console | None = None,
        settings: ParseSettings | None = None
    ):
        return cls(parse_program(source, settings), console)

    # - Inspection - #

    def stack_values(self) -> List[int]:
        return list(self.stack)

    def dump(self) -> str:
        lines = [
            '===== Virtual Machine State =====',
            f'Program counter: {self.pc}',
            f'Stack: {self.stack_values()}',
            '',
            'Instructions'
        ]

        lines.extend(f'{i}\t{instruction}' for i, instruction in enumerate(self.instructions))
        return '\n'.join(lines)

    def __str__(self) -> str:
        return self.dump()

    def debug_dump(self):
        lg.debug(f'PC:{self.pc} DEPTH:{len(self.stack)} STACK:{self.stack_values()}')

    # - Helpers - #

    def need(self, count: int):
        depth = len(self.stack)

        if depth < count:
            raise StackUnderflow(f'{self.ir} needs {count} operand(s), stack holds {depth}')

    def do_push(self, val: int):
        self.stack.append(to_word(val))

    def do_pop(self) -> int:
        return self.stack.pop()

    def arithm_pair(self, op: Callable[[int, int], int]):
        self.need(2)
        a = self.do_pop()
        b = self.do_pop()
        self.do_push(op(a, b))

    def divide_pair(self, op: Callable[[int, int], int]):
        self.need(2)

        # Divisor is the second operand, checked before anything is popped
        if self.stack[-2] == 0:
            raise DivisionByZero(f'{self.ir} by zero')

        self.arithm_pair(op)

    # - Operations - #

    def num(self):
        self.do_push(self.ir.value)  # type: ignore

    def pop(self):
        self.need(1)
        v = self.do_pop()
        self.console.write(v)

    def cpy(self):
        self.need(1)
        count = self.stack[-1]

        if count < 1:
            raise StackUnderflow(f'{self.ir} count must be at least 1, got {count}')

        self.need(2)
        self.do_pop()
        v = self.do_pop()

        for _ in range(count + 1):
            self.do_push(v)

    def stack_count(self):
        depth = len(self.stack)

        if depth > WORD_MAX:
            raise StackOverflow(f'Stack depth {depth} does not fit in a word')

        self.do_push(depth)

    def push_pc(self):
        self.do_push(self.pc)

    def pop_pc(self):
        self.need(1)
        self.pc = self.do_pop()

    def std_in(self):
        line = self.console.read_line().strip()

        try:
            (value,) = grammar.s_dec_const.parse_string(line, parse_all=True)
        except pp.ParseException as e:
            raise InputError(f"'{line}' is not an integer") from e

        if not WORD_MIN <= value <= WORD_MAX:
            raise InputError(f'{value} does not fit in a word')

        self.do_push(value)

    # - Arithmetic - #

    def add(self):
        self.arithm_pair(lambda a, b: a + b)

    def sub(self):
        self.arithm_pair(lambda a, b: a - b)

    def mul(self):
        self.arithm_pair(lambda a, b: a * b)

    def div(self):
        self.divide_pair(div_trunc)

    def mod(self):
        self.divide_pair(mod_trunc)

    HANDLERS = {
        ops.Op.NUM: num,
        ops.Op.POP: pop,
        ops.Op.CPY: cpy,
        ops.Op.STACK_COUNT: stack_count,
        ops.Op.ADD: add,
        ops.Op.SUB: sub,
        ops.Op.MUL: mul,
        ops.Op.DIV: div,
        ops.Op.MOD: mod,
        ops.Op.PUSH_PC: push_pc,
        ops.Op.POP_PC: pop_pc,
        ops.Op.STD_IN: std_in,
    }

    # -- Implementation -- #

    def outcome(self) -> Outcome:
        return Outcome(self.halted, self.error)

    def exec_next(self):
        self.ir = self.instructions[self.pc]

        # POP_PC sets the counter itself, everything else sees the next address
        if self.ir.op is not ops.Op.POP_PC:
            self.pc += 1

        lg.debug(f'EXEC {self.ir}')
        handler = self.HANDLERS[self.ir.op]
        handler(self)
        self.debug_dump()

    def step(self) -> Outcome:
        if self.halted:
            return self.outcome()

        if not 0 <= self.pc < len(self.instructions):
            lg.info(f'Program counter {self.pc} left the program, halting')
            self.halted = True
            return self.outcome()

        try:
            self.exec_next()

        except ExecError as e:
            lg.info(f'Execution halted on {type(e).__name__}: {e}')
            self.error = e
            self.halted = True

        return self.outcome()
