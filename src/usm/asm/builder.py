import logging as lg
from typing import List, Tuple

import usm.common.ops as ops
from usm.common.machconf import WORD_MIN, WORD_MAX

Location = Tuple[str, int, int]  # token, line, column


class ParseError(Exception):
    token: str
    line: int
    column: int

    def __init__(self, token: str, line: int, column: int):
        super().__init__(
            f"String '{token}' cannot be parsed as an operation "
            f"(line {line}, column {column})"
        )
        self.token = token
        self.line = line
        self.column = column


class Builder:
    ''' Collects instructions issued by grammar actions '''
    instructions: List[ops.Instruction]

    def __init__(self):
        self.instructions = list()

    def issue(self, instruction: ops.Instruction):
        lg.debug(f'Issuing {instruction} @ {len(self.instructions)}')
        self.instructions.append(instruction)

    # Handlers
    def on_number(self, location: Location):
        value = int(location[0])

        if not WORD_MIN <= value <= WORD_MAX:
            raise ParseError(*location)

        self.issue(ops.number(value))

    def on_symbol(self, token: str):
        self.issue(ops.Instruction(ops.SYMBOLS[token]))

    def on_fail(self, location: Location):
        raise ParseError(*location)
