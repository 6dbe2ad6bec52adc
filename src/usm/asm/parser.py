from pathlib import Path
import logging as lg
from typing import Tuple

import usm.asm.grammar as grammar
from usm.asm.builder import Builder, ParseError  # noqa: F401
from usm.common.ops import Instruction

Program = Tuple[Instruction, ...]


class ParseSettings:
    multi_digit: bool

    def __init__(self):
        self.multi_digit = False

    def update(self, multi_digit: bool | None = None):
        if multi_digit is not None:
            self.multi_digit = multi_digit

        return self


def parse_program(source: str, settings: ParseSettings | None = None) -> Program:
    if settings is None:
        settings = ParseSettings()

    program = grammar.multi_digit_program if settings.multi_digit else grammar.program

    builder = Builder()
    actions = program.parse_string(source, parse_all=True)

    # Raises on the first unknown token, nothing is returned half-built
    for (func, arg) in actions:  # type: ignore
        func(builder, arg)

    lg.debug(f'Parsed {len(builder.instructions)} instructions')
    return tuple(builder.instructions)


def load_program(filepath: str | Path, settings: ParseSettings | None = None) -> Program:
    if isinstance(filepath, str):
        filepath = Path(filepath)

    lg.debug(f'Loading program {filepath}')
    return parse_program(filepath.read_text(encoding='utf-8'), settings)
