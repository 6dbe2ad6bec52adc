# type: ignore
''' Program and input grammar '''

import pyparsing as pp

import usm.common.ops as ops
from usm.asm.builder import Builder


def g_token(expr, handler):
    return expr.set_parse_action(lambda r: (handler, r[0]))


def g_located(expr, handler):
    return expr.set_parse_action(
        lambda s, loc, r: (handler, (r[0], pp.lineno(loc, s), pp.col(loc, s)))
    )


def g_program(number):
    unknown = g_located(pp.Regex(r'\S'), Builder.on_fail)
    symbol = g_token(pp.Char(''.join(ops.SYMBOLS)), Builder.on_symbol)
    program = pp.ZeroOrMore(number | symbol | unknown)
    program.ignore(pp.Regex(r'\s+'))
    # Report columns of the raw text
    program.parse_with_tabs()
    return program


# Every digit is a literal of its own
digit = g_located(pp.Char(pp.nums), Builder.on_number)
# Adjacent digits form one literal
digits = g_located(pp.Word(pp.nums), Builder.on_number)

program = g_program(digit)
multi_digit_program = g_program(digits)

# One line of integer input
s_dec_const = pp.Regex('[+-]?[0-9]+').set_parse_action(lambda r: int(r[0]))
