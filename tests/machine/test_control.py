import usm.common.ops as ops
from usm.asm.parser import parse_program
from usm.runtime.machine import Machine, Outcome, StackUnderflow

from unit_utils import ScriptedConsole, run_source


def test_push_pc_is_next_address():
    assert run_source('<').stack_values() == [1]
    assert run_source('12<').stack_values() == [1, 2, 3]
    assert run_source('<<<').stack_values() == [1, 2, 3]


def test_jump_resumes_after_push_pc():
    console = ScriptedConsole()
    machine = Machine.from_source('<1!>', console)

    machine.step()  # <
    assert machine.pc == 1
    assert machine.stack_values() == [1]

    machine.step()  # 1
    machine.step()  # !
    assert machine.pc == 3

    machine.step()  # > back to the instruction after <
    assert machine.pc == 1
    assert machine.stack_values() == []

    machine.step()  # 1 again
    assert machine.stack_values() == [1]
    assert machine.pc == 2


def test_jump_loop_ends_on_underflow():
    console = ScriptedConsole()
    machine = run_source('<1!>', console)

    assert console.outputs == [1, 1]
    assert isinstance(machine.error, StackUnderflow)


def test_jump_does_not_advance():
    machine = Machine.from_source('2>9!')

    machine.step()
    machine.step()

    assert machine.pc == 2
    assert machine.stack_values() == []


def test_subroutine_call():
    console = ScriptedConsole()
    machine = run_source('<6+ 94+ > 8! 99* > 7! >', console)

    assert console.outputs == [7, 8]
    assert machine.error is None
    assert machine.pc == 81


def test_jump_underflow():
    machine = run_source('>')

    assert isinstance(machine.error, StackUnderflow)
    assert machine.pc == 0


def test_jump_out_of_program_halts():
    machine = run_source('10->9!')

    assert machine.halted
    assert machine.error is None
    assert machine.pc == -1


def test_halts_exactly_once():
    machine = Machine.from_source('1')

    assert machine.step() == Outcome(False)
    assert machine.step() == Outcome(True)
    assert machine.halted

    for _ in range(3):
        assert machine.step() == Outcome(True)

    assert machine.pc == 1
    assert machine.stack_values() == [1]


def test_empty_program_halts():
    machine = Machine(())

    assert machine.step().halted
    assert machine.error is None


def test_error_halts_for_good():
    machine = Machine.from_source('+1')

    outcome = machine.step()
    assert outcome.halted
    assert isinstance(outcome.error, StackUnderflow)

    assert machine.step().error is outcome.error
    assert machine.stack_values() == []
    assert machine.pc == 1


def test_every_op_has_handler():
    assert set(Machine.HANDLERS) == set(ops.Op)


def test_shared_program():
    program = parse_program('12+')
    first = Machine(program)
    second = Machine(program)

    assert first.instructions is second.instructions

    while not first.step().halted:
        pass

    assert first.stack_values() == [3]
    assert second.stack_values() == []
    assert second.pc == 0


def test_dump():
    machine = Machine.from_source('1!')

    expected = '\n'.join([
        '===== Virtual Machine State =====',
        'Program counter: 0',
        'Stack: []',
        '',
        'Instructions',
        '0\tNUM 1',
        '1\tPOP',
    ])

    assert machine.dump() == expected
    assert str(machine) == expected


def test_dump_does_not_mutate():
    machine = Machine.from_source('12', ScriptedConsole())
    machine.step()

    before = machine.dump()
    machine.dump()
    machine.debug_dump()

    assert machine.dump() == before
    assert 'Program counter: 1' in before
    assert 'Stack: [1]' in before
    assert machine.stack_values() == [1]
