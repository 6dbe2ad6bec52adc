import sys
from pathlib import Path
import logging as lg
import traceback

import click

from usm.common.machconf import EXIT_HALT, EXIT_PARSE_ERROR, EXIT_KEYBOARD, EXIT_EXEC_ERROR
from usm.asm.parser import ParseError, ParseSettings, load_program
from usm.runtime.console import Console
from usm.runtime.machine import Machine, Outcome


def execute(machine: Machine, debug: bool = False) -> Outcome:
    while True:
        if debug:
            click.echo(machine.dump())
            click.pause()

        outcome = machine.step()

        if outcome.halted:
            return outcome


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('-d', '--debug', is_flag=True, help='Show machine state and wait for a key every cycle')
@click.option('--multi-digit', is_flag=True, help='Read adjacent digits as one literal')
@click.argument('source_filename', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def run(verbose: bool, debug: bool, multi_digit: bool, source_filename: Path):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info('USM')

    settings = ParseSettings().update(multi_digit=multi_digit)

    try:
        machine = Machine(load_program(source_filename, settings))
        outcome = execute(machine, debug)

    except (ParseError, UnicodeDecodeError) as e:
        Console().report(e)
        sys.exit(EXIT_PARSE_ERROR)

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(EXIT_KEYBOARD)

    except Exception as e:
        lg.info(f'Execution halted on general error {e}')
        traceback.print_exc()
        sys.exit(EXIT_EXEC_ERROR)

    if outcome.error is not None:
        machine.console.report(outcome.error)
        sys.exit(EXIT_EXEC_ERROR)

    lg.info('Execution halted gracefully')
    sys.exit(EXIT_HALT)


if __name__ == '__main__':
    run()
