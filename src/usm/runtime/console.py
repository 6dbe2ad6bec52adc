import click

from usm.common.machconf import INPUT_PROMPT


class Console:
    ''' Output and input side channels of a machine '''

    def write(self, value: int):
        click.echo(click.style(f'Output: {value}', fg='green', bold=True))

    def read_line(self) -> str:
        click.echo(click.style(INPUT_PROMPT, bold=True), nl=False)
        # Empty string on EOF
        return click.get_text_stream('stdin').readline()

    def report(self, error: Exception):
        click.echo(click.style(f'Error: {error}', fg='red'), err=True)
