import click

from .. import __version__
from .commands.create import create_command
from .commands.diff import diff_command


@click.group()
@click.version_option(__version__, prog_name="ig-summary")
def app() -> None:
    pass


app.add_command(create_command, name="create")
app.add_command(diff_command, name="diff")
__all__ = ["app"]
