"""folioscope CLI main entry point."""

import click

from folioscope import __version__
from folioscope.cli.commands import analyze_command


@click.group()
@click.version_option(version=__version__)
def main():
    """folioscope - Portfolio Performance Analysis"""
    pass


# Register commands
main.add_command(analyze_command)


if __name__ == "__main__":
    main()
