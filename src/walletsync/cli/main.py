"""walletsync CLI main entry point."""

import click

from walletsync import __version__
from walletsync.cli.commands import positions_command, sync_command


@click.group()
@click.version_option(version=__version__)
def main():
    """walletsync - Trade history positions and wallet sync"""
    pass


main.add_command(positions_command)
main.add_command(sync_command)


if __name__ == "__main__":
    main()
