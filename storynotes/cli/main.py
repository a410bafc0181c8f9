"""Main CLI entry point for Storynotes."""

import logging
import sys

import click

from .. import __version__
from ..config import create_sample_config
from ..errors import StorynotesError
from .generate import generate


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--config-file', '-c', help='Path to TOML configuration file (default: ./config.toml)')
@click.version_option(version=__version__, prog_name="storynotes")
@click.pass_context
def cli(ctx, debug, config_file):
    """Storynotes - release notes from unreleased commits and Shortcut stories."""

    # Setup logging
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config_file
    ctx.obj['logger'] = logging.getLogger('storynotes')


@cli.command()
@click.option('--path', '-p', default='config.toml', help='Path for the config file')
def init_config(path):
    """Create a sample configuration file."""
    try:
        create_sample_config(path)
    except (StorynotesError, OSError) as e:
        click.echo(f"Error creating config file: {e}", err=True)
        sys.exit(1)

    click.echo(f"Sample configuration file created at: {path}")
    click.echo("Please edit the file with your repositories and set SHORTCUT_TOKEN in .env.")


@cli.command()
def version():
    """Show version information."""
    click.echo(f"Storynotes version {__version__}")


cli.add_command(generate)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == '__main__':
    main()
