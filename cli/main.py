# cli/main.py
import logging
import click

from core import config
from .commands.library import library
from .commands.read import read
from .commands.stats import stats
from .commands.user import user

@click.group()
@click.option('--database-url', envvar='DATABASE_URL', default=None, help='SQLAlchemy database URL')
@click.option('--log-level', envvar='LOG_LEVEL', default=config.LOG_LEVEL,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging verbosity')
@click.pass_context
def cli(ctx, database_url, log_level):
    """Reading Companion CLI"""
    logging.basicConfig(level=log_level.upper(), format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    ctx.ensure_object(dict)
    ctx.obj['database_url'] = database_url

cli.add_command(user)
cli.add_command(library)
cli.add_command(read)
cli.add_command(stats)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
