# cli/commands/user.py
import click

from core.sa.repositories.user import UserRepository
from ..utils import fail, open_session


@click.group()
def user():
    """User management commands"""
    pass


@user.command()
@click.argument('name')
@click.pass_context
def create(ctx, name):
    """Create a new user"""
    with open_session(ctx) as session:
        try:
            created = UserRepository(session).create_user(name)
        except ValueError as e:
            fail(str(e))
        click.echo(f"Created user: {created.name} (ID: {created.id})")


@user.command(name='list')
@click.pass_context
def list_users(ctx):
    """List all users"""
    with open_session(ctx) as session:
        users = UserRepository(session).list_users_with_book_counts()
        if not users:
            click.echo("No users yet.")
        for u, books in users:
            click.echo(f"{u.id}: {u.name} ({books} books)")
