# cli/commands/library.py
import click

from core import config
from core.errors import ShelfError
from core.search.google_books import GoogleBooksClient
from core.sa.repositories.library import LibraryRepository
from core.stats.reading import SHELVES, SORT_KEYS, filter_shelf, sort_entries
from core.status import StatusTransitionManager
from core.workflow import AddBookWorkflow, Done, DuplicateBlocked, Failed, Idle, RatingReview
from ..utils import echo_candidates, echo_entry, fail, fail_on, open_session, require_user, shelf_label


@click.group()
def library():
    """Manage your book library"""
    pass


@library.command()
@click.argument('query', required=False)
@click.option('--user-id', type=int, required=True, help='User who owns the library')
@click.option('--max-results', default=config.SEARCH_MAX_RESULTS, type=int, help='Number of search results to show')
@click.pass_context
def add(ctx, query, user_id, max_results):
    """Search for a book and add it to a shelf.

    Example:
        shelf library add "dune herbert" --user-id 1
    """
    with open_session(ctx) as session:
        require_user(session, user_id)
        store = LibraryRepository(session)
        flow = AddBookWorkflow(GoogleBooksClient(), store, user_id=user_id, max_results=max_results)

        try:
            state = flow.search(query or click.prompt("Search for a book"))
            if isinstance(state, Idle):
                fail(state.error)

            results = flow.results
            if not results:
                click.echo(click.style("No books found.", fg='yellow'))
                flow.cancel()
                return

            echo_candidates(results)
            choice = click.prompt("Pick a book (0 to cancel)", type=click.IntRange(0, len(results)))
            if choice == 0:
                flow.cancel()
                click.echo("Cancelled.")
                return
            flow.select(choice - 1)

            status = click.prompt("Reading status", type=click.Choice(SHELVES), default='to_read')
            state = flow.choose_status(status)
            if isinstance(state, RatingReview):
                stars = click.prompt("Rating in stars (0 to skip)", type=click.FloatRange(0, 5), default=0.0)
                review = click.prompt("Review (optional)", default='', show_default=False)
                state = flow.submit_rating(stars, review)

            while isinstance(state, Failed):
                click.echo(click.style(f"Failed to add book: {state.message}", fg='red'), err=True)
                if not click.confirm("Try again?", default=True):
                    flow.acknowledge()
                    raise click.Abort()
                state = flow.retry()

            if isinstance(state, DuplicateBlocked):
                _offer_status_change(store, state.existing)
                flow.acknowledge()
                return

            if isinstance(state, Done):
                click.echo(click.style(
                    f"{state.entry.title} added as {shelf_label(state.entry.status.value)}!", fg='green'))
        except ShelfError as e:
            fail_on(e)


def _offer_status_change(store, existing):
    click.echo(click.style("This book already exists in your library:", fg='yellow'))
    echo_entry(existing)
    if not click.confirm("Move it to another shelf?", default=False):
        return
    new_status = click.prompt("New status", type=click.Choice(SHELVES))
    updated = StatusTransitionManager(store).transition(existing, new_status)
    click.echo(click.style(f"{updated.title} moved to {shelf_label(updated.status.value)}!", fg='green'))


@library.command(name='list')
@click.option('--user-id', type=int, required=True, help='User who owns the library')
@click.option('--shelf', type=click.Choice(['all'] + SHELVES), default='all', help='Only show one shelf')
@click.option('--sort', 'sort_by', type=click.Choice(SORT_KEYS), default='recent', help='Sort order')
@click.option('--title', default=None, help='Only show books whose title contains this text')
@click.option('--verbose/--no-verbose', default=False, help='Show release dates and reviews')
@click.pass_context
def list_entries(ctx, user_id, shelf, sort_by, title, verbose):
    """List the books in a library"""
    with open_session(ctx) as session:
        require_user(session, user_id)
        repo = LibraryRepository(session)
        try:
            if title:
                entries = repo.search_by_title(title, user_id=user_id)
            else:
                entries = repo.list_entries(user_id=user_id)
        except ShelfError as e:
            fail_on(e)

        entries = sort_entries(filter_shelf(entries, shelf), sort_by)
        if not entries:
            click.echo("No books on this shelf yet.")
            return
        for entry in entries:
            echo_entry(entry, verbose=verbose)
        click.echo(click.style(f"\n{len(entries)} books", fg='blue'))


@library.command()
@click.argument('entry_id', type=int)
@click.argument('new_status', type=click.Choice(SHELVES))
@click.pass_context
def status(ctx, entry_id, new_status):
    """Move a book to another shelf"""
    with open_session(ctx) as session:
        store = LibraryRepository(session)
        try:
            entry = _get_entry(store, entry_id)
            updated = StatusTransitionManager(store).transition(entry, new_status)
        except ShelfError as e:
            fail_on(e)
        click.echo(click.style(f"Moved to {shelf_label(updated.status.value)} shelf", fg='green'))


@library.command()
@click.argument('entry_id', type=int)
@click.argument('stars', type=click.FloatRange(0, 5))
@click.pass_context
def rate(ctx, entry_id, stars):
    """Rate a book from 0 to 5 stars (quarter stars allowed)"""
    with open_session(ctx) as session:
        store = LibraryRepository(session)
        try:
            entry = _get_entry(store, entry_id)
            updated = StatusTransitionManager(store).set_rating(entry, stars)
        except ShelfError as e:
            fail_on(e)
        click.echo(click.style(f"Rated {updated.title} {stars:g}/5 stars", fg='green'))


@library.command()
@click.argument('entry_id', type=int)
@click.confirmation_option(prompt='Remove this book from your library?')
@click.pass_context
def remove(ctx, entry_id):
    """Remove a book from the library"""
    with open_session(ctx) as session:
        store = LibraryRepository(session)
        try:
            entry = _get_entry(store, entry_id)
            StatusTransitionManager(store).remove(entry)
        except ShelfError as e:
            fail_on(e)
        click.echo(click.style("Book removed from library", fg='green'))


def _get_entry(store, entry_id):
    entry = store.get_by_id(entry_id)
    if entry is None:
        fail(f"Library entry {entry_id} not found")
    return entry
