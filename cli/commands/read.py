# cli/commands/read.py
import click

from core.errors import ShelfError
from core.models.library import NewReadingSession, ProgressUpdate
from core.sa.repositories.library import LibraryRepository
from core.sa.repositories.reading_progress import ReadingProgressRepository
from core.sa.repositories.reading_session import ReadingSessionRepository
from core.stats.reading import days_to_goal, progress_percentage, utc_today
from ..utils import fail, fail_on, open_session, require_user


@click.group()
def read():
    """Log reading sessions and track progress through books"""
    pass


@read.command()
@click.option('--user-id', type=int, required=True, help='User who did the reading')
@click.option('--minutes', type=click.IntRange(min=0), required=True, help='Minutes spent reading')
@click.option('--pages', type=click.IntRange(min=0), default=None, help='Pages read')
@click.option('--book-id', type=int, default=None, help='Library entry that was read')
@click.option('--date', 'read_on', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
              help='Day of the session (YYYY-MM-DD, default: today)')
@click.pass_context
def log(ctx, user_id, minutes, pages, book_id, read_on):
    """Log a reading session"""
    with open_session(ctx) as session:
        require_user(session, user_id)
        if book_id is not None and LibraryRepository(session).get_by_id(book_id) is None:
            fail(f"Library entry {book_id} not found")
        try:
            logged = ReadingSessionRepository(session).create_session(NewReadingSession(
                user_id=user_id,
                book_id=book_id,
                date=read_on.date() if read_on else utc_today(),
                minutes=minutes,
                pages=pages,
            ))
        except ShelfError as e:
            fail_on(e)
        click.echo(click.style(f"Logged {logged.minutes} minutes on {logged.date.isoformat()}", fg='green'))


@read.command()
@click.option('--user-id', type=int, required=True, help='User whose sessions to show')
@click.option('--limit', default=20, type=int, help='Maximum number of sessions to show')
@click.pass_context
def history(ctx, user_id, limit):
    """Show recent reading sessions"""
    with open_session(ctx) as session:
        require_user(session, user_id)
        try:
            sessions = ReadingSessionRepository(session).list_sessions(user_id)
        except ShelfError as e:
            fail_on(e)
        if not sessions:
            click.echo("No reading sessions logged yet.")
            return
        for s in sessions[:limit]:
            pages = f", {s.pages} pages" if s.pages is not None else ''
            book = f" (book {s.book_id})" if s.book_id is not None else ''
            click.echo(f"{s.date.isoformat()}: {s.minutes} min{pages}{book}")


@read.command()
@click.argument('book_id', type=int)
@click.option('--user-id', type=int, required=True, help='User who is reading')
@click.option('--page', type=click.IntRange(min=0), default=None, help='Page you are on')
@click.option('--total-pages', type=click.IntRange(min=0), default=None, help='Length of the book')
@click.option('--goal', 'goal', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
              help='Date you want to finish by (YYYY-MM-DD)')
@click.pass_context
def progress(ctx, book_id, user_id, page, total_pages, goal):
    """Record where you are in a book.

    Options left out keep their saved values.

    Example:
        shelf read progress 3 --user-id 1 --page 120 --total-pages 412
    """
    fields = {'current_page': page, 'total_pages': total_pages,
              'reading_goal_date': goal.date() if goal else None}
    fields = {name: value for name, value in fields.items() if value is not None}
    if not fields:
        fail("Give at least one of --page, --total-pages or --goal")

    with open_session(ctx) as session:
        require_user(session, user_id)
        entry = LibraryRepository(session).get_by_id(book_id)
        if entry is None or entry.user_id != user_id:
            fail(f"Library entry {book_id} not found")
        try:
            saved = ReadingProgressRepository(session).upsert_progress(
                ProgressUpdate(user_id=user_id, book_id=book_id, **fields))
        except ShelfError as e:
            fail_on(e)
        click.echo(click.style(f"{entry.title}: ", fg='green') + _describe(saved))


@read.command()
@click.option('--user-id', type=int, required=True, help='User whose books to show')
@click.pass_context
def current(ctx, user_id):
    """Show progress in every tracked book"""
    with open_session(ctx) as session:
        require_user(session, user_id)
        library = LibraryRepository(session)
        try:
            tracked = ReadingProgressRepository(session).list_progress(user_id)
        except ShelfError as e:
            fail_on(e)
        if not tracked:
            click.echo("No reading progress recorded yet.")
            return
        for p in tracked:
            entry = library.get_by_id(p.book_id)
            title = entry.title if entry else f"Book {p.book_id}"
            click.echo(click.style(f"[{p.book_id}] ", fg='cyan') + f"{title}: " + _describe(p))


def _describe(p) -> str:
    pages = f"page {p.current_page}/{p.total_pages}" if p.total_pages else f"page {p.current_page}"
    text = f"{pages} ({progress_percentage(p.current_page, p.total_pages)}%)"
    days = days_to_goal(p.reading_goal_date)
    if days is None:
        return text
    if days < 0:
        return text + click.style(f", goal passed {-days} days ago", fg='red')
    return text + f", {days} days to goal"
