import click
from contextlib import contextmanager
from typing import Iterator, List
from sqlalchemy.orm import Session

from core.errors import ShelfError
from core.models.library import LibraryEntry, SearchCandidate
from core.ratings import format_rating
from core.sa.database import Database
from core.sa.repositories.user import UserRepository
from core.stats.reading import DayBucket, chunk_weeks, heat_level

STATUS_COLORS = {
    'to_read': 'yellow',
    'reading': 'blue',
    'read': 'green',
}

# One glyph per heatmap level, from nothing read to an hour or more
HEAT_GLYPHS = ['·', '░', '▒', '▓', '█']


@contextmanager
def open_session(ctx: click.Context) -> Iterator[Session]:
    """Database session for a command, using the group's --database-url"""
    db = Database(ctx.obj.get('database_url') if ctx.obj else None)
    db.init_db()
    with db.get_db() as session:
        yield session


def require_user(session: Session, user_id: int):
    user = UserRepository(session).get_by_id(user_id)
    if user is None:
        fail(f"User {user_id} not found. Create one with 'shelf user create NAME'.")
    return user


def fail(message: str) -> None:
    """Print an error in red and abort the command"""
    click.echo(click.style(f"Error: {message}", fg='red'), err=True)
    raise click.Abort()


def fail_on(error: ShelfError) -> None:
    fail(error.message)


def shelf_label(status: str) -> str:
    return status.replace('_', ' ')


def echo_candidates(results: List[SearchCandidate]) -> None:
    for i, candidate in enumerate(results, 1):
        author = candidate.primary_author or 'Unknown author'
        year = f" ({candidate.published_date[:4]})" if candidate.published_date else ''
        click.echo(click.style(f"{i:>3}. ", fg='cyan') + f"{candidate.title}{year}" +
                   click.style(f" - {author}", fg='blue'))


def echo_entry(entry: LibraryEntry, verbose: bool = False) -> None:
    status = entry.status.value
    line = (click.style(f"[{entry.id}] ", fg='cyan') + entry.title +
            click.style(f" - {entry.author or 'Unknown author'}", fg='blue') +
            click.style(f"  {shelf_label(status)}", fg=STATUS_COLORS.get(status, 'white')))
    if entry.rating is not None:
        line += click.style(f"  {format_rating(entry.rating, out_of_five=True)}", fg='magenta')
    click.echo(line)
    if verbose:
        if entry.release_date:
            click.echo(f"      Published: {entry.release_date}")
        if entry.review:
            click.echo(f"      Review: {entry.review}")


def render_heatmap(buckets: List[DayBucket]) -> List[str]:
    """Rows are weekday positions, columns are weeks (oldest on the left)."""
    weeks = chunk_weeks(buckets)
    rows = []
    for day_index in range(7):
        row = ''
        for week in weeks:
            row += HEAT_GLYPHS[heat_level(week[day_index].minutes)] if day_index < len(week) else ' '
        rows.append(row)
    return rows

