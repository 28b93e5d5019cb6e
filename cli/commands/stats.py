# cli/commands/stats.py
import click

from core import config
from core.errors import ShelfError
from core.sa.repositories.library import LibraryRepository
from core.sa.repositories.reading_session import ReadingSessionRepository
from core.stats.reading import library_summary, per_day_buckets, session_totals, weekly_totals
from ..utils import fail_on, open_session, render_heatmap, require_user


@click.command()
@click.option('--user-id', type=int, required=True, help='User to report on')
@click.option('--days', default=config.HEATMAP_WINDOW_DAYS, type=click.IntRange(min=1), help='Heatmap window in days')
@click.option('--weeks', default=config.WEEKLY_TOTALS_LIMIT, type=click.IntRange(min=1), help='Number of recent weeks to total')
@click.pass_context
def stats(ctx, user_id, days, weeks):
    """Show reading statistics, weekly totals and a reading heatmap"""
    with open_session(ctx) as session:
        require_user(session, user_id)
        try:
            entries = LibraryRepository(session).list_entries(user_id=user_id)
            sessions = ReadingSessionRepository(session).list_sessions(user_id)
        except ShelfError as e:
            fail_on(e)

    summary = library_summary(entries)
    counts = summary['shelf_counts']
    click.echo(click.style("Library:", fg='blue'))
    click.echo(f"  {counts['all']} books - {counts['to_read']} to read, "
               f"{counts['reading']} reading, {counts['read']} read")
    click.echo(f"  Average rating: {summary['average_rating']}/10 ({summary['rated_count']} rated)")
    click.echo(f"  Added this month: {summary['books_this_month']}")
    click.echo(f"  Reading streak: {summary['reading_streak']}")

    totals = session_totals(sessions)
    click.echo(click.style("\nSessions:", fg='blue'))
    click.echo(f"  {totals['total_minutes']} minutes, {totals['total_pages']} pages "
               f"over {totals['reading_days']} days")

    click.echo(click.style(f"\nLast {weeks} weeks:", fg='blue'))
    weekly = weekly_totals(sessions, weeks)
    if not weekly:
        click.echo("  No sessions logged yet.")
    for week in weekly:
        click.echo(f"  {week.label:>9}: {week.minutes} min")

    click.echo(click.style(f"\nLast {days} days:", fg='blue'))
    for row in render_heatmap(per_day_buckets(sessions, days)):
        click.echo(f"  {row}")
