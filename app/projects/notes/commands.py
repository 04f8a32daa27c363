import click
from datetime import datetime
from flask.cli import with_appcontext
import logging

logger = logging.getLogger(__name__)

@click.group(name='notes')
def notes_cli():
    """Notes relevance commands."""
    pass

@notes_cli.command('relevant')
@click.argument('user_id', type=int)
@click.option('--now', 'now_str', default=None, help='ISO-8601 instant to evaluate at (default: current time)')
@click.option('--inside', default='', help='Comma-separated geofence ids the device is inside (e.g. note_3,note_7)')
@with_appcontext
def relevant_command(user_id, now_str, inside):
    """Print the notes relevant to a user right now."""
    from app.projects.notes.core.relevance import find_relevant_notes
    from app.projects.notes.utils import parse_utc_instant

    if now_str:
        try:
            now_utc = parse_utc_instant(now_str)
        except ValueError:
            raise click.BadParameter('must be an ISO-8601 timestamp', param_hint='--now')
    else:
        now_utc = datetime.utcnow()

    inside_ids = [g.strip() for g in inside.split(',') if g.strip()]
    notes = find_relevant_notes(user_id, now_utc, inside_ids)

    if not notes:
        click.echo("No relevant notes.")
        return

    for note in notes:
        reminder = note.reminder_time.isoformat() if note.reminder_time else '-'
        click.echo(f"{note.id}\t{note.title or '(untitled)'}\treminder={reminder}")

@notes_cli.command('geofences')
@click.argument('user_id', type=int)
@with_appcontext
def geofences_command(user_id):
    """Print the geofences a user's device should register."""
    from app.projects.geofences.feed import list_geofences_for_registration

    registrations = list_geofences_for_registration(user_id)
    if not registrations:
        click.echo("No geofences.")
        return

    for reg in registrations:
        click.echo(f"{reg['geofenceId']}\t{reg['latitude']},{reg['longitude']}\t{reg['radiusMeters']}m")
