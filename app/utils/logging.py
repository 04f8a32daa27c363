"""
Logging utilities for tracking user activity on notes.
"""

from flask_login import current_user
from app.models import LogEntry
from app import db


def log_activity(category, description, project='notes'):
    """
    Record an activity log entry for the current user.

    Args:
        category (str): Short action label (e.g., 'Reminder Set', 'Reminder Cleared')
        description (str): Human-readable description of what happened
        project (str, optional): Project identifier. Defaults to 'notes'.

    The entry is added to the session and committed.
    """
    if current_user and current_user.is_authenticated:
        user_desc = f"User {current_user.email}"
        actor_id = current_user.id
    else:
        user_desc = "Anonymous user"
        actor_id = None

    log_entry = LogEntry(
        project=project,
        category=category,
        actor_id=actor_id,
        description=f"{user_desc}: {description}"
    )
    db.session.add(log_entry)
    db.session.commit()
