#!/usr/bin/env python3
"""
Fetch relevant notes and registered geofences from a running API and print
them, using the same client stores the app uses.

Requires environment variables:
- ANCHORNOTES_API_URL: Base URL of the API (e.g. http://localhost:5000)
- ANCHORNOTES_TOKEN: Bearer token for the user

Usage:
  python scripts/show_relevant_notes.py [STATE_DIR] [GEOFENCE_ID ...]
"""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables from .env file
# Look for .env file in the project root (parent directory of scripts/)
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
else:
    load_dotenv()  # Fallback to default behavior

from app.client.api_client import AnchorNotesClient, ApiError
from app.client.services import RelevanceServices


def main():
    base_url = os.getenv('ANCHORNOTES_API_URL', '').strip()
    token = os.getenv('ANCHORNOTES_TOKEN', '').strip()
    if not base_url or not token:
        print("Error: ANCHORNOTES_API_URL and ANCHORNOTES_TOKEN must be set")
        return 1

    state_dir = sys.argv[1] if len(sys.argv) > 1 else '.anchornotes-state'
    entered = sys.argv[2:]

    client = AnchorNotesClient(base_url, token)
    services = RelevanceServices.create(state_dir, client=client)
    services.start()
    services.relevant_notes.add_listener(
        lambda ids: print(f"Relevant note ids: {sorted(ids) or '(none)'}")
    )

    try:
        geofences = client.list_geofences()
        print(f"{len(geofences)} geofences registered:")
        for g in geofences:
            print(f"  {g['geofenceId']}: ({g['latitude']}, {g['longitude']}) r={g['radiusMeters']}m")

        if entered:
            services.events.on_enter(entered)

        notes = services.events.refresh_from_server()
        print("=" * 60)
        for note in notes:
            print(f"{note['id']}\t{note.get('title') or '(untitled)'}\treminder={note.get('reminderTimeUtc') or '-'}")
        print("=" * 60)
        print(f"{len(notes)} relevant notes")
    except ApiError as e:
        print(f"Error: {e}")
        return 1
    finally:
        services.dispatcher.flush()
        services.shutdown()

    return 0


if __name__ == '__main__':
    sys.exit(main())
