"""
Client-side relevance state: the active-geofence and relevant-note stores,
their expiry timers and listener delivery, plus the HTTP client for the
relevance API.
"""
