"""
NotesHub.

- backend/: API, services, repositories, database, configuration
- frontend/: Browser client served by the backend (static assets)
"""
