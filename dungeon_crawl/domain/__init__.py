"""Domain layer (pure logic).

- Keep game rules and calculations here: outcome resolution, session transitions.
- Avoid I/O: no DB sessions, no HTTP/FastAPI.
- Time and randomness are passed in as arguments.
"""
