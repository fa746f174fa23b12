"""Domain layer (pure logic).

- Keep challenge selection and leaderboard rules here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI, no Redis.
- Prefer deterministic functions (the current time is passed in as an argument).
"""
