"""Push notification service (API, Celery tick, offset scheduler, Web Push dispatcher).

The HTTP routes live in the main FastAPI app; the tick and dispatch tasks run in
a Celery worker with beat enabled.
"""
