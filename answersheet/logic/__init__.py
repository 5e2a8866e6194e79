"""Store and request-dispatch logic; no FastAPI routing lives here."""
