"""postboard: a layered users/posts CRUD API (FastAPI + async SQLAlchemy)."""
