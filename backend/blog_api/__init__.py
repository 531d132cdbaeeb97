"""Blog API Package — users, posts and comments over FastAPI + SQLAlchemy.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
