"""Infrastructure — database engine/session management and logging setup.

Invariants:
    - Owns process-wide resources (engine, root logger handlers)
    - Initialized and torn down only from the FastAPI lifespan or CLI entry points
"""
