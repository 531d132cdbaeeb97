"""Repositories — every ORM query the API runs lives here.

Invariants:
    - Repositories flush but never commit; the caller owns the transaction
    - Lookups return None for missing rows; raising 404 is the caller's job
"""
