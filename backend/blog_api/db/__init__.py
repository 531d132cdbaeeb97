"""Database Package — declarative Base, standalone session factory, seeding.

Invariants:
    - db/ never imports from api/ (usable from scripts and migrations)
"""
