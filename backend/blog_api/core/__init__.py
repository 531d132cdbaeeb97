"""Core — framework-light building blocks shared by routes and services.

Invariants:
    - No ORM queries here; persistence lives in repositories/
"""
