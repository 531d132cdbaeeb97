"""Services — multi-step operations: auth flows and transactional writes.

Invariants:
    - Every write goes through infrastructure.database.transaction()
    - Services raise AppError subclasses; routes never build error responses
"""
