"""Infrastructure Layer: database, token signing, password hashing, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Storage failures are mapped to DatabaseError before reaching callers
"""
