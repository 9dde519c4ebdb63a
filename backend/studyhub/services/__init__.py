"""Services Layer: domain operations over a request-scoped AsyncSession.

Invariants:
    - One class per component; each owns its transaction boundary (commit/rollback)
    - Services raise StudyHubError subclasses, never HTTPException
"""
