"""StudyHub Application Package: study-group coordination API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
