"""API Schemas: Pydantic request/response models validated before domain logic runs.

Invariants:
    - Required text fields are stripped and must be non-empty
    - Response models mirror the JSON keys the frontend already consumes
"""
