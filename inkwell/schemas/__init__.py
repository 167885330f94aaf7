"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate shape at the system boundary (user input, API responses)
    - Responses are built from ORM objects by explicit from_* classmethods

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
