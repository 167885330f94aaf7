"""Infrastructure Layer — storage, hashing, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All storage failures leave this layer as InkwellError subclasses
"""
