"""Service Layer — orchestrates repositories around the pure rules in core/.

Invariants:
    - Services own the transaction: repositories flush, services commit
    - Absence is signalled with None; invalid input with InkwellError subclasses
"""
