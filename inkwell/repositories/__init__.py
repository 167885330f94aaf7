"""Repositories — SQLAlchemy implementations of the persistence adapter contract.

Invariants:
    - Each repository wraps one AsyncSession and never commits
    - Implements the Protocols in core/repository_protocols.py
"""
