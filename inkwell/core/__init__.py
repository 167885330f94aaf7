"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, repositories/ or db/
    - All functions are pure and deterministic (except errors carrying a timestamp)

Design Decisions:
    - Functional core separated from imperative shell: services orchestrate IO
      around these rules
"""
