"""Services Layer — the team ledger engine: registry, membership, contributions, expenses.

Invariants:
    - Every service receives an explicit AsyncSession; multi-row writes run inside atomic(db)
    - Authorization and validation happen before the transaction scope opens
    - Services never call each other for writes; shared reads live in team_access

Design Decisions:
    - One service file per component for locality (ADR: no god objects)
"""
