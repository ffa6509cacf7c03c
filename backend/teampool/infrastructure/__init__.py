"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All SQLAlchemy exceptions mapped to TeamPoolError subclasses before leaving this layer
"""
