"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, response shapes)
    - Business validation (positive amounts, membership) stays in core/ and services/

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""
