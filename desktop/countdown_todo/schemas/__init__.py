"""Pydantic Schemas — record models parsed from command envelope data.

Invariants:
    - Schemas validate at the system boundary (backend responses)
    - Domain types from core/ used for enum fields
"""
