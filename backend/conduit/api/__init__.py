"""API Layer - FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return RealWorld JSON envelopes

Design Decisions:
    - Thin routes build a command, dispatch it and unwrap the Result
"""
