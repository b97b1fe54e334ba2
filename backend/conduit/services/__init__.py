"""Services Layer - command/query handlers, relationship registry, dispatcher.

Invariants:
    - Handlers split by resource (profiles, articles, comments, users, tags, maintenance)
    - Dispatch uses explicit dict mapping (no auto-discovery)

Design Decisions:
    - One handler file per resource for locality
"""
