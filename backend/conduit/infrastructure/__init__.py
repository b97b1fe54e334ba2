"""Infrastructure - database sessions, SQL store, security and logging adapters."""
