"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool, schema initialization, per-call
timeouts and the translation of driver errors into the persistence error kinds.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
