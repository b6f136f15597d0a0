"""
utils/ - Shared Helpers
=======================
Logging setup and the field-level validation engine.
"""
