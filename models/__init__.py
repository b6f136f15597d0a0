"""
models/ - Domain Models
=======================
Record types (movies, users) with their validation rules, and the
transient pagination/sort filter used by list queries.
"""
