"""
security/ - Credentials
=======================
One-way password hashing and verification.
"""
