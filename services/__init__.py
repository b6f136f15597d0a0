"""
services/ - Business Logic
==========================
Caller-side orchestration on top of the repositories: validation, credential
hashing, conflict handling and the hand-off to the notification collaborator.
"""
