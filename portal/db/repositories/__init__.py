"""
Per-domain repository modules for database access.

Repository functions only query, add and modify ORM objects on the session
they receive. Committing is left to the business logic so that each request
persists its changes in one transaction.
"""
