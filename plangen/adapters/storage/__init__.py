"""Plan storage adapters.

Only an in-memory store exists today; the abstract interface keeps routes
independent of the backend.
"""
