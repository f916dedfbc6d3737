"""
Repositories over the SQLAlchemy session.

Invariant:
Repositories must not encode domain decisions.
"""
