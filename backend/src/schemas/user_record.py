"""Plain user record shared by the store, cache, and service layers."""
from dataclasses import dataclass


@dataclass
class UserRecord:
    """
    A registered user, detached from any database session.

    Both the database store and the in-process cache hand these out, so callers
    never need to know which one answered. `email` is the unique, case-sensitive
    key. `password` is kept exactly as submitted.
    """

    email: str
    password: str
    name: str
    age: int
