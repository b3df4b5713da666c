"""
Identity collaborator: bcrypt password hashing and JWT session tokens.
"""

from backend_journal.auth.passwords import hash_password, verify_password
from backend_journal.auth.tokens import TokenService

__all__ = ["TokenService", "hash_password", "verify_password"]
