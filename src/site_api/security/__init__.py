"""
Security Module.

Secret and parameter lookup with a per-instance cache, and CloudFront signed
cookie generation.
"""

from .cookie_signer import CookieSigner, parse_cookie_header, policy_expire_time
from .secrets_manager import SecretNotFoundError, SecretRetrievalError, SecretStore, get_secret_store

__all__ = [
    "CookieSigner",
    "parse_cookie_header",
    "policy_expire_time",
    "SecretStore",
    "SecretNotFoundError",
    "SecretRetrievalError",
    "get_secret_store",
]
