"""
Credential gate business logic.

Issues CloudFront signed cookies to a user whose password matches the credential
record in Secrets Manager, and checks previously issued cookies for expiry.
Nothing is persisted: the cookies themselves carry the expiry.
"""

import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from aws_lambda_powertools.metrics import MetricUnit

from site_api.handlers.utils.errors import AuthenticationError, ConfigurationError, DependencyError
from site_api.handlers.utils.observability import logger, metrics, tracer
from site_api.models.input import Credential
from site_api.security.cookie_signer import (
    POLICY_COOKIE,
    SIGNED_COOKIE_NAMES,
    CookieSigner,
    InvalidPolicyError,
    policy_expire_time,
)
from site_api.security.secrets_manager import SecretStore

DEFAULT_COOKIE_TTL_SECONDS = 3600


@dataclass(frozen=True)
class IssuedCookies:
    """Cookie values and their shared expiry."""

    cookies: Dict[str, str]
    expire_time: int


def hash_password(password: str) -> str:
    """Hex SHA-256 digest, the format stored in the credential record."""
    return hashlib.sha256(password.encode('utf-8')).hexdigest()


class CredentialGate:
    """Verifies logins and issues or checks signed cookies."""

    def __init__(
        self,
        secret_store: SecretStore,
        auth_secret_name: str,
        private_key_secret_name: str,
        key_pair_id: str,
        resource: str = '*',
        ttl_seconds: int = DEFAULT_COOKIE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        if not key_pair_id:
            raise ConfigurationError('CloudFront key pair id is not set')
        self.secret_store = secret_store
        self.auth_secret_name = auth_secret_name
        self.private_key_secret_name = private_key_secret_name
        self.key_pair_id = key_pair_id
        self.resource = resource
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._signer: Optional[CookieSigner] = None

    @tracer.capture_method
    def issue(self, credential: Credential) -> IssuedCookies:
        """
        Verify a login and issue signed cookies valid for ``ttl_seconds``.

        Args:
            credential: Submitted username and password

        Returns:
            Cookie values and their expiry in epoch seconds

        Raises:
            AuthenticationError: If username or password does not match
            DependencyError: If the credential record or signing key cannot be loaded
        """
        record, private_key = self.secret_store.get_secrets([self.auth_secret_name, self.private_key_secret_name])

        if not self._matches(credential, record):
            metrics.add_metric(name="AuthenticationFailed", unit=MetricUnit.Count, value=1)
            logger.info("Authentication failed")
            raise AuthenticationError()

        signer = self._get_signer(private_key)
        expire_time = int(self.clock()) + self.ttl_seconds
        cookies = signer.signed_cookies(self.resource, expire_time)

        metrics.add_metric(name="AuthenticationSucceeded", unit=MetricUnit.Count, value=1)
        logger.info("Signed cookies issued", extra={"expire_time": expire_time, "resource": self.resource})
        return IssuedCookies(cookies=cookies, expire_time=expire_time)

    @tracer.capture_method
    def check(self, cookies: Mapping[str, str]) -> bool:
        """
        Check that a request carries the full cookie set and that it has not expired.

        Never raises: a missing cookie or an undecodable policy is simply not authenticated.
        The signature itself is verified by CloudFront, not here.
        """
        if any(not cookies.get(name) for name in SIGNED_COOKIE_NAMES):
            logger.debug("Signed cookie set incomplete")
            return False

        try:
            expire_time = policy_expire_time(cookies[POLICY_COOKIE])
        except InvalidPolicyError:
            logger.info("Rejected malformed policy cookie")
            return False

        return self.clock() < expire_time

    def _matches(self, credential: Credential, record: object) -> bool:
        if not isinstance(record, dict):
            raise DependencyError('Credential record is not a JSON object', service_name='secretsmanager')
        stored_username = record.get('username')
        stored_hash = record.get('passwordHash')
        if not isinstance(stored_username, str) or not isinstance(stored_hash, str):
            raise DependencyError('Credential record is missing username or passwordHash', service_name='secretsmanager')

        # both comparisons always run
        username_ok = hmac.compare_digest(credential.username.encode('utf-8'), stored_username.encode('utf-8'))
        password_ok = hmac.compare_digest(
            hash_password(credential.password).encode('ascii'), stored_hash.lower().encode('utf-8')
        )
        return username_ok and password_ok

    def _get_signer(self, private_key: object) -> CookieSigner:
        if self._signer is None:
            if not isinstance(private_key, str) or not private_key.strip():
                raise DependencyError('Private key not found', service_name='secretsmanager')
            try:
                self._signer = CookieSigner(private_key, self.key_pair_id)
            except (TypeError, ValueError) as e:
                raise DependencyError('Private key could not be loaded', service_name='secretsmanager') from e
        return self._signer
