"""
Secrets Manager and SSM Parameter Store integration.

This module fetches secrets and SecureString parameters by name and keeps them
in a process-wide cache. A value is fetched at most once per warm Lambda
instance; two invocations racing on a cold cache both fetch and the last write
wins, which is fine because the fetched values are identical.
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Union

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from site_api.handlers.utils.errors import DependencyError
from site_api.handlers.utils.observability import logger, metrics, tracer

SecretValue = Union[str, Dict[str, Any]]

BOTO_CONFIG = Config(retries={"max_attempts": 3, "mode": "standard"})
PARALLEL_FETCH_WORKERS = 2


class SecretNotFoundError(DependencyError):
    """Exception raised when a secret or parameter does not exist or is empty."""

    def __init__(self, message: str, service_name: str = "secretsmanager"):
        super().__init__(message, service_name=service_name)


class SecretRetrievalError(DependencyError):
    """Exception raised when a secret or parameter cannot be read."""

    def __init__(self, message: str, service_name: str = "secretsmanager"):
        super().__init__(message, service_name=service_name)


class SecretStore:
    """
    Read-only lookup of secrets and parameters with a populate-once cache.

    Features:
    - Secrets Manager secrets, parsed as JSON when possible
    - SSM parameters with decryption
    - Concurrent fetch of a small batch of names
    - Bounded botocore retries for transient failures
    """

    def __init__(self, region_name: Optional[str] = None, endpoint_url: Optional[str] = None):
        """
        Initialize the store. Clients are created on first use.

        Args:
            region_name: AWS region name, defaults to the Lambda region
            endpoint_url: Custom endpoint URL (for testing)
        """
        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self._secrets_client = None
        self._ssm_client = None
        self._cache: Dict[str, SecretValue] = {}

    @property
    def secrets_client(self):
        if self._secrets_client is None:
            self._secrets_client = boto3.client(
                'secretsmanager',
                region_name=self.region_name,
                endpoint_url=self.endpoint_url,
                config=BOTO_CONFIG,
            )
        return self._secrets_client

    @property
    def ssm_client(self):
        if self._ssm_client is None:
            self._ssm_client = boto3.client(
                'ssm',
                region_name=self.region_name,
                endpoint_url=self.endpoint_url,
                config=BOTO_CONFIG,
            )
        return self._ssm_client

    @tracer.capture_method
    def get_secret(self, secret_name: str) -> SecretValue:
        """
        Get secret value from AWS Secrets Manager.

        Args:
            secret_name: Name or ARN of the secret

        Returns:
            Secret value (string or parsed JSON dict)

        Raises:
            SecretNotFoundError: If secret doesn't exist or has no string value
            SecretRetrievalError: If secret cannot be read
        """
        return self._cached(f"secret:{secret_name}", secret_name, self._fetch_secret)

    @tracer.capture_method
    def get_parameter(self, parameter_name: str) -> str:
        """
        Get a decrypted parameter value from SSM Parameter Store.

        Args:
            parameter_name: Name of the parameter

        Returns:
            Parameter value

        Raises:
            SecretNotFoundError: If parameter doesn't exist or is empty
            SecretRetrievalError: If parameter cannot be read
        """
        return self._cached(f"parameter:{parameter_name}", parameter_name, self._fetch_parameter)

    def get_secrets(self, secret_names: List[str]) -> List[SecretValue]:
        """Fetch several secrets concurrently, preserving the order of names."""
        # boto3 client creation is not thread safe
        _ = self.secrets_client
        return self._fetch_many(self.get_secret, secret_names)

    def get_parameters(self, parameter_names: List[str]) -> List[str]:
        """Fetch several parameters concurrently, preserving the order of names."""
        _ = self.ssm_client
        return self._fetch_many(self.get_parameter, parameter_names)

    def clear_cache(self) -> None:
        """Drop every cached value so the next lookup refetches."""
        self._cache.clear()
        logger.info("Cleared all cached secrets")

    def _fetch_many(self, fetch: Callable[[str], Any], names: List[str]) -> List[Any]:
        with ThreadPoolExecutor(max_workers=PARALLEL_FETCH_WORKERS) as executor:
            return list(executor.map(fetch, names))

    def _cached(self, cache_key: str, name: str, fetch: Callable[[str], SecretValue]) -> Any:
        if cache_key in self._cache:
            metrics.add_metric(name="SecretCacheHit", unit=MetricUnit.Count, value=1)
            return self._cache[cache_key]

        start_time = time.time()
        value = fetch(name)
        self._cache[cache_key] = value

        duration_ms = (time.time() - start_time) * 1000
        metrics.add_metric(name="SecretCacheMiss", unit=MetricUnit.Count, value=1)
        logger.info("Secret retrieved successfully", extra={"secret_name": name, "duration_ms": duration_ms})
        return value

    def _fetch_secret(self, secret_name: str) -> SecretValue:
        try:
            response = self.secrets_client.get_secret_value(SecretId=secret_name)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            if error_code == 'ResourceNotFoundException':
                logger.error(f"Secret not found: {secret_name}")
                raise SecretNotFoundError(f"Secret '{secret_name}' not found") from e
            logger.error(f"Failed to retrieve secret '{secret_name}': {error_code}")
            raise SecretRetrievalError(f"Failed to retrieve secret '{secret_name}': {error_code}") from e
        except BotoCoreError as e:
            logger.error(f"Failed to reach Secrets Manager for '{secret_name}': {e}")
            raise SecretRetrievalError(f"Failed to retrieve secret '{secret_name}'") from e

        secret_string = response.get('SecretString')
        if not secret_string:
            raise SecretNotFoundError(f"Secret '{secret_name}' has no string value")

        try:
            return json.loads(secret_string)
        except json.JSONDecodeError:
            return secret_string

    def _fetch_parameter(self, parameter_name: str) -> str:
        try:
            response = self.ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            if error_code == 'ParameterNotFound':
                logger.error(f"Parameter not found: {parameter_name}")
                raise SecretNotFoundError(f"Parameter '{parameter_name}' not found", service_name="ssm") from e
            logger.error(f"Failed to retrieve parameter '{parameter_name}': {error_code}")
            raise SecretRetrievalError(
                f"Failed to retrieve parameter '{parameter_name}': {error_code}", service_name="ssm"
            ) from e
        except BotoCoreError as e:
            logger.error(f"Failed to reach SSM for '{parameter_name}': {e}")
            raise SecretRetrievalError(f"Failed to retrieve parameter '{parameter_name}'", service_name="ssm") from e

        value = response.get('Parameter', {}).get('Value')
        if not value:
            raise SecretNotFoundError(f"Parameter '{parameter_name}' is empty", service_name="ssm")
        return value


# Global secret store instance (lazily initialized)
_secret_store: Optional[SecretStore] = None


def get_secret_store() -> SecretStore:
    """Get or create the global secret store instance."""
    global _secret_store

    if _secret_store is None:
        _secret_store = SecretStore()

    return _secret_store


def reset_secret_store() -> None:
    """Forget the global secret store and everything it cached."""
    global _secret_store
    _secret_store = None
