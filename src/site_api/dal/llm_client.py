"""
Lazily built OpenAI client keyed on an API key stored in SSM Parameter Store.
"""

from typing import Dict

from openai import OpenAI

from site_api.handlers.utils.observability import logger
from site_api.security.secrets_manager import SecretStore

OPENAI_MAX_RETRIES = 2
OPENAI_TIMEOUT_SECONDS = 60.0

# parameter name -> client, one per warm instance
_clients: Dict[str, OpenAI] = {}


def get_openai_client(secret_store: SecretStore, parameter_name: str) -> OpenAI:
    """
    Get or create the OpenAI client for the key stored under ``parameter_name``.

    Raises:
        DependencyError: If the API key parameter cannot be read
    """
    client = _clients.get(parameter_name)
    if client is None:
        api_key = secret_store.get_parameter(parameter_name)
        client = OpenAI(api_key=api_key, max_retries=OPENAI_MAX_RETRIES, timeout=OPENAI_TIMEOUT_SECONDS)
        _clients[parameter_name] = client
        logger.debug("OpenAI client initialized")
    return client


def reset_openai_clients() -> None:
    _clients.clear()
