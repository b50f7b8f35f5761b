"""
Environment variable models for type-safe configuration.

This module defines Pydantic models for the environment variables each Lambda
handler needs. Values are names of secrets and parameters to look up, never the
secret values themselves.
"""

from typing import Annotated, Literal, Type, TypeVar

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field, ValidationError

from site_api.handlers.utils.errors import ConfigurationError

DEFAULT_ALLOW_ORIGIN = 'https://www.hirokit.jp'

EnvModel = TypeVar('EnvModel', bound=BaseModel)


class CommonEnvVars(BaseModel):
    """Environment variables shared by all handlers."""

    # API Gateway settings
    CORS_ALLOW_ORIGIN: Annotated[str, Field(
        default=DEFAULT_ALLOW_ORIGIN,
        description='Origin allowed to call the API with credentials',
        min_length=1
    )] = DEFAULT_ALLOW_ORIGIN

    # Log level for AWS Powertools Logger
    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'


class AuthEnvVars(CommonEnvVars):
    """Environment variables for the credential gate."""

    # Secrets Manager secret holding {"username", "passwordHash"}
    AUTH_SECRET_NAME: Annotated[str, Field(
        description='Secrets Manager name of the login credential record',
        min_length=1
    )]

    # Secrets Manager secret holding the PEM encoded RSA private key
    PRIVATE_KEY_SECRET_NAME: Annotated[str, Field(
        description='Secrets Manager name of the CloudFront signing key',
        min_length=1
    )]

    CLOUDFRONT_KEY_PAIR_ID: Annotated[str, Field(
        description='CloudFront public key id matching the signing key',
        min_length=1
    )]

    COOKIE_RESOURCE: Annotated[str, Field(
        default='*',
        description='Resource pattern the signed cookies grant access to'
    )] = '*'

    COOKIE_TTL_SECONDS: Annotated[int, Field(
        default=3600,
        description='Lifetime of issued cookies in seconds',
        ge=60,
        le=86400
    )] = 3600


class ChatEnvVars(CommonEnvVars):
    """Environment variables for the chat handler."""

    OPENAI_API_KEY_PARAMETER_NAME: Annotated[str, Field(
        description='SSM parameter name of the OpenAI API key',
        min_length=1
    )]

    OPENAI_MODEL: Annotated[str, Field(
        default='gpt-4o-mini',
        description='Chat completion model'
    )] = 'gpt-4o-mini'


class SearchEnvVars(ChatEnvVars):
    """Environment variables for the search orchestrator."""

    GOOGLE_API_KEY_PARAMETER_NAME: Annotated[str, Field(
        description='SSM parameter name of the Google Custom Search API key',
        min_length=1
    )]

    GOOGLE_SEARCH_ENGINE_ID_PARAMETER_NAME: Annotated[str, Field(
        description='SSM parameter name of the Programmable Search Engine id',
        min_length=1
    )]

    # "required" forces a search on every turn
    SEARCH_TOOL_CHOICE: Annotated[Literal['auto', 'required'], Field(
        default='auto',
        description='Tool choice policy for the first model call'
    )] = 'auto'


class FeatureRequestEnvVars(CommonEnvVars):
    """Environment variables for the feature request handler."""

    FEATURE_REQUEST_TABLE_NAME: Annotated[str, Field(
        description='DynamoDB table name for feature requests',
        min_length=1
    )]


def get_handler_env_vars(model: Type[EnvModel]) -> EnvModel:
    """
    Get typed environment variables for a Lambda handler.

    Args:
        model: Environment model class to populate

    Returns:
        Validated environment variables model instance

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    try:
        return get_environment_variables(model=model)
    except ValidationError as e:
        missing = sorted(str(error['loc'][0]) for error in e.errors())
        raise ConfigurationError(f'Invalid environment configuration: {", ".join(missing)}') from e
