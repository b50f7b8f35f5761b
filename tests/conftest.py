"""
Pytest configuration and shared fixtures for the site API.

This module provides common test fixtures and configuration used across
unit and integration tests.
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import pytest

# Handler modules read configuration at import time, so the environment is
# prepared before anything from site_api is imported.
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "test",
    "AWS_SECRET_ACCESS_KEY": "test",
    "ENVIRONMENT": "test",
    "POWERTOOLS_SERVICE_NAME": "test-site-api",
    "POWERTOOLS_METRICS_NAMESPACE": "TestSiteApi",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    "LOG_LEVEL": "DEBUG",
    "LAMBDA_ENV_MODELER_DISABLE_CACHE": "true",
    "CORS_ALLOW_ORIGIN": "https://www.hirokit.jp",
    "AUTH_SECRET_NAME": "test/auth-credentials",
    "PRIVATE_KEY_SECRET_NAME": "test/cloudfront-private-key",
    "CLOUDFRONT_KEY_PAIR_ID": "K2JCJMDEHXQW5F",
    "OPENAI_API_KEY_PARAMETER_NAME": "/test/openai-api-key",
    "GOOGLE_API_KEY_PARAMETER_NAME": "/test/google-api-key",
    "GOOGLE_SEARCH_ENGINE_ID_PARAMETER_NAME": "/test/google-search-engine-id",
    "FEATURE_REQUEST_TABLE_NAME": "test-feature-requests",
})

import boto3  # noqa: E402
from aws_lambda_env_modeler import get_environment_variables  # noqa: E402
from cryptography.hazmat.primitives import serialization  # noqa: E402
from cryptography.hazmat.primitives.asymmetric import rsa  # noqa: E402
from moto import mock_aws  # noqa: E402

from site_api.dal.llm_client import reset_openai_clients  # noqa: E402
from site_api.handlers.utils.observability import metrics  # noqa: E402
from site_api.logic.credential_gate import hash_password  # noqa: E402
from site_api.security.secrets_manager import reset_secret_store  # noqa: E402

ALLOWED_ORIGIN = "https://www.hirokit.jp"
TEST_USERNAME = "hiroki"
TEST_PASSWORD = "correct horse battery staple"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached clients, secrets and configuration between tests."""
    from site_api.handlers import auth_handler, feature_request_handler, search_handler

    def reset():
        reset_secret_store()
        reset_openai_clients()
        auth_handler.reset_credential_gate()
        search_handler.reset_search_client()
        feature_request_handler.reset_feature_request_service()
        cache_clear = getattr(get_environment_variables, "cache_clear", None)
        if cache_clear:
            cache_clear()
        metrics.clear_metrics()

    reset()
    yield
    reset()


# AWS fixtures
@pytest.fixture
def aws():
    """Start moto for every AWS service used by the handlers."""
    with mock_aws():
        yield


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    """Throwaway RSA key standing in for the CloudFront signing key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(private_key) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


@pytest.fixture
def auth_secrets(aws, private_key_pem):
    """Create the credential record and signing key in Secrets Manager."""
    client = boto3.client("secretsmanager", region_name="us-east-1")
    client.create_secret(
        Name=os.environ["AUTH_SECRET_NAME"],
        SecretString=json.dumps({
            "username": TEST_USERNAME,
            "passwordHash": hash_password(TEST_PASSWORD),
        }),
    )
    client.create_secret(Name=os.environ["PRIVATE_KEY_SECRET_NAME"], SecretString=private_key_pem)
    return client


@pytest.fixture
def api_parameters(aws):
    """Create the OpenAI and Google parameters in SSM Parameter Store."""
    client = boto3.client("ssm", region_name="us-east-1")
    for name, value in (
        (os.environ["OPENAI_API_KEY_PARAMETER_NAME"], "sk-test"),
        (os.environ["GOOGLE_API_KEY_PARAMETER_NAME"], "google-test-key"),
        (os.environ["GOOGLE_SEARCH_ENGINE_ID_PARAMETER_NAME"], "engine-123"),
    ):
        client.put_parameter(Name=name, Value=value, Type="SecureString")
    return client


@pytest.fixture
def feature_request_table(aws):
    """Create a mock DynamoDB table for feature requests."""
    dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
    table = dynamodb.create_table(
        TableName=os.environ["FEATURE_REQUEST_TABLE_NAME"],
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    return table


# Lambda fixtures
@pytest.fixture
def lambda_context():
    """Create a Lambda context for testing."""

    @dataclass
    class LambdaContext:
        function_name: str = "test-site-api-function"
        function_version: str = "$LATEST"
        memory_limit_in_mb: int = 512
        invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:test-site-api-function"
        aws_request_id: str = "test-request-id-123"
        log_group_name: str = "/aws/lambda/test-site-api-function"
        log_stream_name: str = "2024/01/01/[$LATEST]test123"

        def get_remaining_time_in_millis(self) -> int:
            return 30000

    return LambdaContext()


@pytest.fixture
def make_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST proxy events."""

    def _make_event(
        method: str,
        path: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        all_headers = {"Origin": ALLOWED_ORIGIN, "Content-Type": "application/json"}
        all_headers.update(headers or {})
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        return {
            "resource": path,
            "path": path,
            "httpMethod": method,
            "headers": all_headers,
            "multiValueHeaders": {key: [value] for key, value in all_headers.items()},
            "queryStringParameters": None,
            "multiValueQueryStringParameters": None,
            "pathParameters": None,
            "stageVariables": None,
            "requestContext": {
                "requestId": "api-request-id-456",
                "stage": "prod",
                "resourcePath": path,
                "httpMethod": method,
                "path": f"/prod{path}",
                "accountId": "123456789012",
                "apiId": "testapi123",
                "identity": {"sourceIp": "127.0.0.1"},
            },
            "body": body,
            "isBase64Encoded": False,
        }

    return _make_event


def response_header(response: Dict[str, Any], name: str) -> Optional[str]:
    """First value of a response header, whichever shape the resolver produced."""
    for key, value in (response.get("headers") or {}).items():
        if key.lower() == name.lower():
            return value
    for key, values in (response.get("multiValueHeaders") or {}).items():
        if key.lower() == name.lower():
            return values[0] if values else None
    return None


def response_cookies(response: Dict[str, Any]) -> list:
    """All ``Set-Cookie`` header values of a response."""
    return (response.get("multiValueHeaders") or {}).get("Set-Cookie", [])


def response_body(response: Dict[str, Any]) -> Any:
    return json.loads(response["body"])


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
