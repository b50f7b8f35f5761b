"""
Auth Handler - Lambda function for the credential gate.

Routes:
- ``POST /auth``: verify a username/password and set CloudFront signed cookies
- ``GET /auth/check``: report whether the request carries a valid, unexpired cookie set
"""

import os
from typing import Any, Dict, Optional

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.shared.cookies import Cookie, SameSite
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from site_api.handlers.models.env_vars import AuthEnvVars, get_handler_env_vars
from site_api.handlers.utils.errors import ValidationError
from site_api.handlers.utils.observability import logger, metrics, tracer
from site_api.handlers.utils.rest_api_resolver import (
    AUTH_CHECK_PATH,
    AUTH_PATH,
    create_app,
    internal_error_response,
    json_response,
    parse_json_body,
)
from site_api.logic.credential_gate import CredentialGate
from site_api.models.input import Credential
from site_api.models.output import AuthCheckOutput, AuthOutput
from site_api.security.cookie_signer import parse_cookie_header
from site_api.security.secrets_manager import get_secret_store

app = create_app()

_credential_gate: Optional[CredentialGate] = None


def get_credential_gate() -> CredentialGate:
    """Get or create the credential gate for this instance."""
    global _credential_gate

    if _credential_gate is None:
        env = get_handler_env_vars(AuthEnvVars)
        _credential_gate = CredentialGate(
            secret_store=get_secret_store(),
            auth_secret_name=env.AUTH_SECRET_NAME,
            private_key_secret_name=env.PRIVATE_KEY_SECRET_NAME,
            key_pair_id=env.CLOUDFRONT_KEY_PAIR_ID,
            resource=env.COOKIE_RESOURCE,
            ttl_seconds=env.COOKIE_TTL_SECONDS,
        )

    return _credential_gate


def reset_credential_gate() -> None:
    global _credential_gate
    _credential_gate = None


@app.post(AUTH_PATH)
@tracer.capture_method
def issue_cookies():
    """
    Verify credentials and issue signed cookies.

    Returns:
        200 with the expiry and three ``Set-Cookie`` headers
    """
    logger.info("Authentication request received")

    body = parse_json_body(app)
    try:
        credential = Credential.model_validate(body)
    except PydanticValidationError as e:
        logger.info("Credential validation failed", extra={"error_count": e.error_count()})
        raise ValidationError('Invalid credentials format') from e

    gate = get_credential_gate()
    issued = gate.issue(credential)

    cookies = [
        Cookie(
            name=name,
            value=value,
            path='/',
            secure=True,
            http_only=True,
            same_site=SameSite.NONE_MODE,
            max_age=gate.ttl_seconds,
        )
        for name, value in issued.cookies.items()
    ]

    output = AuthOutput(expire_time=issued.expire_time)
    return json_response(200, output.model_dump(by_alias=True), cookies=cookies)


@app.get(AUTH_CHECK_PATH)
@tracer.capture_method
def check_cookies():
    """
    Check the signed cookies sent with the request.

    Returns:
        200 ``{"authenticated": true}`` or 401 ``{"authenticated": false}``
    """
    cookies = parse_cookie_header(app.current_event.headers.get('Cookie'))
    authenticated = get_credential_gate().check(cookies)

    tracer.put_annotation("authenticated", authenticated)
    metrics.add_metric(
        name="CookieCheckPassed" if authenticated else "CookieCheckFailed",
        unit=MetricUnit.Count,
        value=1,
    )

    output = AuthCheckOutput(authenticated=authenticated)
    return json_response(200 if authenticated else 401, output.model_dump())


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: Lambda event payload
        context: Lambda context object

    Returns:
        API Gateway response
    """
    try:
        metrics.add_metric(name="RequestCount", unit=MetricUnit.Count, value=1)
        tracer.put_annotation("service", "auth-api")
        tracer.put_annotation("environment", os.environ.get("ENVIRONMENT", "unknown"))

        return app.resolve(event, context)

    except Exception as e:
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})

        return internal_error_response(context.aws_request_id)
