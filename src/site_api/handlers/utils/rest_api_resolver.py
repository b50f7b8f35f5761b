"""
REST API resolver utility for the site API handlers.

Each Lambda owns one ``APIGatewayRestResolver``. The resolver dispatches on
``(method, path)``, answers CORS preflight ``OPTIONS`` requests, and maps
``BaseServiceError`` subclasses to ``{"error": ...}`` responses.
"""

import json
from typing import Any, Dict, Optional

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig, Response, content_types
from aws_lambda_powertools.event_handler.middlewares import NextMiddleware

from site_api.handlers.models.env_vars import CommonEnvVars, get_handler_env_vars
from site_api.handlers.utils.errors import (
    INTERNAL_SERVER_ERROR_MESSAGE,
    BaseServiceError,
    ValidationError,
    format_error_response,
    log_error_metrics,
)

# API path constants
AUTH_PATH = '/auth'
AUTH_CHECK_PATH = '/auth/check'
CHAT_PATH = '/chat'
SEARCH_PATH = '/search'
FEATURE_REQUEST_PATH = '/feature-request'

MISSING_BODY_MESSAGE = 'Request body is missing'
INVALID_JSON_MESSAGE = 'Invalid JSON in request body'

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'Strict-Transport-Security': 'max-age=31536000; includeSubDomains',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
}


def json_response(status_code: int, body: Dict[str, Any], **kwargs: Any) -> Response:
    """Build a JSON response; extra keyword arguments go to ``Response``."""
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=json.dumps(body, ensure_ascii=False),
        **kwargs,
    )


def get_request_id(app: APIGatewayRestResolver) -> Optional[str]:
    return app.current_event.raw_event.get('requestContext', {}).get('requestId')


def parse_json_body(app: APIGatewayRestResolver, missing_message: str = MISSING_BODY_MESSAGE) -> Any:
    """
    Decode the current request's JSON body.

    Raises:
        ValidationError: If the body is absent, not UTF-8 or not valid JSON
    """
    try:
        body = app.current_event.decoded_body
    except ValueError as e:
        raise ValidationError(INVALID_JSON_MESSAGE) from e
    if not body:
        raise ValidationError(missing_message)
    try:
        return json.loads(body)
    except ValueError as e:
        raise ValidationError(INVALID_JSON_MESSAGE) from e


def add_security_headers(app: APIGatewayRestResolver, next_middleware: NextMiddleware) -> Response:
    """Add security headers to all route responses."""
    response = next_middleware(app)
    response.headers.update(SECURITY_HEADERS)
    return response


def create_app() -> APIGatewayRestResolver:
    """Create a resolver with CORS for the configured origin and service error mapping."""
    env = get_handler_env_vars(CommonEnvVars)
    cors_config = CORSConfig(
        allow_origin=env.CORS_ALLOW_ORIGIN,
        allow_headers=['Content-Type'],
        allow_credentials=True,
        max_age=600,
    )
    app = APIGatewayRestResolver(cors=cors_config)
    app.use(middlewares=[add_security_headers])

    @app.exception_handler(BaseServiceError)
    def handle_service_error(error: BaseServiceError) -> Response:
        log_error_metrics(error)
        return json_response(error.status_code, format_error_response(error, get_request_id(app)))

    return app


def internal_error_response(request_id: str) -> Dict[str, Any]:
    """Raw proxy response for failures that escape the resolver."""
    env = get_handler_env_vars(CommonEnvVars)
    return {
        "statusCode": 500,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": env.CORS_ALLOW_ORIGIN,
            "Access-Control-Allow-Credentials": "true",
        },
        "body": json.dumps({
            "error": INTERNAL_SERVER_ERROR_MESSAGE,
            "requestId": request_id,
        }),
    }
