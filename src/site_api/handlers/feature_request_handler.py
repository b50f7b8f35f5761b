"""
Feature Request Handler - Lambda function for recording feature requests.

Route ``POST /feature-request`` stores the request in DynamoDB and echoes the
stored record with status 201.
"""

import os
from typing import Any, Dict, Optional

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from site_api.dal import get_dal_handler
from site_api.handlers.models.env_vars import FeatureRequestEnvVars, get_handler_env_vars
from site_api.handlers.utils.errors import ValidationError
from site_api.handlers.utils.observability import logger, metrics, tracer
from site_api.handlers.utils.rest_api_resolver import (
    FEATURE_REQUEST_PATH,
    create_app,
    internal_error_response,
    json_response,
    parse_json_body,
)
from site_api.logic.feature_request_service import FeatureRequestService
from site_api.models.input import CreateFeatureRequest

REQUIRED_FIELDS = ('title', 'description')
MISSING_BODY_MESSAGE = 'Request body is required'

app = create_app()

_feature_request_service: Optional[FeatureRequestService] = None


def get_feature_request_service() -> FeatureRequestService:
    """Get or create the feature request service for this instance."""
    global _feature_request_service

    if _feature_request_service is None:
        env = get_handler_env_vars(FeatureRequestEnvVars)
        _feature_request_service = FeatureRequestService(get_dal_handler(env.FEATURE_REQUEST_TABLE_NAME))

    return _feature_request_service


def reset_feature_request_service() -> None:
    global _feature_request_service
    _feature_request_service = None


def parse_feature_request(body: Any) -> CreateFeatureRequest:
    try:
        return CreateFeatureRequest.model_validate(body)
    except PydanticValidationError as e:
        invalid_fields = {str(error['loc'][0]) for error in e.errors() if error['loc']}
        logger.info("Feature request validation failed", extra={"fields": sorted(invalid_fields)})
        if not isinstance(body, dict) or invalid_fields & set(REQUIRED_FIELDS):
            raise ValidationError('Title and description are required') from e
        raise ValidationError(f'Invalid fields: {", ".join(sorted(invalid_fields))}') from e


@app.post(FEATURE_REQUEST_PATH)
@tracer.capture_method
def create_feature_request():
    """
    Create a new feature request.

    Returns:
        201 with the stored record
    """
    logger.info("Create feature request received")

    create_request = parse_feature_request(parse_json_body(app, missing_message=MISSING_BODY_MESSAGE))
    feature_request = get_feature_request_service().create_feature_request(create_request)

    tracer.put_annotation("feature_request_id", feature_request.id)
    return json_response(
        201,
        feature_request.to_item(),
        headers={"Location": f"{FEATURE_REQUEST_PATH}/{feature_request.id}"},
    )


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
        tracer.put_annotation("service", "feature-request-api")
        tracer.put_annotation("environment", os.environ.get("ENVIRONMENT", "unknown"))

        return app.resolve(event, context)

    except Exception as e:
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})
        return internal_error_response(context.aws_request_id)
