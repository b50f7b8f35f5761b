"""
Feature request business logic.
"""

from aws_lambda_powertools.metrics import MetricUnit

from site_api.dal import BaseDalHandler
from site_api.handlers.utils.observability import logger, metrics, tracer
from site_api.models.feature_request import FeatureRequest
from site_api.models.input import CreateFeatureRequest


class FeatureRequestService:
    """Records feature requests submitted through the site."""

    def __init__(self, dal_handler: BaseDalHandler):
        self.dal_handler = dal_handler

    @tracer.capture_method
    def create_feature_request(self, request: CreateFeatureRequest) -> FeatureRequest:
        feature_request = FeatureRequest.create(
            title=request.title,
            description=request.description,
            requester_email=request.requester_email,
            status=request.status,
        )
        stored = self.dal_handler.create_feature_request_in_db(feature_request)

        metrics.add_metric(name="FeatureRequestCreated", unit=MetricUnit.Count, value=1)
        logger.info("Feature request created", extra={
            "feature_request_id": stored.id,
            "status": stored.status.value,
        })
        return stored
