"""
DynamoDB implementation of the Data Access Layer (DAL).
"""

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from site_api.dal import BaseDalHandler
from site_api.handlers.utils.errors import DependencyError
from site_api.handlers.utils.observability import logger, tracer
from site_api.models.feature_request import FeatureRequest


class DynamoDbHandler(BaseDalHandler):
    """DynamoDB implementation of the data access layer."""

    def __init__(self, table_name: str) -> None:
        """
        Initialize the DynamoDB handler.

        Args:
            table_name: Name of the DynamoDB table, keyed on ``id``
        """
        super().__init__(table_name)
        self.dynamodb = boto3.resource('dynamodb', config=Config(retries={"max_attempts": 3, "mode": "standard"}))
        self.table = self.dynamodb.Table(table_name)
        logger.debug(f'DynamoDB handler initialized for table: {table_name}')

    @tracer.capture_method
    def create_feature_request_in_db(self, feature_request: FeatureRequest) -> FeatureRequest:
        """
        Create a new feature request in DynamoDB.

        Args:
            feature_request: Fully populated feature request

        Returns:
            The stored feature request

        Raises:
            DependencyError: If DynamoDB operation fails
        """
        try:
            self.table.put_item(
                Item=feature_request.to_item(),
                ConditionExpression='attribute_not_exists(id)'  # Ensure no duplicates
            )
        except ClientError as e:
            error_code = e.response['Error']['Code']
            logger.error(f'DynamoDB error creating feature request: {error_code}', extra={
                'error': str(e),
                'feature_request_id': feature_request.id
            })
            raise DependencyError(f'Failed to store feature request: {error_code}', service_name='dynamodb') from e
        except BotoCoreError as e:
            logger.error(f'Unexpected error creating feature request: {e}')
            raise DependencyError('Failed to store feature request', service_name='dynamodb') from e

        logger.info(f'Successfully created feature request in database: {feature_request.id}')
        tracer.put_annotation('feature_request_created', feature_request.id)
        return feature_request
