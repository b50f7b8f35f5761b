"""
Data Access Layer (DAL) for the site API.

This package holds persistence and outbound service integrations: the feature
request table, the web search client and the OpenAI client factory.
"""

from abc import ABC, abstractmethod

from site_api.models.feature_request import FeatureRequest


class BaseDalHandler(ABC):
    """Abstract base class for feature request storage."""

    def __init__(self, table_name: str) -> None:
        """
        Initialize the DAL handler.

        Args:
            table_name: Name of the database table
        """
        self.table_name = table_name

    @abstractmethod
    def create_feature_request_in_db(self, feature_request: FeatureRequest) -> FeatureRequest:
        """Store a new feature request."""
        pass


def get_dal_handler(table_name: str) -> BaseDalHandler:
    """
    Factory function to get the appropriate DAL handler.

    Args:
        table_name: Name of the database table

    Returns:
        DAL handler instance
    """
    # Import here to avoid circular imports
    from site_api.dal.db_handler import DynamoDbHandler

    return DynamoDbHandler(table_name)


__all__ = [
    'BaseDalHandler',
    'get_dal_handler'
]
