"""
Feature request domain model.

This module defines the record stored in the feature request table.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FeatureRequestStatus(str, Enum):
    """Feature request status enumeration."""

    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'
    IN_PROGRESS = 'IN_PROGRESS'
    DONE = 'DONE'
    REJECTED = 'REJECTED'


class FeatureRequest(BaseModel):
    """Core feature request model. Serializes with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Annotated[str, Field(
        description='Unique identifier for the feature request',
        examples=['8a0f6f3e-4a0b-4f57-9b86-2a8d4a0d9f10']
    )]

    title: Annotated[str, Field(
        min_length=1,
        max_length=200,
        description='Short summary of the requested feature'
    )]

    description: Annotated[str, Field(
        min_length=1,
        max_length=5000,
        description='What the feature should do'
    )]

    requester_email: Annotated[Optional[str], Field(
        default=None,
        description='Optional contact address'
    )] = None

    status: Annotated[FeatureRequestStatus, Field(
        default=FeatureRequestStatus.PENDING,
        description='Current status of the request'
    )] = FeatureRequestStatus.PENDING

    created_at: Annotated[str, Field(
        description='ISO timestamp when the request was created'
    )]

    updated_at: Annotated[str, Field(
        description='ISO timestamp when the request was last updated'
    )]

    @classmethod
    def create(
        cls,
        title: str,
        description: str,
        requester_email: Optional[str] = None,
        status: FeatureRequestStatus = FeatureRequestStatus.PENDING,
    ) -> 'FeatureRequest':
        """
        Create a new feature request with generated ID and timestamps.

        Args:
            title: Short summary of the feature
            description: What the feature should do
            requester_email: Optional contact address
            status: Initial status

        Returns:
            New FeatureRequest instance with generated fields
        """
        now = datetime.now(timezone.utc).isoformat()
        return cls(
            id=str(uuid4()),
            title=title,
            description=description,
            requester_email=requester_email,
            status=status,
            created_at=now,
            updated_at=now,
        )

    def to_item(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape stored in DynamoDB and returned to clients."""
        return self.model_dump(mode='json', by_alias=True)
