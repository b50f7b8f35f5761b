"""
Output models for API responses using Pydantic.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AuthOutput(BaseModel):
    """Response model for a successful login."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: Annotated[str, Field(
        description='Human readable outcome',
        examples=['Authentication successful']
    )] = 'Authentication successful'

    expire_time: Annotated[int, Field(
        description='Epoch seconds at which the issued cookies stop working',
        examples=[1735689600]
    )]


class AuthCheckOutput(BaseModel):
    """Response model for a cookie check."""

    authenticated: Annotated[bool, Field(
        description='Whether the request carried a valid, unexpired cookie set'
    )]


class ChatOutput(BaseModel):
    """Response model for chat and search answers."""

    response: Annotated[str | None, Field(
        description='Model generated answer'
    )]
