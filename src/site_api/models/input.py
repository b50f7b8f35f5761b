"""
Input models for request validation using Pydantic.

This module defines the request bodies accepted by the Lambda handlers.
"""

import re
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from site_api.models.feature_request import FeatureRequestStatus

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


class Credential(BaseModel):
    """Login form submitted to ``POST /auth``."""

    username: Annotated[str, Field(
        min_length=1,
        max_length=128,
        description='Login name',
        examples=['admin']
    )]

    password: Annotated[str, Field(
        min_length=1,
        max_length=1024,
        description='Plain text password, hashed before comparison'
    )]


class ChatMessage(BaseModel):
    """One turn of a conversation in OpenAI chat format."""

    role: Annotated[Literal['system', 'user', 'assistant', 'tool'], Field(
        description='Author of the message',
        examples=['user']
    )]

    content: Annotated[str | None, Field(
        default=None,
        description='Message text',
        examples=['What is the weather in Tokyo today?']
    )] = None

    name: Annotated[str | None, Field(
        default=None,
        description='Function name for tool messages'
    )] = None

    tool_call_id: Annotated[str | None, Field(
        default=None,
        description='Id of the tool call a tool message answers'
    )] = None

    tool_calls: Annotated[list[dict[str, Any]] | None, Field(
        default=None,
        description='Tool calls requested by an assistant message'
    )] = None

    @model_validator(mode='after')
    def validate_content(self) -> 'ChatMessage':
        """Only assistant messages carrying tool calls may omit content."""
        if self.content is None and not (self.role == 'assistant' and self.tool_calls):
            raise ValueError(f'{self.role} message requires content')
        if self.role == 'tool' and not self.tool_call_id:
            raise ValueError('tool message requires tool_call_id')
        return self

    def to_openai(self) -> dict[str, Any]:
        """Serialize for the chat completions API, dropping unset fields."""
        return self.model_dump(exclude_none=True)


class ChatRequest(BaseModel):
    """Body of ``POST /chat`` and ``POST /search``."""

    messages: Annotated[list[ChatMessage], Field(
        min_length=1,
        description='Conversation history in chronological order'
    )]


class CreateFeatureRequest(BaseModel):
    """Body of ``POST /feature-request``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Annotated[str, Field(
        min_length=1,
        max_length=200,
        description='Short summary of the requested feature',
        examples=['Dark mode']
    )]

    description: Annotated[str, Field(
        min_length=1,
        max_length=5000,
        description='What the feature should do'
    )]

    requester_email: Annotated[str | None, Field(
        default=None,
        description='Optional contact address',
        examples=['jane@example.com']
    )] = None

    status: Annotated[FeatureRequestStatus, Field(
        default=FeatureRequestStatus.PENDING,
        description='Initial status'
    )] = FeatureRequestStatus.PENDING

    @field_validator('requester_email')
    @classmethod
    def validate_email_format(cls, v: str | None) -> str | None:
        """Validate email format."""
        if v is None or v == '':
            return None
        if not re.match(EMAIL_PATTERN, v):
            raise ValueError('Invalid email format')
        return v.lower()
