"""
Request parsing shared by the chat and search handlers.
"""

from datetime import datetime, timezone

from aws_lambda_powertools.event_handler import APIGatewayRestResolver
from pydantic import ValidationError as PydanticValidationError

from site_api.handlers.utils.errors import ValidationError
from site_api.handlers.utils.observability import logger
from site_api.handlers.utils.rest_api_resolver import get_request_id, parse_json_body
from site_api.logic.chat_service import last_user_question
from site_api.models.input import ChatRequest


def parse_chat_request(resolver: APIGatewayRestResolver) -> ChatRequest:
    """
    Decode and validate a ``{"messages": [...]}`` body.

    Raises:
        ValidationError: If the body is missing, not JSON, or has no usable messages
    """
    body = parse_json_body(resolver)
    try:
        return ChatRequest.model_validate(body)
    except PydanticValidationError as e:
        logger.info("Chat request validation failed", extra={"error_count": e.error_count()})
        raise ValidationError('Invalid messages format') from e


def log_user_question(resolver: APIGatewayRestResolver, chat_request: ChatRequest) -> None:
    question = last_user_question(chat_request.messages)
    if question is not None:
        logger.info("User question", extra={
            "content": question,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": get_request_id(resolver),
        })
