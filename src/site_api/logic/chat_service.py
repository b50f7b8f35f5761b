"""
Plain chat completion over a conversation.
"""

from typing import List, Optional

from openai import OpenAI, OpenAIError

from site_api.handlers.utils.errors import DependencyError
from site_api.handlers.utils.observability import logger, tracer
from site_api.models.input import ChatMessage

DEFAULT_MODEL = 'gpt-4o-mini'
MAX_TOKENS = 1000
TEMPERATURE = 0.7


def last_user_question(messages: List[ChatMessage]) -> Optional[str]:
    """Content of the most recent user message, if any."""
    for message in reversed(messages):
        if message.role == 'user':
            return message.content
    return None


@tracer.capture_method
def complete_chat(llm: OpenAI, messages: List[ChatMessage], model: str = DEFAULT_MODEL) -> Optional[str]:
    """
    Send the conversation to the model and return its reply.

    Raises:
        DependencyError: If the completion call fails
    """
    try:
        completion = llm.chat.completions.create(
            model=model,
            messages=[message.to_openai() for message in messages],
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE,
        )
    except OpenAIError as e:
        raise DependencyError(f'Chat completion failed: {e}', service_name='openai') from e

    logger.debug("Chat completion received", extra={"model": model})
    return completion.choices[0].message.content
