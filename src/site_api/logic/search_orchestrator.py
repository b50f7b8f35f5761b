"""
Conversational search orchestration.

The model first sees the conversation together with a single web search tool.
If it asks for a search, exactly one search runs and its results go back to the
model as a tool message for a second, tool-free completion. Otherwise the first
completion is the answer.
"""

import json
from typing import Any, Callable, Dict, List, Literal, Optional

from aws_lambda_powertools.metrics import MetricUnit
from openai import OpenAI, OpenAIError

from site_api.dal.google_search import GoogleSearchClient
from site_api.handlers.utils.errors import DependencyError
from site_api.handlers.utils.observability import logger, metrics, tracer
from site_api.models.input import ChatMessage

DEFAULT_MODEL = 'gpt-4o-mini'
SEARCH_TOOL_NAME = 'search_google'

SEARCH_TOOL: Dict[str, Any] = {
    'type': 'function',
    'function': {
        'name': SEARCH_TOOL_NAME,
        'description': 'Search Google for current information',
        'parameters': {
            'type': 'object',
            'properties': {
                'query': {
                    'type': 'string',
                    'description': 'The search query',
                },
            },
            'required': ['query'],
        },
    },
}

ToolChoice = Literal['auto', 'required']


class SearchOrchestrator:
    """Answers a conversation, searching the web at most once."""

    def __init__(
        self,
        llm: OpenAI,
        search_client: Callable[[], GoogleSearchClient],
        model: str = DEFAULT_MODEL,
        tool_choice: ToolChoice = 'auto',
    ):
        """
        Args:
            llm: OpenAI client
            search_client: Returns the search client; only called when the model asks for a search
            model: Chat completion model
            tool_choice: ``required`` forces the first call to request a search
        """
        self.llm = llm
        self.search_client = search_client
        self.model = model
        self.tool_choice = tool_choice

    @tracer.capture_method
    def answer(self, messages: List[ChatMessage]) -> Optional[str]:
        history = [message.to_openai() for message in messages]

        first = self._complete(history, tools=[SEARCH_TOOL], tool_choice=self.tool_choice, parallel_tool_calls=False)
        reply = first.choices[0].message

        if not reply.tool_calls:
            tracer.put_annotation('search_performed', False)
            return reply.content

        tool_call = reply.tool_calls[0]
        query = self._extract_query(tool_call.function.arguments)

        logger.info("Search query", extra={"query": query})
        results = self.search_client().search(query)
        metrics.add_metric(name="SearchPerformed", unit=MetricUnit.Count, value=1)
        tracer.put_annotation('search_performed', True)
        logger.info("Search results", extra={"result_count": len(results)})

        history.append({
            'role': 'assistant',
            'content': reply.content,
            'tool_calls': [{
                'id': tool_call.id,
                'type': 'function',
                'function': {
                    'name': tool_call.function.name,
                    'arguments': tool_call.function.arguments,
                },
            }],
        })
        history.append({
            'role': 'tool',
            'tool_call_id': tool_call.id,
            'name': SEARCH_TOOL_NAME,
            'content': json.dumps(results, ensure_ascii=False),
        })

        final = self._complete(history)
        return final.choices[0].message.content

    def _complete(self, history: List[Dict[str, Any]], **kwargs: Any) -> Any:
        try:
            return self.llm.chat.completions.create(model=self.model, messages=history, **kwargs)
        except OpenAIError as e:
            raise DependencyError(f'Chat completion failed: {e}', service_name='openai') from e

    @staticmethod
    def _extract_query(arguments: str) -> str:
        try:
            query = json.loads(arguments)['query']
        except (TypeError, ValueError, KeyError) as e:
            raise DependencyError('Model returned malformed search arguments', service_name='openai') from e
        if not isinstance(query, str) or not query.strip():
            raise DependencyError('Model returned an empty search query', service_name='openai')
        return query
