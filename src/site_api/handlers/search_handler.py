"""
Search Handler - Lambda function for conversational search.

Route ``POST /search`` lets the model decide whether to search the web before
answering. At most one Google search runs per request.
"""

import os
from typing import Any, Dict, Optional

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from site_api.dal.google_search import GoogleSearchClient
from site_api.dal.llm_client import get_openai_client
from site_api.handlers.models.env_vars import SearchEnvVars, get_handler_env_vars
from site_api.handlers.utils.chat_request import log_user_question, parse_chat_request
from site_api.handlers.utils.observability import logger, metrics, tracer
from site_api.handlers.utils.rest_api_resolver import (
    SEARCH_PATH,
    create_app,
    internal_error_response,
    json_response,
)
from site_api.logic.search_orchestrator import SearchOrchestrator
from site_api.models.output import ChatOutput
from site_api.security.secrets_manager import get_secret_store

app = create_app()

_search_client: Optional[GoogleSearchClient] = None


def get_search_client() -> GoogleSearchClient:
    """Get or create the search client, fetching both Google parameters together."""
    global _search_client

    if _search_client is None:
        env = get_handler_env_vars(SearchEnvVars)
        api_key, search_engine_id = get_secret_store().get_parameters([
            env.GOOGLE_API_KEY_PARAMETER_NAME,
            env.GOOGLE_SEARCH_ENGINE_ID_PARAMETER_NAME,
        ])
        _search_client = GoogleSearchClient(api_key=api_key, search_engine_id=search_engine_id)

    return _search_client


def reset_search_client() -> None:
    global _search_client
    _search_client = None


@app.post(SEARCH_PATH)
@tracer.capture_method
def search():
    """
    Answer a conversation, searching the web first if the model asks to.

    Returns:
        200 ``{"response": <model reply>}``
    """
    chat_request = parse_chat_request(app)
    log_user_question(app, chat_request)

    env = get_handler_env_vars(SearchEnvVars)
    orchestrator = SearchOrchestrator(
        llm=get_openai_client(get_secret_store(), env.OPENAI_API_KEY_PARAMETER_NAME),
        search_client=get_search_client,
        model=env.OPENAI_MODEL,
        tool_choice=env.SEARCH_TOOL_CHOICE,
    )
    reply = orchestrator.answer(chat_request.messages)

    metrics.add_metric(name="SearchAnswered", unit=MetricUnit.Count, value=1)
    return json_response(200, ChatOutput(response=reply).model_dump())


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
        tracer.put_annotation("service", "search-api")
        tracer.put_annotation("environment", os.environ.get("ENVIRONMENT", "unknown"))

        return app.resolve(event, context)

    except Exception as e:
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})
        return internal_error_response(context.aws_request_id)
