"""
Chat Handler - Lambda function for plain chat completion.

Route ``POST /chat`` sends the conversation to the model once and returns its
reply as ``{"response": ...}``.
"""

import os
from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from site_api.dal.llm_client import get_openai_client
from site_api.handlers.models.env_vars import ChatEnvVars, get_handler_env_vars
from site_api.handlers.utils.chat_request import log_user_question, parse_chat_request
from site_api.handlers.utils.observability import logger, metrics, tracer
from site_api.handlers.utils.rest_api_resolver import (
    CHAT_PATH,
    create_app,
    internal_error_response,
    json_response,
)
from site_api.logic.chat_service import complete_chat
from site_api.models.output import ChatOutput
from site_api.security.secrets_manager import get_secret_store

app = create_app()


@app.post(CHAT_PATH)
@tracer.capture_method
def chat():
    """
    Answer a conversation with a single completion.

    Returns:
        200 ``{"response": <model reply>}``
    """
    chat_request = parse_chat_request(app)
    log_user_question(app, chat_request)

    env = get_handler_env_vars(ChatEnvVars)
    client = get_openai_client(get_secret_store(), env.OPENAI_API_KEY_PARAMETER_NAME)
    reply = complete_chat(client, chat_request.messages, model=env.OPENAI_MODEL)

    metrics.add_metric(name="ChatCompleted", unit=MetricUnit.Count, value=1)
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
        tracer.put_annotation("service", "chat-api")
        tracer.put_annotation("environment", os.environ.get("ENVIRONMENT", "unknown"))

        return app.resolve(event, context)

    except Exception as e:
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})
        return internal_error_response(context.aws_request_id)
