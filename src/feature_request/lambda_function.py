"""
Feature Request Lambda Function - Entry point for the feature request API.

This module serves as the Lambda function entry point that delegates to the
handler in the site_api package.
"""

import os
import sys
from typing import Any, Dict

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from site_api.handlers.feature_request_handler import lambda_handler as feature_request_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point for the feature request API.

    Args:
        event: Lambda event payload (API Gateway event)
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return feature_request_handler(event, context)
