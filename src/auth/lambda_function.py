"""
Auth Lambda Function - Entry point for the credential gate API.

This module serves as the Lambda function entry point that delegates to the
handler in the site_api package.
"""

import os
import sys
from typing import Any, Dict

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from site_api.handlers.auth_handler import lambda_handler as auth_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point for the credential gate API.

    Args:
        event: Lambda event payload (API Gateway event)
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return auth_handler(event, context)
