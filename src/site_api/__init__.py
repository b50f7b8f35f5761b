"""
Site API service package.

Lambda handlers behind API Gateway for the personal site backend:

- handlers: API handlers and entry points
- logic: Credential gate, conversational search and feature request logic
- dal: DynamoDB, Google Custom Search and OpenAI integrations
- models: Request, response and domain models
- security: Secret lookup and CloudFront cookie signing
"""

__version__ = "1.0.0"
