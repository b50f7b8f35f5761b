"""
AWS Lambda Handlers Module.

Each handler module owns one API Gateway REST resolver and exposes a
``lambda_handler`` entry point:

- auth_handler: ``POST /auth`` and ``GET /auth/check``
- chat_handler: ``POST /chat``
- search_handler: ``POST /search``
- feature_request_handler: ``POST /feature-request``
"""
