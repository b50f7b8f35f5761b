"""
Business Logic Layer Module.

The logic layer sits between the API handlers and the data access layer:

- credential_gate: password check and CloudFront signed cookies
- search_orchestrator: conversation answering with an optional web search
- chat_service: plain chat completion
- feature_request_service: feature request recording
"""
