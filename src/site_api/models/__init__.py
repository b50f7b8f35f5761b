"""
Service Models Package

This package contains all Pydantic models used throughout the service,
including input validation models, output response models, and domain models.
"""

from .feature_request import FeatureRequest, FeatureRequestStatus
from .input import ChatMessage, ChatRequest, CreateFeatureRequest, Credential
from .output import AuthCheckOutput, AuthOutput, ChatOutput

__all__ = [
    # Input models
    "Credential",
    "ChatMessage",
    "ChatRequest",
    "CreateFeatureRequest",

    # Output models
    "AuthOutput",
    "AuthCheckOutput",
    "ChatOutput",

    # Domain models
    "FeatureRequest",
    "FeatureRequestStatus",
]
