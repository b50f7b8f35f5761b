"""
Unit tests for Pydantic models.

This module tests the validation and serialization of the request, response
and domain models used by the handlers.
"""

import pytest
from pydantic import ValidationError

from site_api.models.feature_request import FeatureRequest, FeatureRequestStatus
from site_api.models.input import ChatMessage, ChatRequest, CreateFeatureRequest, Credential
from site_api.models.output import AuthCheckOutput, AuthOutput, ChatOutput


class TestCredential:
    """Test cases for Credential model."""

    def test_valid_credential(self):
        """Test creating a valid credential."""
        credential = Credential(username="admin", password="s3cret")

        assert credential.username == "admin"
        assert credential.password == "s3cret"

    @pytest.mark.parametrize("body", [
        {},
        {"username": "admin"},
        {"password": "s3cret"},
        {"username": "", "password": "s3cret"},
        {"username": "admin", "password": ""},
        {"username": 1, "password": "s3cret"},
    ])
    def test_invalid_credential(self, body):
        """Test that missing, empty or non-string fields are rejected."""
        with pytest.raises(ValidationError):
            Credential.model_validate(body)


class TestChatMessage:
    """Test cases for ChatMessage model."""

    def test_user_message(self):
        """Test a plain user turn serializes without unset fields."""
        message = ChatMessage(role="user", content="Hello")

        assert message.to_openai() == {"role": "user", "content": "Hello"}

    def test_unknown_role_rejected(self):
        """Test validation of the role."""
        with pytest.raises(ValidationError):
            ChatMessage(role="robot", content="Hello")

    def test_content_required(self):
        """Test that a user message without content is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            ChatMessage(role="user")

        assert "user message requires content" in str(exc_info.value)

    def test_assistant_tool_call_without_content(self):
        """Test that an assistant turn carrying tool calls may omit content."""
        message = ChatMessage(
            role="assistant",
            tool_calls=[{"id": "call_1", "type": "function", "function": {"name": "search_google", "arguments": "{}"}}],
        )

        assert "content" not in message.to_openai()

    def test_tool_message_requires_call_id(self):
        """Test that a tool turn must reference a tool call."""
        with pytest.raises(ValidationError):
            ChatMessage(role="tool", content="[]")

        message = ChatMessage(role="tool", content="[]", tool_call_id="call_1", name="search_google")
        assert message.to_openai()["tool_call_id"] == "call_1"


class TestChatRequest:
    """Test cases for ChatRequest model."""

    def test_valid_request(self):
        """Test parsing a conversation."""
        request = ChatRequest.model_validate({
            "messages": [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hi"},
            ]
        })

        assert len(request.messages) == 2
        assert request.messages[1].role == "user"

    @pytest.mark.parametrize("body", [
        {},
        {"messages": []},
        {"messages": "hello"},
        {"messages": [{"content": "no role"}]},
        ["not", "an", "object"],
    ])
    def test_invalid_request(self, body):
        """Test that absent, empty or malformed messages are rejected."""
        with pytest.raises(ValidationError):
            ChatRequest.model_validate(body)


class TestCreateFeatureRequest:
    """Test cases for CreateFeatureRequest model."""

    def test_valid_request_camel_case(self):
        """Test parsing a camelCase body."""
        request = CreateFeatureRequest.model_validate({
            "title": "Dark mode",
            "description": "Add a dark theme",
            "requesterEmail": "Jane@Example.com",
        })

        assert request.title == "Dark mode"
        assert request.requester_email == "jane@example.com"
        assert request.status == FeatureRequestStatus.PENDING

    def test_minimal_request(self):
        """Test a request with only the required fields."""
        request = CreateFeatureRequest(title="Dark mode", description="Add a dark theme")

        assert request.requester_email is None

    def test_empty_email_is_none(self):
        """Test that an empty email string means no email."""
        request = CreateFeatureRequest.model_validate({
            "title": "Dark mode",
            "description": "Add a dark theme",
            "requesterEmail": "",
        })

        assert request.requester_email is None

    def test_invalid_email_format(self):
        """Test validation of invalid email formats."""
        with pytest.raises(ValidationError) as exc_info:
            CreateFeatureRequest(title="Dark mode", description="Add a dark theme", requester_email="nope")

        assert "Invalid email format" in str(exc_info.value)

    @pytest.mark.parametrize("body", [
        {"description": "Add a dark theme"},
        {"title": "Dark mode"},
        {"title": "", "description": "Add a dark theme"},
        {"title": "x" * 201, "description": "Add a dark theme"},
    ])
    def test_title_and_description_required(self, body):
        """Test that title and description must be present and within bounds."""
        with pytest.raises(ValidationError):
            CreateFeatureRequest.model_validate(body)


class TestFeatureRequest:
    """Test cases for FeatureRequest model."""

    def test_create_generates_fields(self):
        """Test that create fills in id, status and timestamps."""
        request = FeatureRequest.create(title="Dark mode", description="Add a dark theme")

        assert len(request.id) == 36
        assert request.status == FeatureRequestStatus.PENDING
        assert request.created_at == request.updated_at

    def test_create_generates_unique_ids(self):
        """Test that two requests never share an id."""
        first = FeatureRequest.create(title="a", description="b")
        second = FeatureRequest.create(title="a", description="b")

        assert first.id != second.id

    def test_to_item_camel_case(self):
        """Test the stored and returned shape."""
        request = FeatureRequest.create(
            title="Dark mode",
            description="Add a dark theme",
            requester_email="jane@example.com",
        )

        item = request.to_item()

        assert item == {
            "id": request.id,
            "title": "Dark mode",
            "description": "Add a dark theme",
            "requesterEmail": "jane@example.com",
            "status": "PENDING",
            "createdAt": request.created_at,
            "updatedAt": request.updated_at,
        }


class TestOutputModels:
    """Test cases for response models."""

    def test_auth_output(self):
        """Test the login response shape."""
        output = AuthOutput(expire_time=1735689600)

        assert output.model_dump(by_alias=True) == {
            "message": "Authentication successful",
            "expireTime": 1735689600,
        }

    def test_auth_check_output(self):
        """Test the cookie check response shape."""
        assert AuthCheckOutput(authenticated=False).model_dump() == {"authenticated": False}

    def test_chat_output_allows_null(self):
        """Test that an empty model reply serializes as null."""
        assert ChatOutput(response=None).model_dump() == {"response": None}
