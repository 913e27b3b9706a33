"""Unit tests for exception classes"""

from datetime import datetime

from qara.exceptions import ConfigurationError, LLMError, NoRouteError, QaraError


class TestQaraError:
    """Test base QaraError class"""

    def test_basic_initialization(self):
        error = QaraError("Test error")

        assert error.message == "Test error"
        assert error.details == {}
        assert error.user_message == "Test error"
        assert isinstance(error.timestamp, datetime)

    def test_custom_user_message(self):
        error = QaraError("Technical error details", user_message="User-friendly message")

        assert error.message == "Technical error details"
        assert error.user_message == "User-friendly message"

    def test_str_with_details(self):
        error = QaraError("Test error", details={"skill": "help", "count": 2})
        assert str(error) == "Test error (skill=help, count=2)"

    def test_to_dict(self):
        error = QaraError("Test error", details={"key": "value"}, user_message="Oops")
        result = error.to_dict()

        assert result["error_type"] == "QaraError"
        assert result["message"] == "Test error"
        assert result["details"] == {"key": "value"}
        assert result["user_message"] == "Oops"
        assert datetime.fromisoformat(result["timestamp"])


class TestNoRouteError:
    """Test NoRouteError"""

    def test_message(self):
        error = NoRouteError("xyzzy foobar baz")

        assert isinstance(error, QaraError)
        assert error.input_text == "xyzzy foobar baz"
        assert str(error) == (
            'No skill found for: "xyzzy foobar baz". Try "qara list" to see available skills.'
        )


class TestLLMError:
    """Test LLMError status handling"""

    def test_rate_limit(self):
        error = LLMError("429 from provider", status_code=429)

        assert error.status_code == 429
        assert "rate limit" in error.user_message.lower()

    def test_auth(self):
        assert "API key" in LLMError("denied", status_code=401).user_message

    def test_unavailable(self):
        assert "unavailable" in LLMError("down", status_code=503).user_message

    def test_generic(self):
        error = LLMError("boom", details={"model": "openai/gpt-4o"})

        assert error.status_code is None
        assert error.user_message == "An error occurred while calling the LLM API."
        assert error.details == {"model": "openai/gpt-4o"}


class TestConfigurationError:
    """Test ConfigurationError"""

    def test_field_and_value(self):
        error = ConfigurationError("Bad depth", field="default_depth", value=9)

        assert error.field == "default_depth"
        assert error.value == 9
        assert error.details == {"field": "default_depth", "value": 9}
        assert error.user_message == "Configuration error: Bad depth"

    def test_without_field(self):
        error = ConfigurationError("Missing handler")
        assert error.details == {}
