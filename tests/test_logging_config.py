"""
Tests for Logging Configuration

Tests that credentials are redacted from log events.
"""

from pr_analyzer.logging_config import add_app_context, redact_secrets


class TestRedaction:
    """Test suite for the redact_secrets processor."""

    def test_credential_keys_redacted(self):
        event = redact_secrets(None, "info", {
            "event": "Loaded",
            "api_key": "shared",
            "X-API-Key": "shared",
            "github_token": "abc",
            "Authorization": "Bearer abc",
        })

        assert event["event"] == "Loaded"
        assert event["api_key"] == "[REDACTED]"
        assert event["X-API-Key"] == "[REDACTED]"
        assert event["github_token"] == "[REDACTED]"
        assert event["Authorization"] == "[REDACTED]"

    def test_token_values_redacted(self):
        event = redact_secrets(None, "info", {
            "event": "Request",
            "value": "ghp_0123456789abcdef",
            "other": "sk-proj-123",
            "repo": "octocat/hello-world",
            "pr_number": 42,
        })

        assert event["value"] == "[REDACTED]"
        assert event["other"] == "[REDACTED]"
        assert event["repo"] == "octocat/hello-world"
        assert event["pr_number"] == 42

    def test_app_context(self):
        event = add_app_context(None, "info", {"event": "x"})

        assert event["app"] == "pr-analyzer"
        assert "version" in event
