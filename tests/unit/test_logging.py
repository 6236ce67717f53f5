import json
import logging

from ticket_assistant.shared.infrastructure.logging import CustomJsonFormatter


def format_record(**extra):
    formatter = CustomJsonFormatter("%(name)s %(levelname)s %(message)s", environment="testing")
    record = logging.LogRecord("tests", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(formatter.format(record))


def test_adds_context_fields():
    output = format_record(correlation_id="abc-123")

    assert output["message"] == "hello"
    assert output["correlation_id"] == "abc-123"
    assert output["environment"] == "testing"
    assert "timestamp" in output


def test_redacts_credentials_but_keeps_token_counts():
    output = format_record(password="hunter2", api_key="sk-live", token="eyJ", prompt_tokens=12)

    assert output["password"] == "***REDACTED***"
    assert output["api_key"] == "***REDACTED***"
    assert output["token"] == "***REDACTED***"
    assert output["prompt_tokens"] == 12
