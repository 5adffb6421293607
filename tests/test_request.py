import logging

import pytest

from webhook_invoker.invoker.config import LANGFLOW, N8N_WEBHOOK, InvokerConfig
from webhook_invoker.invoker.request import (
    InvocationRequest,
    build_body,
    build_headers,
    prepare,
    resolve_timeout_minutes,
)

URL = "https://example.com/webhook/test"


class TestBody:

    def test_plain_text_is_wrapped(self):
        request = InvocationRequest(target_url=URL, payload="hello")
        assert build_body(request, N8N_WEBHOOK) == '{"message": "hello"}'

    def test_plain_text_is_escaped_when_wrapped(self):
        request = InvocationRequest(target_url=URL, payload='say "hi"\nbye')
        assert build_body(request, N8N_WEBHOOK) == '{"message": "say \\"hi\\"\\nbye"}'

    @pytest.mark.parametrize("payload", ["{}", "[]", '{"message": "hello world"}', '[{"id": 1}]'])
    def test_json_payload_passes_through(self, payload):
        request = InvocationRequest(target_url=URL, payload=payload)
        assert build_body(request, N8N_WEBHOOK) == payload

    @pytest.mark.parametrize("payload", [None, ""])
    def test_missing_payload_becomes_empty_message(self, payload):
        request = InvocationRequest(target_url=URL, payload=payload)
        assert build_body(request, N8N_WEBHOOK) == '{"message": ""}'

    def test_non_json_content_type_is_sent_verbatim(self):
        xml = '<?xml version="1.0"?><data><message>test</message></data>'
        request = InvocationRequest(target_url=URL, payload=xml, content_type="application/xml")
        assert build_body(request, N8N_WEBHOOK) == xml

        request = InvocationRequest(target_url=URL, payload="Simple text message", content_type="text/plain")
        assert build_body(request, N8N_WEBHOOK) == "Simple text message"

    def test_non_json_content_type_without_payload_sends_empty_object(self):
        request = InvocationRequest(target_url=URL, payload=None, content_type="text/plain")
        assert build_body(request, N8N_WEBHOOK) == "{}"

    def test_langflow_body(self):
        request = InvocationRequest(target_url=URL, payload='What is "n8n"?')
        assert build_body(request, LANGFLOW) == (
            '{"output_type":"text","input_type":"text","input_value":"What is \\"n8n\\"?"}'
        )

    def test_langflow_body_with_request_types(self):
        request = InvocationRequest(target_url=URL, payload="hi", output_type="chat", input_type="chat")
        assert build_body(request, LANGFLOW) == (
            '{"output_type":"chat","input_type":"chat","input_value":"hi"}'
        )

    def test_plain_text_with_leading_whitespace_before_json(self):
        request = InvocationRequest(target_url=URL, payload='  {"a": 1}')
        assert build_body(request, N8N_WEBHOOK) == '  {"a": 1}'

    def test_langflow_body_ignores_json_looking_prompt(self):
        request = InvocationRequest(target_url=URL, payload='{"a":1}')
        assert build_body(request, LANGFLOW) == (
            '{"output_type":"text","input_type":"text","input_value":"{\\"a\\":1}"}'
        )


class TestHeaders:

    def test_defaults_to_json_content_type(self):
        request = InvocationRequest(target_url=URL)
        assert build_headers(request, N8N_WEBHOOK) == {"Content-Type": "application/json"}

    def test_bearer_credential_and_session(self):
        request = InvocationRequest(
            target_url=URL, credential="secret", session_id="sess-1", content_type="text/plain"
        )
        assert build_headers(request, N8N_WEBHOOK) == {
            "Content-Type": "text/plain",
            "Authorization": "Bearer secret",
            "x-session-id": "sess-1",
        }

    @pytest.mark.parametrize("blank", [None, "", "   "])
    def test_blank_credential_and_session_are_omitted(self, blank):
        request = InvocationRequest(target_url=URL, credential=blank, session_id=blank)
        headers = build_headers(request, N8N_WEBHOOK)
        assert "Authorization" not in headers
        assert "x-session-id" not in headers

    def test_langflow_sends_raw_api_key(self):
        request = InvocationRequest(target_url=URL, credential="lf-key")
        headers = build_headers(request, LANGFLOW)
        assert headers["x-api-key"] == "lf-key"
        assert "Authorization" not in headers

    def test_langflow_content_type_is_always_json(self):
        request = InvocationRequest(target_url=URL, content_type="text/plain")
        assert build_headers(request, LANGFLOW)["Content-Type"] == "application/json"


class TestTimeout:

    @pytest.mark.parametrize("requested, expected", [(0, 10), (-5, 10), (None, 10), (1, 1), (15, 15), (60, 60)])
    def test_resolve(self, requested, expected):
        assert resolve_timeout_minutes(requested, N8N_WEBHOOK) == expected

    def test_above_ceiling_is_kept_but_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="webhook_invoker.invoker.request"):
            assert resolve_timeout_minutes(90, N8N_WEBHOOK) == 90
        assert "exceeds the recommended maximum of 60 minutes" in caplog.text

    def test_custom_default(self):
        config = InvokerConfig(default_timeout_minutes=5)
        assert resolve_timeout_minutes(0, config) == 5


class TestPrepare:

    def test_prepared_request(self):
        request = InvocationRequest(
            target_url=URL, credential="k", payload="héllo", session_id="s", timeout_minutes=0
        )
        prepared = prepare(request, N8N_WEBHOOK)

        assert prepared.url == URL
        assert prepared.body == '{"message": "héllo"}'.encode("utf-8")
        assert prepared.timeout == (60.0, 600.0)
        assert prepared.headers["Authorization"] == "Bearer k"
        assert prepared.headers["x-session-id"] == "s"

    def test_payload_length(self):
        assert InvocationRequest(target_url=URL, payload="hello").payload_length == 5
        assert InvocationRequest(target_url=URL).payload_length == 0
