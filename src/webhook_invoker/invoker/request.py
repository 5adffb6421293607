import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from webhook_invoker.invoker.config import InvokerConfig, PayloadFormat
from webhook_invoker.utils.json_text import escape_json_string, looks_like_json, wrap_message

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@dataclass(frozen=True)
class InvocationRequest:
    """The caller's inputs for a single invocation."""

    target_url: Optional[str]
    credential: Optional[str] = None
    payload: Optional[str] = None
    content_type: Optional[str] = None
    session_id: Optional[str] = None
    timeout_minutes: int = 10
    # Langflow only; None falls back to the configured type.
    output_type: Optional[str] = None
    input_type: Optional[str] = None

    @property
    def payload_length(self) -> int:
        return len(self.payload) if self.payload is not None else 0


@dataclass(frozen=True)
class PreparedRequest:
    """A fully built POST, ready to be sent."""

    url: str
    headers: Dict[str, str]
    body: bytes
    timeout: Tuple[float, float]


def resolve_timeout_minutes(timeout_minutes: Optional[int], config: InvokerConfig) -> int:
    """
    Returns the read timeout in minutes, substituting the default for non-positive values.

    Values above the configured ceiling are kept but logged.
    """
    if timeout_minutes is None or timeout_minutes <= 0:
        return config.default_timeout_minutes
    if timeout_minutes > config.max_timeout_minutes:
        logger.warning(
            f"Requested timeout of {timeout_minutes} minutes exceeds the recommended "
            f"maximum of {config.max_timeout_minutes} minutes."
        )
    return timeout_minutes


def build_body(request: InvocationRequest, config: InvokerConfig) -> str:
    """
    Formats the payload into the request body.

    The Langflow format always produces the three-field JSON object. Otherwise
    a payload whose first non-whitespace character is `{` or `[` is sent as is,
    and anything else is wrapped as {"message": "..."}. This departs from plain
    first-character wrapping in two ways: leading whitespace is skipped when
    recognising JSON, and wrapping only happens for JSON media types, so XML or
    text/plain payloads go out verbatim.
    """
    if config.payload_format == PayloadFormat.LANGFLOW:
        return (
            '{"output_type":"' + escape_json_string(request.output_type or config.langflow_output_type) + '",'
            '"input_type":"' + escape_json_string(request.input_type or config.langflow_input_type) + '",'
            '"input_value":"' + escape_json_string(request.payload) + '"}'
        )

    content_type = request.content_type or config.default_content_type
    if "json" not in content_type.lower():
        return request.payload if request.payload is not None else "{}"

    if looks_like_json(request.payload):
        return request.payload
    return wrap_message(request.payload)


def build_headers(request: InvocationRequest, config: InvokerConfig) -> Dict[str, str]:
    if config.payload_format == PayloadFormat.LANGFLOW:
        content_type = JSON_CONTENT_TYPE
    else:
        content_type = request.content_type or config.default_content_type
    headers = {"Content-Type": content_type}

    if not is_blank(request.credential):
        if config.credential_scheme:
            headers[config.credential_header] = f"{config.credential_scheme} {request.credential}"
        else:
            headers[config.credential_header] = request.credential

    if not is_blank(request.session_id):
        headers[config.session_header] = request.session_id

    return headers


def prepare(request: InvocationRequest, config: InvokerConfig) -> PreparedRequest:
    """Builds the complete POST for a request that has already passed validation."""
    timeout_minutes = resolve_timeout_minutes(request.timeout_minutes, config)
    return PreparedRequest(
        url=request.target_url,
        headers=build_headers(request, config),
        body=build_body(request, config).encode("utf-8"),
        timeout=(config.connect_timeout_seconds, timeout_minutes * 60.0),
    )
