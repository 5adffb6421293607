from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class PayloadFormat(str, Enum):
    WRAPPED_MESSAGE = "wrapped_message"
    LANGFLOW = "langflow"


@dataclass(frozen=True)
class InvokerConfig:
    """Configuration for a WebhookInvoker."""

    # Used in the flattened error string: "Error executing <system_name> action: ..."
    system_name: str = "n8n"
    endpoint_label: str = "Webhook endpoint"
    request_label: str = "Webhook request"
    payload_label: str = "Payload"

    session_required: bool = False
    credential_required: bool = False
    payload_required: bool = False

    # Checked in order; the first field with a non-empty string value wins.
    extraction_fields: Tuple[str, ...] = ("result", "data", "message", "response")
    # Scanned over every occurrence once the ordered fields come up empty.
    fallback_scan_field: Optional[str] = None

    credential_header: str = "Authorization"
    credential_scheme: Optional[str] = "Bearer"
    session_header: str = "x-session-id"

    payload_format: PayloadFormat = PayloadFormat.WRAPPED_MESSAGE
    langflow_output_type: str = "text"
    langflow_input_type: str = "text"

    default_content_type: str = "application/json"
    connect_timeout_seconds: float = 60.0
    default_timeout_minutes: int = 10
    # Advisory only: larger values are logged, not rejected.
    max_timeout_minutes: int = 60

    def validate(self) -> None:
        """Validate invoker configuration."""
        if not self.extraction_fields:
            raise ValueError("extraction_fields must name at least one field")

        if not self.credential_header:
            raise ValueError("credential_header cannot be empty")

        if self.connect_timeout_seconds <= 0:
            raise ValueError("connect_timeout_seconds must be positive")

        if self.default_timeout_minutes <= 0:
            raise ValueError("default_timeout_minutes must be positive")

        if self.max_timeout_minutes < self.default_timeout_minutes:
            raise ValueError("max_timeout_minutes cannot be lower than default_timeout_minutes")


N8N_WEBHOOK = InvokerConfig()

N8N_SESSION_WEBHOOK = InvokerConfig(session_required=True)

LANGFLOW = InvokerConfig(
    system_name="Langflow",
    endpoint_label="API Endpoint",
    request_label="API request",
    payload_label="User prompt",
    credential_required=True,
    payload_required=True,
    extraction_fields=("text", "message", "response"),
    fallback_scan_field="text",
    credential_header="x-api-key",
    credential_scheme=None,
    payload_format=PayloadFormat.LANGFLOW,
)

PRESETS = {
    "n8n": N8N_WEBHOOK,
    "n8n-session": N8N_SESSION_WEBHOOK,
    "langflow": LANGFLOW,
}
