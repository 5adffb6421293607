import logging
from typing import Optional, Sequence

import requests

from webhook_invoker.clients.http_client import HttpClient
from webhook_invoker.invoker.config import InvokerConfig, N8N_WEBHOOK
from webhook_invoker.invoker.errors import (
    ErrorKind,
    HttpStatusError,
    InvocationError,
    InvocationValidationError,
    TransportError,
)
from webhook_invoker.invoker.observer import InvocationObserver, LoggingObserver
from webhook_invoker.invoker.request import InvocationRequest, PreparedRequest, is_blank, prepare
from webhook_invoker.utils.json_text import extract_all_json_values, extract_json_value, unescape_json_string
from webhook_invoker.utils.logging_adapter import SessionIdAdapter

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http://", "https://")


class WebhookInvoker:
    """
    Performs one validated, synchronous HTTP POST and reduces the response to a string.

    `execute` raises typed InvocationError subclasses; `invoke` is the public
    entry point and never raises, returning an error string instead.
    Instances hold no per-call state and can be shared between threads.
    """

    def __init__(
        self,
        config: InvokerConfig = N8N_WEBHOOK,
        http_client: Optional[HttpClient] = None,
        observers: Optional[Sequence[InvocationObserver]] = None,
    ):
        config.validate()
        self.config = config
        self.http_client = http_client or HttpClient()
        self.observers = tuple(observers) if observers is not None else (LoggingObserver(),)

    def invoke(
        self,
        credential: Optional[str],
        target_url: Optional[str],
        payload: Optional[str],
        content_type: Optional[str] = None,
        session_id: Optional[str] = None,
        timeout_minutes: int = 10,
    ) -> str:
        request = InvocationRequest(
            target_url=target_url,
            credential=credential,
            payload=payload,
            content_type=content_type,
            session_id=session_id,
            timeout_minutes=timeout_minutes,
        )
        try:
            return self.execute(request)
        except InvocationError as e:
            return self.format_error(e.message)
        except Exception as e:
            logger.exception(f"Unexpected error invoking {self.config.system_name} endpoint {target_url}")
            return self.format_error(str(e))

    def execute(self, request: InvocationRequest) -> str:
        """
        Runs a single invocation.

        Returns:
            The extracted field value, or the raw body when no known field is present.

        Raises:
            InvocationValidationError: If the inputs are rejected. No request is sent.
            HttpStatusError: If the response status is outside [200, 300).
            TransportError: If no response was received.
        """
        log = SessionIdAdapter(logger, {"session_id": request.session_id})
        try:
            self._validate_inputs(request)
            prepared = prepare(request, self.config)

            self._notify("attempt", request.target_url, request.payload_length)
            log.debug(f"Request payload: {prepared.body.decode('utf-8')}")
            log.info(f"Sending request, waiting for {self.config.system_name} response (timeout: {prepared.timeout[1] / 60:g} minutes)...")

            response = self._send(prepared)
            status_code = response.status_code
            body = response.text
            self._notify("result", status_code)

            if 200 <= status_code < 300:
                log.info(f"{self.config.system_name} call successful")
                return self._process_success_response(body, log)

            raise HttpStatusError(
                status_code,
                body,
                f"{self.config.request_label} failed with status code: {status_code}. Response: {body}",
            )
        except InvocationError as e:
            self._notify("failure", e.kind, e.message)
            raise

    def format_error(self, message: str) -> str:
        return f"Error executing {self.config.system_name} action: {message}"

    def _validate_inputs(self, request: InvocationRequest) -> None:
        config = self.config
        if is_blank(request.target_url):
            raise InvocationValidationError(
                ErrorKind.MISSING_ENDPOINT,
                f"{config.endpoint_label} is required and cannot be empty",
            )

        if not request.target_url.startswith(SUPPORTED_SCHEMES):
            raise InvocationValidationError(
                ErrorKind.INVALID_ENDPOINT_SCHEME,
                f"{config.endpoint_label} must be a valid URL starting with http:// or https://",
            )

        if config.session_required and is_blank(request.session_id):
            raise InvocationValidationError(
                ErrorKind.MISSING_SESSION,
                "Session ID is required and cannot be empty",
            )

        if config.credential_required and is_blank(request.credential):
            raise InvocationValidationError(
                ErrorKind.MISSING_CREDENTIAL,
                "API Key is required and cannot be empty",
            )

        if config.payload_required and is_blank(request.payload):
            raise InvocationValidationError(
                ErrorKind.MISSING_PAYLOAD,
                f"{config.payload_label} is required and cannot be empty",
            )

    def _send(self, prepared: PreparedRequest) -> requests.Response:
        try:
            return self.http_client.post(prepared.url, prepared.body, prepared.headers, prepared.timeout)
        except requests.exceptions.ConnectTimeout as e:
            raise TransportError(
                f"Error making {self.config.system_name} request: "
                f"could not connect within {prepared.timeout[0]:g} seconds ({e})",
                e,
            ) from e
        except requests.exceptions.Timeout as e:
            raise TransportError(
                f"Error making {self.config.system_name} request: "
                f"no response within {prepared.timeout[1] / 60:g} minutes ({e})",
                e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Error making {self.config.system_name} request: {e}", e) from e

    def _process_success_response(self, body: str, log: logging.LoggerAdapter) -> str:
        for field in self.config.extraction_fields:
            value = extract_json_value(body, field)
            if value:
                log.debug(f"Extracted '{field}' from response")
                return unescape_json_string(value)

        fallback_field = self.config.fallback_scan_field
        if fallback_field:
            for value in extract_all_json_values(body, fallback_field):
                if value:
                    log.debug(f"Extracted nested '{fallback_field}' from response")
                    return unescape_json_string(value)

        log.info(f"No known field in response, returning raw response from {self.config.system_name}")
        return body

    def _notify(self, event: str, *args) -> None:
        for observer in self.observers:
            getattr(observer, event)(*args)


def invoke(
    credential: Optional[str],
    target_url: Optional[str],
    payload: Optional[str],
    content_type: Optional[str] = None,
    session_id: Optional[str] = None,
    timeout_minutes: int = 10,
    config: InvokerConfig = N8N_WEBHOOK,
) -> str:
    """
    Invokes a webhook once and returns the extracted result or an error string.

    Args:
        credential: Bearer credential, omitted from the request when blank.
        target_url: Absolute http:// or https:// URL.
        payload: Request body. Plain text is wrapped as {"message": "..."} for JSON content types.
        content_type: Defaults to application/json.
        session_id: Sent as x-session-id when not blank.
        timeout_minutes: Read timeout; non-positive values fall back to 10.
        config: Variant configuration, see webhook_invoker.invoker.config.

    Returns:
        The result string. Failures start with "Error executing <system> action: ".
    """
    return WebhookInvoker(config).invoke(credential, target_url, payload, content_type, session_id, timeout_minutes)
