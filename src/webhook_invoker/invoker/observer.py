import logging
from typing import Union

from opentelemetry import trace

from webhook_invoker.invoker.errors import ErrorKind

logger = logging.getLogger(__name__)


class InvocationObserver:
    """
    Receives diagnostic events for each invocation.

    The default implementations do nothing; subclasses override the events they care about.
    """

    def attempt(self, endpoint: str, payload_length: int) -> None:
        pass

    def result(self, status_code: int) -> None:
        pass

    def failure(self, kind: ErrorKind, message: str) -> None:
        pass


class LoggingObserver(InvocationObserver):
    """Writes invocation events as log lines."""

    def __init__(self, log: Union[logging.Logger, logging.LoggerAdapter] = logger):
        self.log = log

    def attempt(self, endpoint: str, payload_length: int) -> None:
        self.log.info(
            f"Executing webhook call to endpoint: {endpoint}",
            extra={"endpoint": endpoint, "payload_length": payload_length},
        )

    def result(self, status_code: int) -> None:
        self.log.info(f"Response status code: {status_code}", extra={"status_code": status_code})

    def failure(self, kind: ErrorKind, message: str) -> None:
        self.log.error(f"Webhook invocation failed [{kind.value}]: {message}", extra={"error_kind": kind.value})


class SpanEventObserver(InvocationObserver):
    """Records invocation events on the current OpenTelemetry span."""

    def attempt(self, endpoint: str, payload_length: int) -> None:
        span = trace.get_current_span()
        span.set_attribute("url.full", endpoint)
        span.add_event("webhook.attempt", attributes={"payload_length": payload_length})

    def result(self, status_code: int) -> None:
        span = trace.get_current_span()
        span.set_attribute("http.response.status_code", status_code)
        span.add_event("webhook.result", attributes={"status_code": status_code})

    def failure(self, kind: ErrorKind, message: str) -> None:
        span = trace.get_current_span()
        span.add_event("webhook.failure", attributes={"error_kind": kind.value, "message": message})
        span.set_status(trace.Status(trace.StatusCode.ERROR, f"{kind.value}: {message}"))
