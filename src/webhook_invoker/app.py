import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from webhook_invoker.invoker.config import PRESETS
from webhook_invoker.invoker.errors import InvocationError
from webhook_invoker.invoker.observer import LoggingObserver, SpanEventObserver
from webhook_invoker.invoker.request import InvocationRequest
from webhook_invoker.invoker.service import WebhookInvoker
from webhook_invoker.utils.logger import setup_logging
from webhook_invoker.utils.telemetry import setup_telemetry

logger = logging.getLogger(__name__)

CREDENTIAL_ENV_VAR = "WEBHOOK_API_KEY"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webhook-invoke",
        description="POST a payload to a webhook and print the extracted result.",
    )
    parser.add_argument("endpoint", help="Webhook URL (http:// or https://)")
    payload_group = parser.add_mutually_exclusive_group()
    payload_group.add_argument("--payload", help="Request payload. Plain text is wrapped as {\"message\": ...}")
    payload_group.add_argument("--payload-file", type=Path, help="Read the request payload from a file")
    parser.add_argument("--content-type", default=None, help="Content-Type header (default: application/json)")
    parser.add_argument("--session-id", default=None, help="Value for the x-session-id header")
    parser.add_argument("--timeout", type=int, default=10, help="Response timeout in minutes (default: 10)")
    parser.add_argument("--variant", choices=sorted(PRESETS), default="n8n", help="Endpoint flavour (default: n8n)")
    parser.add_argument(
        "--api-key",
        default=None,
        help=f"Credential for the endpoint. Defaults to the {CREDENTIAL_ENV_VAR} environment variable.",
    )
    parser.add_argument("--output-type", default=None, help="Langflow output_type (default: text)")
    parser.add_argument("--input-type", default=None, help="Langflow input_type (default: text)")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    return parser


def _read_payload(parser: argparse.ArgumentParser, args: argparse.Namespace) -> Optional[str]:
    if args.payload_file is None:
        return args.payload
    try:
        return args.payload_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        parser.error(f"cannot read payload file {args.payload_file}: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point.

    Prints the result to stdout. Returns 0 on success and 1 when the
    invocation failed, in which case the printed line carries the error marker.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    payload = _read_payload(parser, args)

    setup_logging(args.log_level)
    provider, tracer = setup_telemetry()

    config = PRESETS[args.variant]
    observers = [LoggingObserver()]
    if tracer:
        observers.append(SpanEventObserver())
    invoker = WebhookInvoker(config, observers=observers)

    request = InvocationRequest(
        target_url=args.endpoint,
        credential=args.api_key or os.environ.get(CREDENTIAL_ENV_VAR),
        payload=payload,
        content_type=args.content_type,
        session_id=args.session_id,
        timeout_minutes=args.timeout,
        output_type=args.output_type,
        input_type=args.input_type,
    )

    exit_code = 0
    try:
        if not tracer:
            result = invoker.execute(request)
        else:
            with tracer.start_as_current_span("webhook.invoke", kind=trace.SpanKind.CLIENT) as span:
                span.set_attribute("webhook.variant", args.variant)
                result = invoker.execute(request)
                span.set_status(Status(StatusCode.OK))
    except InvocationError as e:
        logger.error(f"Invocation failed [{e.kind.value}]", extra={"error_kind": e.kind.value})
        result = invoker.format_error(e.message)
        exit_code = 1
    except Exception as e:
        logger.exception(f"Unexpected error invoking {config.system_name} endpoint {args.endpoint}")
        result = invoker.format_error(str(e))
        exit_code = 1
    finally:
        if provider:
            logger.info("Flushing OpenTelemetry provider.")
            provider.force_flush()

    print(result)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
