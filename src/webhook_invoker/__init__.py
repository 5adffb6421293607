from .invoker.config import InvokerConfig, LANGFLOW, N8N_SESSION_WEBHOOK, N8N_WEBHOOK
from .invoker.errors import ErrorKind, InvocationError
from .invoker.request import InvocationRequest
from .invoker.service import WebhookInvoker, invoke

__all__ = [
    'ErrorKind',
    'InvocationError',
    'InvocationRequest',
    'InvokerConfig',
    'LANGFLOW',
    'N8N_SESSION_WEBHOOK',
    'N8N_WEBHOOK',
    'WebhookInvoker',
    'invoke'
]
