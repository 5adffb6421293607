import logging

class SessionIdAdapter(logging.LoggerAdapter):
    """
    A logger adapter to automatically inject the caller's session id
    into all log messages.
    """
    def process(self, msg, kwargs):
        if self.extra.get('session_id'):
            return f"[SessionID: {self.extra['session_id']}] {msg}", kwargs
        return msg, kwargs
