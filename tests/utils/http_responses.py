from unittest.mock import Mock

import requests
from requests.structures import CaseInsensitiveDict


def make_response(status_code: int, text: str) -> Mock:
    """Builds a stand-in for requests.Response with only the attributes the invoker reads."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    response.headers = CaseInsensitiveDict({"Content-Type": "application/json; charset=utf-8"})
    response.encoding = "utf-8"
    return response
