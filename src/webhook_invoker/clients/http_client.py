import requests
import logging
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


def _declares_charset(response: requests.Response) -> bool:
    content_type = response.headers.get("Content-Type") or ""
    return "charset=" in content_type.lower()


class HttpClient:
    """
    A simple wrapper around the requests library for making HTTP calls.
    """

    def post(self, url: str, data: bytes, headers: Dict[str, str], timeout: Tuple[float, float]) -> requests.Response:
        """
        Sends a POST request to the given URL.

        Args:
            url: The endpoint URL to send the request to.
            data: The encoded request body.
            headers: The request headers.
            timeout: A (connect, read) timeout tuple in seconds.

        Returns:
            The response, whatever its status code. The body is fully read.

        Raises:
            requests.exceptions.RequestException: For connection, TLS or timeout errors.
        """
        logger.info(f"Sending POST request to {url}")
        try:
            response = requests.post(url, data=data, headers=headers, timeout=timeout)
            # requests assumes ISO-8859-1 for text/* without a charset; webhooks reply in UTF-8.
            if not _declares_charset(response):
                response.encoding = "utf-8"
            logger.info(f"Received response from {url} with status {response.status_code}")
            return response
        except requests.exceptions.RequestException as e:
            logger.error(f"HTTP request to {url} failed: {e}")
            raise
