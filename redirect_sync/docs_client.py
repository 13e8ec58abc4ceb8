"""HelpScout Docs API Client"""

from typing import Optional

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)

from .logger import get_logger

log = get_logger("docs_client")


class DocsAPIError(Exception):
    """Transport level failure talking to the Docs API"""
    pass


class DocsClient:
    """
    Client for the HelpScout Docs API.

    Bodies are sent exactly as given, and responses are handed back for
    every status code so the caller decides what counts as success.
    Only transport failures raise.
    """

    def __init__(self, base_url: str, api_key: str, timeout: int = 30):
        """
        Initialize Docs API client.

        Args:
            base_url: API base URL (e.g., https://docsapi.helpscout.net/v1/)
            api_key: Docs API key, sent as the Basic auth username
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout

        self.session = requests.Session()
        self.session.auth = (api_key, 'X')
        self.session.headers.update({
            'Accept': 'application/json',
            'Content-Type': 'application/json'
        })

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    # A connect timeout means the request never reached the server
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(requests.exceptions.ConnectTimeout),
        reraise=True
    )
    def _send(self, method: str, url: str, body: Optional[str]) -> requests.Response:
        return self.session.request(
            method=method,
            url=url,
            data=body,
            timeout=self.timeout,
            allow_redirects=False
        )

    def _request(self, method: str, path: str, body: Optional[str] = None) -> requests.Response:
        """
        Make an API request.

        Args:
            method: HTTP method
            path: API path relative to the base URL
            body: Serialized request body

        Returns:
            The response, whatever its status code

        Raises:
            DocsAPIError: If the request could not be completed
        """
        url = self._url(path)
        log.debug(f"Docs API {method} {url}")

        try:
            response = self._send(method, url, body)
        except requests.exceptions.RequestException as e:
            log.error(f"Request error: {method} {url} - {e}")
            raise DocsAPIError(f"Request failed: {e}") from e

        log.debug(f"Docs API {method} {url} -> {response.status_code}")
        if response.status_code >= 400:
            log.warning(f"Docs API {method} {path} returned {response.status_code}: {response.text[:500]}")

        return response

    def post(self, path: str, body: str) -> requests.Response:
        """POST a serialized body to path"""
        return self._request('POST', path, body)

    def put(self, path: str, body: str) -> requests.Response:
        """PUT a serialized body to path"""
        return self._request('PUT', path, body)

    def test_connection(self) -> bool:
        """
        Test the Docs API connection and credentials.

        Returns:
            True if the sites listing can be read
        """
        try:
            response = self._request('GET', 'sites')
        except DocsAPIError:
            return False
        return response.status_code < 400
