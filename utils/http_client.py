"""
HTTP request/response client with a fixed retry policy
"""
import logging
import time
from enum import Enum
from typing import Any, Dict, Optional

import requests
from requests.cookies import RequestsCookieJar
from requests.exceptions import InvalidSchema, InvalidURL, MissingSchema, RequestException

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY = 1.0


class ResponseMode(str, Enum):
    DISCARD = "discard"
    TEXT = "text"
    HEADER = "header"


class HttpClient:
    """
    Issues single HTTP requests against the service.

    Every attempt builds a new session and request, so nothing is reused
    between retries; the cookie jar is the only state carried over. Failures
    never raise: every method reports them as an empty result.
    """

    def __init__(self, max_attempts: int = MAX_ATTEMPTS, retry_delay: float = RETRY_DELAY,
                 timeout: float = 10.0):
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.timeout = timeout

    def _build_request(self, url: str, method: str, body: Optional[Dict[str, Any]],
                       cookies: Optional[RequestsCookieJar]) -> requests.Request:
        headers = {}
        if body is not None:
            headers = {"Content-Type": "application/json; charset=UTF-8", "Accept": "application/json"}
        return requests.Request(method, url, json=body, headers=headers, cookies=cookies)

    def request(self, url: str, method: str = "GET", body: Optional[Dict[str, Any]] = None,
                cookies: Optional[RequestsCookieJar] = None) -> Optional[requests.Response]:
        """
        Send one request with retries.

        Args:
            url: Absolute URL
            method: HTTP method
            body: JSON body, sent on every attempt
            cookies: Cookie jar attached to every attempt

        Returns:
            The successful response, or None after the last failed attempt or
            when the URL is malformed
        """
        if not url:
            return None

        attempt = 0
        while attempt < self.max_attempts:
            attempt += 1
            try:
                with requests.Session() as session:
                    prepared = session.prepare_request(self._build_request(url, method, body, cookies))
                    response = session.send(prepared, timeout=self.timeout)
                    response.raise_for_status()
                    return response
            except (MissingSchema, InvalidSchema, InvalidURL) as e:
                logger.error(f"Malformed URL {url}: {e}")
                return None
            except RequestException as e:
                logger.warning(f"{method} {url} failed (attempt {attempt}/{self.max_attempts}): {e}")
                if attempt >= self.max_attempts:
                    break
                time.sleep(self.retry_delay)

        logger.error(f"Giving up on {method} {url} after {self.max_attempts} attempts")
        return None

    def send(self, url: str, method: str = "GET", body: Optional[Dict[str, Any]] = None,
             cookies: Optional[RequestsCookieJar] = None, mode: ResponseMode = ResponseMode.TEXT,
             header_name: Optional[str] = None) -> str:
        """Send a request and return the body text, a header value, or "" on failure or in discard mode"""
        response = self.request(url, method, body, cookies)
        if response is None or mode == ResponseMode.DISCARD:
            return ""
        if mode == ResponseMode.HEADER:
            return response.headers.get(header_name or "", "") or ""
        return response.text or ""

    def fetch_cookies(self, url: str) -> Optional[RequestsCookieJar]:
        """GET a page and return the cookies it sets, or None if it sets none"""
        response = self.request(url)
        if response is None:
            return None
        if not response.headers.get("Set-Cookie"):
            logger.error(f"No session cookie returned by {url}")
            return None
        return response.cookies
