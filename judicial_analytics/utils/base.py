"""
Base HTTP client class for the judicial analytics engine.
"""

import time
import requests
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from .exceptions import (
    NetworkError,
    ParsingError,
    AuthenticationError,
)
from .helpers import setup_logger

SUCCESS_STATUSES = (200, 201, 204)


class BaseClient(ABC):
    """
    Base class for the REST services the engine talks to.

    Provides common functionality including:
    - HTTP session management
    - Request pacing
    - Error handling
    - Retry logic
    - Logging
    """

    def __init__(
        self,
        rate_limit: float = 0.0,
        timeout: int = 10,
        max_retries: int = 2,
        retry_delay: float = 0.5,
        user_agent: str = None,
    ):
        """
        Initialize the base client.

        Args:
            rate_limit: Minimum seconds between requests
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            retry_delay: Base delay between retries in seconds
            user_agent: Custom user agent string
        """
        self.rate_limit = rate_limit
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._last_request_time = 0.0

        # Set up session
        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": user_agent or self._default_user_agent(),
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )
        self.session.headers.update(self._auth_headers())

        # Set up logging
        self.logger = setup_logger(f"{self.__class__.__name__}")

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Base URL of the remote service."""
        pass

    def _auth_headers(self) -> Dict[str, str]:
        """Headers carrying the service credentials."""
        return {}

    def _default_user_agent(self) -> str:
        """Default user agent string."""
        return "judicial-analytics/1.0"

    def _respect_rate_limit(self):
        """Enforce pacing between requests."""
        if self.rate_limit > 0:
            elapsed = time.time() - self._last_request_time
            if elapsed < self.rate_limit:
                sleep_time = self.rate_limit - elapsed
                self.logger.debug(f"Rate limiting: sleeping for {sleep_time:.2f}s")
                time.sleep(sleep_time)

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        params: Dict[str, Any] = None,
        json_body: Any = None,
        data: Any = None,
        headers: Dict[str, str] = None,
        timeout: Optional[float] = None,
        stream: bool = False,
    ) -> requests.Response:
        """
        Make HTTP request with retry logic and error handling.

        Args:
            url: URL to request
            method: HTTP method
            params: Query parameters
            json_body: JSON payload
            data: Raw request body
            headers: Additional headers
            timeout: Per-call timeout overriding the client default
            stream: Leave the body unread for the caller to consume

        Returns:
            Response object

        Raises:
            NetworkError: For network-related issues and unexpected statuses
            AuthenticationError: For auth issues
        """
        self._respect_rate_limit()

        # Merge headers
        request_headers = dict(self.session.headers)
        if headers:
            request_headers.update(headers)

        for attempt in range(self.max_retries + 1):
            try:
                self.logger.debug(
                    f"Making {method} request to {url} (attempt {attempt + 1})"
                )

                response = self.session.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json_body,
                    data=data,
                    headers=request_headers,
                    timeout=timeout or self.timeout,
                    stream=stream,
                )

                self._last_request_time = time.time()

                # Handle HTTP status codes
                if response.status_code in SUCCESS_STATUSES:
                    return response
                elif response.status_code in (401, 403):
                    raise AuthenticationError(
                        f"Authentication required ({response.status_code})",
                        url=url,
                        status_code=response.status_code,
                    )
                elif response.status_code >= 500:
                    if attempt < self.max_retries:
                        self.logger.warning(
                            f"Server error {response.status_code}, retrying in "
                            f"{self.retry_delay}s"
                        )
                        time.sleep(self.retry_delay * (2**attempt))
                        continue
                    else:
                        raise NetworkError(
                            f"Server error ({response.status_code})",
                            url=url,
                            status_code=response.status_code,
                        )
                else:
                    raise NetworkError(
                        f"HTTP {response.status_code}",
                        url=url,
                        status_code=response.status_code,
                    )

            except requests.exceptions.Timeout:
                if attempt < self.max_retries:
                    self.logger.warning(
                        f"Request timeout, retrying in {self.retry_delay}s"
                    )
                    time.sleep(self.retry_delay * (2**attempt))
                    continue
                else:
                    raise NetworkError(
                        f"Request timeout after {self.max_retries} retries", url=url
                    )

            except requests.exceptions.ConnectionError as e:
                if attempt < self.max_retries:
                    self.logger.warning(
                        f"Connection error, retrying in {self.retry_delay}s"
                    )
                    time.sleep(self.retry_delay * (2**attempt))
                    continue
                else:
                    raise NetworkError(f"Connection failed: {str(e)}", url=url)

            except requests.exceptions.RequestException as e:
                raise NetworkError(f"Request failed: {str(e)}", url=url)

        # Should not reach here
        raise NetworkError(f"Failed after {self.max_retries} retries", url=url)

    def _parse_json(self, response: requests.Response) -> Any:
        """
        Decode a JSON response body.

        Args:
            response: Response to decode

        Returns:
            Decoded JSON value (None for empty bodies)

        Raises:
            ParsingError: If the body is not valid JSON
        """
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ParsingError(
                f"Failed to parse JSON response: {str(e)}", url=response.url
            ) from e

    def close(self):
        """Close the HTTP session."""
        if hasattr(self, "session"):
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
