"""
Shared HTTP plumbing for MLS provider clients.

Handles the session, rate limiting between requests, retries with backoff
on 429/5xx/network failures, and mapping of HTTP failures to the MLS
exception hierarchy.
"""

import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional

import requests

import logging

from agentdesk.mls.exceptions import MLSAPIError, MLSAuthError, MLSRateLimitError

logger = logging.getLogger(__name__)


class BaseMLSClient:
    """
    Base class for MLS REST clients.

    Subclasses configure ``self.session`` auth headers and build URLs.
    """

    provider = "MLS"

    def __init__(
        self,
        request_delay: float = 0.25,
        max_retries: int = 3,
        max_requests_per_run: int = 10000,
        timeout: int = 30,
    ):
        """
        Args:
            request_delay: Seconds between requests (rate limiting)
            max_retries: Max retry attempts for failed requests
            max_requests_per_run: Safety limit on total requests per run
            timeout: Request timeout in seconds
        """
        self.request_delay = request_delay
        self.max_retries = max_retries
        self.max_requests_per_run = max_requests_per_run
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

        self.request_count = 0
        self.last_request_time = 0.0

        self.stats = {
            'requests': 0,
            'records_fetched': 0,
            'errors': 0,
            'retries': 0,
        }

    def _rate_limit(self):
        """Enforce rate limiting between requests."""
        elapsed = time.time() - self.last_request_time
        if elapsed < self.request_delay:
            time.sleep(self.request_delay - elapsed)

        self.last_request_time = time.time()
        self.request_count += 1

        if self.request_count > self.max_requests_per_run:
            raise MLSRateLimitError(
                f"Reached max requests per run ({self.max_requests_per_run}). "
                "Increase max_requests_per_run or run again later."
            )

    def _request(self, method: str, url: str, params: Optional[Dict[str, Any]] = None,
                 **kwargs) -> requests.Response:
        """
        Make an HTTP request with retry and rate limiting.

        Raises:
            MLSAuthError: On 401/403
            MLSAPIError: On other failures after retries
        """
        kwargs.setdefault('timeout', self.timeout)

        for attempt in range(self.max_retries):
            self._rate_limit()
            self.stats['requests'] += 1

            try:
                logger.debug(f"{method} {url} (attempt {attempt + 1})")
                response = self.session.request(method, url, params=params, **kwargs)

                if response.ok:
                    return response

                if response.status_code == 401:
                    raise MLSAuthError(f"{self.provider} authentication failed. Check your API credentials.")

                if response.status_code == 403:
                    raise MLSAuthError(
                        f"{self.provider} access denied. Your credentials may not "
                        "have permission for this resource."
                    )

                if response.status_code == 429:
                    wait_time = self._retry_after(response.headers.get('Retry-After'), attempt)
                    logger.warning(f"{self.provider} rate limited. Waiting {wait_time}s before retry.")
                    time.sleep(wait_time)
                    self.stats['retries'] += 1
                    continue

                if response.status_code >= 500:
                    wait_time = 2 ** attempt * 2
                    logger.warning(
                        f"{self.provider} server error {response.status_code}. "
                        f"Retrying in {wait_time}s (attempt {attempt + 1}/{self.max_retries})"
                    )
                    time.sleep(wait_time)
                    self.stats['retries'] += 1
                    continue

                # Client error (4xx besides 401/403/429): don't retry
                raise MLSAPIError(
                    f"{self.provider} API error ({response.status_code}): {response.text[:500]}"
                )

            except requests.exceptions.Timeout:
                self.stats['errors'] += 1
                if attempt == self.max_retries - 1:
                    raise MLSAPIError(f"{self.provider} request timed out after {self.max_retries} attempts")
                wait_time = 2 ** attempt * 2
                logger.warning(f"Timeout. Retrying in {wait_time}s.")
                time.sleep(wait_time)

            except requests.exceptions.ConnectionError:
                self.stats['errors'] += 1
                if attempt == self.max_retries - 1:
                    raise MLSAPIError(f"{self.provider} connection failed after {self.max_retries} attempts")
                wait_time = 2 ** attempt * 2
                logger.warning(f"Connection error. Retrying in {wait_time}s.")
                time.sleep(wait_time)

        raise MLSAPIError(f"{self.provider} max retries ({self.max_retries}) exceeded")

    @staticmethod
    def _retry_after(value: Optional[str], attempt: int) -> float:
        """
        Seconds to wait for a 429.

        Retry-After may be delta-seconds or an HTTP-date; anything
        unparseable falls back to exponential backoff.
        """
        backoff = min(2 ** attempt * 5, 120)
        if not value:
            return backoff

        value = value.strip()
        if value.isdigit():
            return int(value)

        try:
            retry_at = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            logger.debug(f"Unparseable Retry-After header: {value}")
            return backoff

        if retry_at.tzinfo is None:
            retry_at = retry_at.replace(tzinfo=timezone.utc)
        return max(0.0, (retry_at - datetime.now(timezone.utc)).total_seconds())

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a URL and decode the JSON body."""
        response = self._request('GET', url, params=params)
        try:
            return response.json()
        except ValueError:
            raise MLSAPIError(f"{self.provider} returned a non-JSON response: {response.text[:200]}")

    def get_stats(self) -> Dict[str, int]:
        """Return stats for the current run."""
        return dict(self.stats)

    def reset_stats(self):
        """Reset run statistics."""
        self.stats = {
            'requests': 0,
            'records_fetched': 0,
            'errors': 0,
            'retries': 0,
        }
        self.request_count = 0
