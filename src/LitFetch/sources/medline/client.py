"""NCBI E-utilities API client.

Calls the search (esearch) and fetch (efetch) endpoints over HTTP with
retry/backoff. Both responses are consumed as streams: the search body is fed
to the short-circuiting id scanner, the fetch body to the MEDLINE parser.
"""

from __future__ import annotations

import random
import time
from typing import Optional, Sequence

import requests

from LitFetch.core.errors import RetrievalError
from LitFetch.core.models import ParserResult, SearchResult
from LitFetch.sources.medline.parser import MedlineXmlParser
from LitFetch.sources.medline.search import scan_search_response
from LitFetch.utils.log import log

ESEARCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esearch.fcgi"
EFETCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi"
DEFAULT_DATABASE = "pubmed"
DEFAULT_TOOL = "litfetch"

# E-utilities page size used for the single search page
NUMBER_TO_FETCH = 50

DEFAULT_TIMEOUT = 30.0
MAX_ATTEMPTS = 4
BASE_PAUSE = 1.0
MAX_SLEEP = 15.0
TOO_MANY_REQUESTS_BASE_PAUSE = 3.0
TOO_MANY_REQUESTS_MAX_SLEEP = 60.0
CHUNK_SIZE = 8192

RETRYABLE_STATUS = {429, 500, 502, 503, 504}

HEADERS = {
    "User-Agent": "litfetch/0.1",
    "Accept": "application/xml,text/xml;q=0.9,*/*;q=0.8",
}


class EutilsApiClient:
    """Low-level HTTP client for the E-utilities search and fetch endpoints.

    Responsible for building requests and handing response streams to the
    matching scanner/parser. Transport failures surface as `RetrievalError`,
    unreadable payloads as `ParseError`.
    """

    def __init__(
        self,
        *,
        search_url: str = ESEARCH_URL,
        fetch_url: str = EFETCH_URL,
        database: str = DEFAULT_DATABASE,
        timeout: float = DEFAULT_TIMEOUT,
        tool: str | None = DEFAULT_TOOL,
        email: str | None = None,
        api_key: str | None = None,
        max_attempts: int = MAX_ATTEMPTS,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            search_url: Search endpoint URL.
            fetch_url: Fetch endpoint URL.
            database: Entrez database name.
            timeout: Request timeout in seconds.
            tool: Tool name reported to NCBI.
            email: Contact email reported to NCBI.
            api_key: Optional NCBI API key (raises the rate limit).
            max_attempts: Attempts per request for retryable failures.
            session: Optional pre-built session (used by tests).
        """
        self.search_url = search_url
        self.fetch_url = fetch_url
        self.database = database
        self.timeout = timeout
        self.tool = tool
        self.email = email
        self.api_key = api_key
        self.max_attempts = max(1, max_attempts)
        self._session = session or requests.Session()
        self._parser = MedlineXmlParser()

    def close(self) -> None:
        """Close the underlying HTTP session and release pooled connections."""
        self._session.close()

    def __enter__(self) -> EutilsApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def search_ids(self, term: str, *, max_results: int = NUMBER_TO_FETCH) -> SearchResult:
        """Run an identifier search.

        Args:
            term: Provider-syntax search term.
            max_results: Page-size cap sent as ``retmax``.

        Returns:
            Ids in relevance order and the total match count.

        Raises:
            RetrievalError: On transport failure.
            ParseError: On a malformed response.
        """
        params = {
            "db": self.database,
            "sort": "relevance",
            "retmax": str(max_results),
            "term": term,
            **self._identity_params(),
        }
        log.debug("E-utilities search: term=%s retmax=%s", term, max_results)
        try:
            with self._get_with_retry(self.search_url, params=params) as resp:
                resp.raise_for_status()
                result = scan_search_response(resp.iter_content(chunk_size=CHUNK_SIZE))
        except requests.exceptions.RequestException as e:
            raise RetrievalError(
                f"Unable to get PubMed IDs: {e}",
                user_message="Unable to get PubMed IDs",
            ) from e
        log.debug("E-utilities search ok: ids=%d total=%d", len(result.ids), result.total_count)
        return result

    def fetch_records(self, ids: Sequence[str]) -> ParserResult:
        """Fetch full records for a batch of identifiers in one request.

        Args:
            ids: Provider-native identifiers.

        Returns:
            Parsed records and parser warnings. No ids means no request.

        Raises:
            RetrievalError: On transport failure.
            ParseError: On a malformed record payload.
        """
        if not ids:
            return ParserResult()
        params = {
            "db": self.database,
            "retmode": "xml",
            # separate the ids with a comma to fetch all entries at once
            "id": ",".join(ids),
            **self._identity_params(),
        }
        log.debug("E-utilities fetch: %d ids", len(ids))
        try:
            with self._get_with_retry(self.fetch_url, params=params) as resp:
                resp.raise_for_status()
                result = self._parser.parse(resp.iter_content(chunk_size=CHUNK_SIZE))
        except requests.exceptions.RequestException as e:
            raise RetrievalError(
                f"Error while fetching from Medline: {e}",
                user_message="Error while fetching from Medline",
            ) from e
        log.debug("E-utilities fetch ok: entries=%d warnings=%d", len(result.entries), len(result.warnings))
        return result

    def _identity_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.tool:
            params["tool"] = self.tool
        if self.email:
            params["email"] = self.email
        if self.api_key:
            params["api_key"] = self.api_key
        return params

    def _get_with_retry(self, url: str, *, params: dict[str, str]) -> requests.Response:
        """Issue a streaming GET request with retry/backoff.

        Retries on timeouts/connection errors and selected HTTP status codes.

        Args:
            url: Endpoint URL.
            params: Query parameters.

        Returns:
            requests.Response on success; the caller must close it.

        Raises:
            requests.exceptions.RequestException: Last observed error when all
                attempts failed.
        """
        last_err: Exception | None = None
        last_status_code: Optional[int] = None

        for attempt in range(1, self.max_attempts + 1):
            last_status_code = None
            try:
                log.debug("E-utilities request attempt %d/%d to %s", attempt, self.max_attempts, url)
                resp = self._session.get(
                    url,
                    params=params,
                    headers=HEADERS,
                    timeout=self.timeout,
                    stream=True,
                )
                if resp.status_code in RETRYABLE_STATUS:
                    resp.close()
                    raise requests.exceptions.HTTPError(
                        f"HTTP {resp.status_code}",
                        response=resp,
                    )
                return resp
            except (
                requests.exceptions.Timeout,
                requests.exceptions.ConnectionError,
            ) as e:
                last_err = e
            except requests.exceptions.HTTPError as e:
                last_err = e
                st = getattr(e.response, "status_code", None)
                last_status_code = st if isinstance(st, int) else None

            if attempt < self.max_attempts:
                log.debug("E-utilities retrying after attempt %d (error=%s)", attempt, last_err)
                self._sleep_backoff(attempt, status_code=last_status_code)

        assert last_err is not None
        raise last_err

    @staticmethod
    def _sleep_backoff(attempt: int, *, status_code: int | None = None) -> None:
        """Sleep with status-aware backoff.

        Args:
            attempt: Current attempt index (1-based).
            status_code: Last HTTP status code when available.
        """
        if status_code == 429:
            # NCBI allows 3 requests/s without an API key; back off harder on 429
            delay = min(TOO_MANY_REQUESTS_BASE_PAUSE * (2 ** (attempt - 1)), TOO_MANY_REQUESTS_MAX_SLEEP)
            time.sleep(delay)
            return

        delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.5), MAX_SLEEP)
        time.sleep(delay)
