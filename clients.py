"""
HTTP clients for the Record API (source records) and the Full-Text API.
No retries are done; a failed record request fails the manifest request, a failed
full-text check only means we don't add full-text links.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter

from exceptions import (
    FullTextCheckError,
    InvalidApiKeyError,
    RecordNotFoundError,
    RecordRetrieveError,
)
from models import FullTextStatus
from settings import ManifestSettings

logger = logging.getLogger(__name__)

# (connect, read) in seconds
RECORD_TIMEOUT: Tuple[float, float] = (10, 30)
FULLTEXT_TIMEOUT: Tuple[float, float] = (8, 20)

POOL_CONNECTIONS = 100
POOL_MAXSIZE = 200

USER_AGENT = "edm-iiif-manifest/1.0"


def create_session(
    pool_connections: int = POOL_CONNECTIONS, pool_maxsize: int = POOL_MAXSIZE
) -> requests.Session:
    """Session with a pooled adapter and without adapter level retries."""
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=pool_connections, pool_maxsize=pool_maxsize, max_retries=0
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": USER_AGENT})
    return session


class RecordApiClient:
    def __init__(self, settings: ManifestSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or create_session()

    def fetch_record(
        self, record_id: str, wskey: str, base_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Retrieve the record json for `record_id` ("/<dataset>/<record>").

        Raises:
            InvalidApiKeyError: the Record API rejected the key
            RecordNotFoundError: there is no such record
            RecordRetrieveError: any other problem talking to the Record API
        """
        url = self.settings.record_url(record_id, wskey, base_url)
        logger.debug("Record request: %s", url.replace(wskey, "***") if wskey else url)
        try:
            response = self.session.get(
                url, timeout=RECORD_TIMEOUT, headers={"Accept": "application/json"}
            )
        except requests.RequestException as e:
            raise RecordRetrieveError(
                f"Error retrieving record {record_id}: {e}", cause=e
            ) from e

        if response.status_code == 401:
            raise InvalidApiKeyError("API key is not valid")
        if response.status_code == 404:
            raise RecordNotFoundError(f"Record {record_id} not found")
        if response.status_code != 200:
            raise RecordRetrieveError(
                f"Error retrieving record {record_id}: Record API returned {response.status_code}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise RecordRetrieveError(
                f"Error parsing record {record_id}: {e}", cause=e
            ) from e


class FullTextClient:
    def __init__(self, settings: ManifestSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or create_session()

    def exists(self, url: str) -> bool:
        """
        HEAD request on an annotation page. 200 means it exists, 404 that it doesn't.

        Raises:
            FullTextCheckError: any other response or a connection problem
        """
        try:
            response = self.session.head(url, timeout=FULLTEXT_TIMEOUT)
        except requests.RequestException as e:
            raise FullTextCheckError(f"Error checking full text at {url}: {e}", cause=e) from e
        logger.debug("Full-text HEAD request %s, status code = %d", url, response.status_code)
        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise FullTextCheckError(
            f"Error checking full text at {url}: status code {response.status_code}"
        )

    def probe(
        self, europeana_id: str, page_nr: int, base_url: Optional[str] = None
    ) -> FullTextStatus:
        """Like `exists`, but never raises: problems are logged and reported as UNKNOWN."""
        url = self.settings.fulltext_url(europeana_id, page_nr, base_url)
        try:
            found = self.exists(url)
        except FullTextCheckError as e:
            logger.error("Error connecting to Fulltext API: %s", e.message)
            return FullTextStatus.UNKNOWN
        return FullTextStatus.EXISTS if found else FullTextStatus.NOT_EXISTS
