"""
ContentStoreClient - Content pool operations for listing, fetching and publishing.
"""

import json
import logging
from typing import Dict, List, Optional, Union
from urllib.parse import quote

import urllib3

from .exceptions import ConfigurationError, ContentStoreError
from .preview_config import PreviewConfig
from .work_item import ItemMetadata, PendingEntry, SizeClass

FieldValue = Union[str, int, bool]


class ContentStoreClient:
    """
    Wrapper for the content pool's REST endpoints.

    Provides methods for listing pending items, fetching metadata and
    content, and publishing preview images and status flags.
    """

    PENDING_PATH = 'var/search/needsprocessing.json'

    def __init__(
        self,
        config: PreviewConfig,
        logger: Optional[logging.Logger] = None,
        http: Optional[urllib3.PoolManager] = None
    ):
        """
        Initialize content store client.

        Args:
            config: Preview configuration (server URL and credentials)
            logger: Optional logger instance
            http: Optional pre-built connection pool
        """
        if not config.server_url:
            raise ConfigurationError("Content store URL is not configured")

        self.config = config
        self.base_url = config.server_url.rstrip('/')
        self.logger = logger or logging.getLogger(__name__)

        self._http = http or urllib3.PoolManager(
            cert_reqs='CERT_REQUIRED' if config.verify_ssl else 'CERT_NONE',
            timeout=urllib3.Timeout(total=config.timeout),
            retries=False,
        )
        self._headers = urllib3.make_headers(
            basic_auth=f"{config.username}:{config.password}"
        )
        # the store's referrer filter rejects POSTs without it
        self._headers['Referer'] = self.base_url

    def url_for(self, path: str) -> str:
        """Absolute URL for a store-relative path."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def list_pending(self) -> List[PendingEntry]:
        """
        List items flagged as needing preview processing.

        Returns:
            PendingEntry for each search result

        Raises:
            ContentStoreError: If the request fails or the listing is malformed
        """
        response = self._request('GET', self.PENDING_PATH)
        body = self._decode_json(response, self.PENDING_PATH)
        try:
            return [PendingEntry.from_result(result) for result in body.get('results', [])]
        except (KeyError, TypeError, AttributeError) as e:
            raise ContentStoreError(
                f"Malformed pending list from {self.PENDING_PATH}: {e!r}",
                status=response.status,
                url=self.url_for(self.PENDING_PATH),
            ) from e

    def get_metadata(self, item_id: str) -> ItemMetadata:
        """Fetch the mime type and recorded extension of an item."""
        path = f"p/{quote(item_id, safe='')}.json"
        response = self._request('GET', path)
        return ItemMetadata.from_dict(self._decode_json(response, path))

    def get_content(self, item_id: str) -> bytes:
        """Download the item's content."""
        response = self._request('GET', f"p/{quote(item_id, safe='')}")
        return response.data

    def publish_variant(
        self,
        item_id: str,
        data: bytes,
        size_class: SizeClass,
        page_index: int,
        content_type: str = 'image/jpeg'
    ) -> None:
        """
        Upload a preview image.

        Args:
            item_id: Pool id of the item
            data: JPEG bytes
            size_class: Size class of the variant
            page_index: 1-based page number
            content_type: Content type of the upload
        """
        size = SizeClass(size_class).value
        quoted = quote(item_id, safe='')
        self._request(
            'POST',
            f"system/pool/createfile.{quoted}.page{page_index}-{size}",
            fields={'thumbnail': ('thumbnail', data, content_type)},
        )
        if size_class in (SizeClass.NORMAL, SizeClass.SMALL):
            alias = f"p/{quoted}/page{page_index}.{size}.jpg"
            self._request('POST', alias, fields={'sakai:excludeSearch': 'true'}, encode_multipart=False)
            self.logger.debug(f"Uploaded image to {self.url_for(alias)}")

    def publish_status(self, item_id: str, fields: Dict[str, FieldValue]) -> None:
        """Update properties of an item (page count, processing flags)."""
        self._request(
            'POST',
            f"p/{quote(item_id, safe='')}",
            fields={key: self._format_field(value) for key, value in fields.items()},
            encode_multipart=False,
        )

    def _request(self, method: str, path: str, **kwargs) -> urllib3.HTTPResponse:
        url = self.url_for(path)
        try:
            response = self._http.request(method, url, headers=dict(self._headers), **kwargs)
        except urllib3.exceptions.HTTPError as e:
            raise ContentStoreError(f"{method} {url} failed: {e}", url=url) from e

        if not 200 <= response.status < 300:
            raise ContentStoreError(
                f"{method} {url} returned {response.status}",
                status=response.status,
                url=url,
            )
        return response

    @staticmethod
    def _decode_json(response: urllib3.HTTPResponse, path: str) -> dict:
        try:
            return json.loads(response.data.decode('utf-8'))
        except (UnicodeDecodeError, ValueError) as e:
            raise ContentStoreError(f"Malformed JSON from {path}: {e}", status=response.status) from e

    @staticmethod
    def _format_field(value: FieldValue) -> str:
        if isinstance(value, bool):
            return 'true' if value else 'false'
        return str(value)
