"""Core redirect sync logic"""

import json
from typing import Any, Callable, Dict, Optional

import requests

from .config import Config
from .docs_client import DocsClient, DocsAPIError
from .logger import get_logger
from .metadata_store import JSONFileMetadataStore, MetadataStore
from .models import (
    MISSING_SLUG_ERROR,
    REDIRECT_LOCATION_PREFIX,
    REQUEST_FAILED_ERROR,
    SyncResult,
    error_result,
    is_error,
)
from .permalinks import TemplatePermalinkResolver

log = get_logger("core")


class RedirectSynchronizer:
    """
    Keeps a HelpScout Docs redirect in step with a content record.

    The redirect sends visitors of the HelpScout copy of an article
    (/article/{number}-{slug}) to the record's permalink. The redirect ID
    handed out by HelpScout is cached in the record's metadata, so the
    first sync creates the redirect and later syncs update it.
    """

    def __init__(
        self,
        config: Config,
        store: MetadataStore,
        client: DocsClient,
        permalink_resolver: Callable[[Any], str]
    ):
        """
        Initialize the synchronizer.

        Args:
            config: Service configuration (provides the site ID)
            store: Record metadata store
            client: Docs API client
            permalink_resolver: Callable returning a record's public URL
        """
        self.config = config
        self.store = store
        self.client = client
        self.permalink_resolver = permalink_resolver

    @classmethod
    def from_config(cls, config: Config) -> 'RedirectSynchronizer':
        """Build a synchronizer backed by the JSON file store and the Docs API"""
        return cls(
            config,
            JSONFileMetadataStore(config.store_file),
            DocsClient(config.api_url, config.api_key),
            TemplatePermalinkResolver(config.permalink_template)
        )

    def create(self, record_id: Any) -> SyncResult:
        """
        Create the redirect for a record, or update it if it already exists.

        Args:
            record_id: Content record ID

        Returns:
            The API response, or a {'error': ...} dict
        """
        data = self.store.get(record_id)

        if data.get('redirectId') is not None:
            log.info(f"Record {record_id} already linked to redirect {data['redirectId']}, updating")
            resp = self.update(data['redirectId'], record_id)
            if is_error(resp):
                return resp
            recorded = self._set_record_data(resp, record_id)
            return recorded if is_error(recorded) else resp

        body = self.request_body(record_id)
        if body is None:
            return error_result(MISSING_SLUG_ERROR)

        log.info(f"Creating redirect for record {record_id}")
        resp = self._send(self.client.post, 'redirects', body)
        recorded = self._set_record_data(resp, record_id)
        return recorded if is_error(recorded) else resp

    def update(self, redirect_id: str, record_id: Any) -> SyncResult:
        """
        Update an existing redirect. Does not touch the record's metadata.

        Args:
            redirect_id: HelpScout ID of the redirect
            record_id: Content record ID

        Returns:
            The API response, or a {'error': ...} dict
        """
        body = self.request_body(record_id)
        if body is None:
            return error_result(MISSING_SLUG_ERROR)

        resp = self._send(self.client.put, f'redirects/{redirect_id}', body)
        if resp is None:
            return error_result(REQUEST_FAILED_ERROR)
        return resp

    def get_helpscout_slug(self, record_id: Any) -> Optional[str]:
        """
        Calculate the HelpScout URL path of a record's article.

        Returns:
            '/article/{number}-{slug}', or None if either field is missing
        """
        data = self.store.get(record_id)

        if data.get('slug') is None or data.get('number') is None:
            return None
        return f"/article/{data['number']}-{data['slug']}"

    def request_body(self, record_id: Any) -> Optional[str]:
        """
        Build the serialized body for a create or update request.

        Returns:
            JSON string, or None when the record has no HelpScout slug
        """
        slug = self.get_helpscout_slug(record_id)
        if not slug:
            log.warning(f"Record {record_id} is missing HelpScout slug or number, skipping")
            return None

        body = {
            'siteId': self.config.site_id,
            'urlMapping': slug,
            'redirect': self.permalink_resolver(record_id),
        }
        # Compact JSON; '/' in urlMapping is sent unescaped
        return json.dumps(body, separators=(',', ':'), ensure_ascii=False)

    def _send(self, method: Callable[[str, str], requests.Response], path: str, body: str) -> Optional[requests.Response]:
        """Call the client, mapping transport failures to None"""
        try:
            return method(path, body)
        except DocsAPIError as e:
            log.warning(f"Request to {path} failed: {e}")
            return None

    def _set_record_data(self, resp: Optional[SyncResult], record_id: Any) -> Dict[str, Any]:
        """
        Store the redirect ID from a successful response on the record.

        Args:
            resp: API response, None on transport failure
            record_id: Content record ID

        Returns:
            The record's updated HelpScout data, or a {'error': ...} dict
        """
        if resp is None or is_error(resp) or resp.status_code != 200:
            status = getattr(resp, 'status_code', None)
            log.warning(f"Redirect request for record {record_id} was not successful (status={status})")
            return error_result(REQUEST_FAILED_ERROR)

        data = self.store.get(record_id)
        header = resp.headers.get('Location', '')
        redirect_id = header.replace(REDIRECT_LOCATION_PREFIX, '')

        # Update responses carry no Location; keep the known ID
        if redirect_id:
            data['redirectId'] = redirect_id
            self.store.set(record_id, data)
            log.info(f"Record {record_id} linked to redirect {redirect_id}")

        return data
