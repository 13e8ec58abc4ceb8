import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]

# Make `cli` and `web` importable alongside the installed package
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from redirect_sync.config import Config  # noqa: E402
from redirect_sync.core import RedirectSynchronizer  # noqa: E402
from redirect_sync.docs_client import DocsClient  # noqa: E402
from redirect_sync.metadata_store import InMemoryMetadataStore  # noqa: E402
from redirect_sync.permalinks import StaticPermalinkResolver  # noqa: E402

SITE_ID = "S1"
PERMALINK = "https://example.com/install-guide"
LOCATION_PREFIX = "https://docsapi.helpscout.net/v1/redirects/"


def make_response(status_code=200, headers=None, text=""):
    """Build a real requests.Response without touching the network"""
    response = requests.Response()
    response.status_code = status_code
    response.headers.update(headers or {})
    response._content = text.encode("utf-8")
    return response


@pytest.fixture()
def config() -> Config:
    return Config(
        api_key="test-key",
        site_id=SITE_ID,
        permalink_template="https://example.com/?p={record_id}",
    )


@pytest.fixture()
def store() -> InMemoryMetadataStore:
    return InMemoryMetadataStore({42: {"slug": "install", "number": 7}})


@pytest.fixture()
def client() -> MagicMock:
    return MagicMock(spec=DocsClient)


@pytest.fixture()
def synchronizer(config, store, client) -> RedirectSynchronizer:
    return RedirectSynchronizer(
        config,
        store,
        client,
        StaticPermalinkResolver({42: PERMALINK, 43: "https://example.com/other"}),
    )
