"""HelpScout Redirect Sync - Core business logic"""

from .config import Config, load_config, validate_config
from .core import RedirectSynchronizer
from .docs_client import DocsClient, DocsAPIError
from .metadata_store import InMemoryMetadataStore, JSONFileMetadataStore, MetadataStore
from .models import is_error, result_to_dict

__all__ = [
    'Config',
    'load_config',
    'validate_config',
    'RedirectSynchronizer',
    'DocsClient',
    'DocsAPIError',
    'MetadataStore',
    'InMemoryMetadataStore',
    'JSONFileMetadataStore',
    'is_error',
    'result_to_dict',
]
