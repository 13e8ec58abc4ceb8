"""Result types for HelpScout Redirect Sync"""

from typing import Any, Dict, Union

import requests


# Meta key the redirect state is stored under on a content record
HELPSCOUT_META_KEY = "_helpscout_data"

# Prefix of the Location header returned when a redirect is created
REDIRECT_LOCATION_PREFIX = "https://docsapi.helpscout.net/v1/redirects/"

MISSING_SLUG_ERROR = "something went wrong."
REQUEST_FAILED_ERROR = "Request was not successful."

# Either the raw API response or a {'error': message} dict
SyncResult = Union[requests.Response, Dict[str, Any]]


def error_result(message: str) -> Dict[str, str]:
    """Build a failure result"""
    return {'error': message}


def is_error(result: Any) -> bool:
    """True if result is a failure dict"""
    return isinstance(result, dict) and 'error' in result


def result_to_dict(result: SyncResult) -> Dict[str, Any]:
    """
    Convert a sync result to a JSON serializable dictionary.

    Failure dicts are returned as they are; responses are rendered as
    status code, headers and body text.
    """
    if isinstance(result, requests.Response):
        return {
            'status_code': result.status_code,
            'headers': dict(result.headers),
            'body': result.text,
        }
    return dict(result)
