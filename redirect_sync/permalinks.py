"""Permalink resolvers for content records"""

from typing import Any, Dict


class TemplatePermalinkResolver:
    """Builds permalinks from a template such as 'https://example.com/?p={record_id}'"""

    def __init__(self, template: str):
        self.template = template

    def __call__(self, record_id: Any) -> str:
        return self.template.format(record_id=record_id)


class StaticPermalinkResolver:
    """Looks permalinks up in a fixed mapping"""

    def __init__(self, permalinks: Dict[Any, str]):
        self.permalinks = {str(k): v for k, v in permalinks.items()}

    def __call__(self, record_id: Any) -> str:
        return self.permalinks[str(record_id)]
