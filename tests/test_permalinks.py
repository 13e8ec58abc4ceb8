import pytest

from redirect_sync.permalinks import StaticPermalinkResolver, TemplatePermalinkResolver


def test_template_resolver():
    resolver = TemplatePermalinkResolver("https://example.com/?p={record_id}")

    assert resolver(42) == "https://example.com/?p=42"


def test_static_resolver_accepts_int_or_str_ids():
    resolver = StaticPermalinkResolver({42: "https://example.com/install-guide"})

    assert resolver(42) == resolver("42") == "https://example.com/install-guide"
    with pytest.raises(KeyError):
        resolver(43)
