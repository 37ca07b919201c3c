"""Tests for configuration fragment merging."""

import pytest
from pydantic import ValidationError

from keptn_source.config import DEFAULT_URL, SourceConfig, merge_configs
from keptn_source.exceptions import ConfigMergeError


class TestDefaults:
    def test_no_fragments_yields_defaults(self):
        config = merge_configs([])
        assert config == SourceConfig()
        assert config.url == DEFAULT_URL

    def test_empty_fragment_yields_defaults(self):
        """An all-empty fragment is not an error."""
        config = merge_configs([{}])
        assert config.url == DEFAULT_URL
        assert config.token == ""
        assert config.project == ""
        assert config.service == ""

    def test_none_and_blank_fragments_are_skipped(self):
        config = merge_configs([None, "", b"  ", {"project": "sockshop"}])
        assert config.project == "sockshop"


class TestPrecedence:
    def test_last_non_empty_wins(self):
        config = merge_configs([{"url": "http://a"}, {"url": "http://b", "token": "t"}])
        assert config.url == "http://b"
        assert config.token == "t"

    def test_empty_value_does_not_erase_earlier_value(self):
        config = merge_configs([
            {"token": "secret", "project": "p1"},
            {"token": "", "project": "p2"},
        ])
        assert config.token == "secret"
        assert config.project == "p2"

    def test_fields_from_different_fragments_combine(self):
        config = merge_configs([
            {"url": "http://keptn/api"},
            {"project": "sockshop"},
            {"service": "carts"},
        ])
        assert config == SourceConfig(
            url="http://keptn/api", project="sockshop", service="carts"
        )

    def test_merge_is_deterministic(self):
        fragments = [{"url": "http://a"}, {"url": "http://b"}, {"token": "x"}]
        assert merge_configs(fragments) == merge_configs(fragments)

    def test_order_matters(self):
        a = merge_configs([{"url": "http://a"}, {"url": "http://b"}])
        b = merge_configs([{"url": "http://b"}, {"url": "http://a"}])
        assert a.url == "http://b"
        assert b.url == "http://a"

    def test_unknown_keys_are_ignored(self):
        config = merge_configs([{"project": "p", "log": {"level": "debug"}}])
        assert config.project == "p"


class TestRawFragments:
    def test_json_string_fragment(self):
        config = merge_configs(['{"url": "http://raw/api", "token": "t"}'])
        assert config.url == "http://raw/api"
        assert config.token == "t"

    def test_json_bytes_fragment(self):
        config = merge_configs([b'{"project": "sockshop"}'])
        assert config.project == "sockshop"


class TestErrors:
    def test_non_string_value_is_rejected(self):
        with pytest.raises(ConfigMergeError) as exc_info:
            merge_configs([{"url": "http://a"}, {"token": 123}])
        assert exc_info.value.fields == ["fragments[1].token"]

    def test_all_invalid_fields_are_reported(self):
        with pytest.raises(ConfigMergeError) as exc_info:
            merge_configs([{"url": ["x"]}, {"project": {"name": "p"}}])
        assert exc_info.value.fields == ["fragments[0].url", "fragments[1].project"]
        assert "fragments[0].url" in str(exc_info.value)

    def test_non_object_fragment_is_rejected(self):
        with pytest.raises(ConfigMergeError) as exc_info:
            merge_configs([["url", "http://a"]])
        assert exc_info.value.fields == ["fragments[0]"]

    def test_invalid_json_fragment_is_rejected(self):
        with pytest.raises(ConfigMergeError) as exc_info:
            merge_configs(["{not json"])
        assert exc_info.value.fields == ["fragments[0]"]


def test_config_is_immutable():
    config = merge_configs([{"project": "p"}])
    with pytest.raises(ValidationError):
        config.project = "other"
