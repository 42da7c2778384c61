"""Tests for the metric value functions."""

from es_index_exporter.collector.extract import (
    DEFAULT_CREATION_DATE,
    DEFAULT_TOTAL_FIELDS,
    creation_timestamp_seconds,
    docs_count,
    is_included,
    is_read_only,
    parse_float,
    replicas,
    settings_metrics,
    total_fields,
)
from es_index_exporter.collector.models import IndexDocs, IndexSettings


def test_parse_float():
    assert parse_float("12") == 12.0
    assert parse_float("1.5e3") == 1500.0
    assert parse_float("") is None
    assert parse_float("abc") is None
    assert parse_float(" 12") is None
    assert parse_float("1_000") is None


def test_total_fields():
    assert total_fields(IndexSettings(total_fields_limit="5000")) == 5000.0
    assert total_fields(IndexSettings(total_fields_limit="lots")) == 1000.0
    assert total_fields(IndexSettings()) == DEFAULT_TOTAL_FIELDS


def test_replicas_fallback_matches_total_fields_default():
    assert replicas(IndexSettings(number_of_replicas="2")) == 2.0
    assert replicas(IndexSettings(number_of_replicas="x")) == 1000.0


def test_creation_timestamp_seconds():
    settings = IndexSettings(creation_date="1609459200000")
    assert creation_timestamp_seconds(settings) == 1609459200.0
    assert creation_timestamp_seconds(IndexSettings(creation_date="never")) == DEFAULT_CREATION_DATE


def test_is_read_only():
    assert is_read_only(IndexSettings(read_only="true"))
    assert not is_read_only(IndexSettings(read_only="false"))
    assert not is_read_only(IndexSettings(read_only="TRUE"))
    assert not is_read_only(IndexSettings())


def test_docs_count():
    assert docs_count(IndexDocs("a", "42")) == 42.0
    assert docs_count(IndexDocs("a", "")) is None
    assert docs_count(IndexDocs("a", "n/a")) is None


def test_is_included():
    assert is_included("any", frozenset())
    assert is_included("idx-a", frozenset({"idx-a"}))
    assert not is_included("idx-b", frozenset({"idx-a"}))


def test_value_functions_are_pure():
    settings = IndexSettings("bad", "bad", "bad", "true")
    assert [total_fields(settings) for _ in range(3)] == [1000.0] * 3
    assert [creation_timestamp_seconds(settings) for _ in range(3)] == [0.0] * 3


def test_settings_metrics_names():
    names = [m.name for m in settings_metrics("es")]
    assert names == [
        "es_indices_settings_total_fields",
        "es_indices_settings_replicas",
        "es_indices_settings_creation_timestamp_seconds",
    ]
