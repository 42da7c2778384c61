"""HTTP fetching and JSON decoding of cluster API documents."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from ..errors import DecodeError, FetchError
from .models import ClusterInfo, IndexDocs, IndexSettings

logger = logging.getLogger(__name__)


def build_url(base_url: str | httpx.URL, path_suffix: str, params: dict[str, str] | None = None) -> httpx.URL:
    """Join *path_suffix* onto the path of *base_url*, collapsing duplicate slashes."""
    url = httpx.URL(base_url)
    parts = [p for p in f"{url.path}/{path_suffix}".split("/") if p]
    url = url.copy_with(path="/" + "/".join(parts))
    if params:
        url = url.copy_merge_params(params)
    return url


def fetch(
    client: httpx.Client,
    base_url: str | httpx.URL,
    path_suffix: str,
    params: dict[str, str] | None = None,
) -> bytes:
    """Issue one GET and return the raw body.

    Raises :class:`FetchError` on transport failures, non-2xx statuses and
    base URLs that cannot be parsed. The response is released on every path;
    a failure while releasing it is only logged.
    """
    try:
        url = build_url(base_url, path_suffix, params)
    except httpx.InvalidURL as exc:
        raise FetchError(f"invalid base URL {base_url!s}: {exc}") from exc

    try:
        response = client.send(client.build_request("GET", url), stream=True)
    except httpx.HTTPError as exc:
        raise FetchError(f"failed to get from {url.scheme}://{url.host}:{url.port}{url.path}: {exc}") from exc

    try:
        if not response.is_success:
            raise FetchError(
                f"HTTP Request failed with code {response.status_code}",
                status_code=response.status_code,
            )
        return _read_body(response, url)
    finally:
        try:
            response.close()
        except (httpx.HTTPError, OSError) as exc:
            logger.warning("failed to close response body: %s", exc)


def _read_body(response: httpx.Response, url: httpx.URL) -> bytes:
    chunks: list[bytes] = []
    try:
        for chunk in response.iter_bytes():
            chunks.append(chunk)
    except (httpx.HTTPError, OSError) as exc:
        # httpx closes the stream once the body is exhausted
        if not response.is_closed:
            raise FetchError(f"failed to read body from {url.path}: {exc}") from exc
        logger.warning("failed to close response body: %s", exc)
    return b"".join(chunks)


def _loads(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError, RecursionError) as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc


def _object(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"expected object at {where}, got {type(value).__name__}")
    return value


def _string(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"expected string at {where}, got {type(value).__name__}")
    return value


def decode_indices_settings(raw: bytes) -> dict[str, IndexSettings]:
    """Decode a ``/_all/_settings`` body into a mapping of index name to settings."""
    doc = _loads(raw)
    if not isinstance(doc, dict):
        raise DecodeError(f"expected object of indices, got {type(doc).__name__}")

    result: dict[str, IndexSettings] = {}
    for index_name, entry in doc.items():
        settings = _object(_object(entry, index_name).get("settings"), f"{index_name}.settings")
        index = _object(settings.get("index"), f"{index_name}.settings.index")
        mapping = _object(index.get("mapping"), f"{index_name}.settings.index.mapping")
        total_fields = _object(mapping.get("total_fields"), f"{index_name}.settings.index.mapping.total_fields")
        blocks = _object(index.get("blocks"), f"{index_name}.settings.index.blocks")
        result[index_name] = IndexSettings(
            total_fields_limit=_string(total_fields.get("limit"), "total_fields.limit"),
            number_of_replicas=_string(index.get("number_of_replicas"), "number_of_replicas"),
            creation_date=_string(index.get("creation_date"), "creation_date"),
            read_only=_string(blocks.get("read_only"), "blocks.read_only"),
        )
    return result


def decode_docs_count(raw: bytes) -> list[IndexDocs]:
    """Decode a ``/_cat/indices?format=json`` body into flat records."""
    doc = _loads(raw)
    if not isinstance(doc, list):
        raise DecodeError(f"expected array of indices, got {type(doc).__name__}")

    records = []
    for pos, row in enumerate(doc):
        row = _object(row, f"[{pos}]")
        records.append(IndexDocs(
            index=_string(row.get("index"), f"[{pos}].index"),
            count=_string(row.get("docs.count"), f"[{pos}].docs.count"),
        ))
    return records


def decode_cluster_info(raw: bytes) -> ClusterInfo:
    """Decode the root endpoint body (``GET /``)."""
    doc = _object(_loads(raw), "root")
    version = _object(doc.get("version"), "version")
    cluster_name = _string(doc.get("cluster_name"), "cluster_name")
    if not cluster_name:
        raise DecodeError("root document has no cluster_name")
    return ClusterInfo(
        cluster_name=cluster_name,
        cluster_uuid=_string(doc.get("cluster_uuid"), "cluster_uuid"),
        version=_string(version.get("number"), "version.number"),
    )
