from __future__ import annotations

import json
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import requests

from ...domain.errors import CollectionError, UpstreamUnavailableError, VectorStoreError
from ...domain.interfaces import VectorStore
from ...domain.models import Point, PointId, QueryResult, Vector
from ..config import Settings
from ..logging import get_logger

logger = get_logger("item_vector_sync.qdrant")

# Optimizer thresholds applied when the collection is created lazily.
OPTIMIZERS_CONFIG = {"default_segment_number": 2, "indexing_threshold": 100}


def payload_match(key: str, value: object) -> Dict[str, object]:
    """Qdrant filter requiring payload ``key`` to equal ``value``."""
    return {"must": [{"key": key, "match": {"value": value}}]}


def _failed(r: requests.Response) -> bool:
    return not r.ok


def _json(r: requests.Response, what: str) -> dict:
    """Decoded body of a successful response; a non-JSON body is a store failure."""
    try:
        return r.json() or {}
    except ValueError as ex:
        logger.error("Qdrant %s returned non-JSON body | status=%s | body=%s", what, r.status_code, r.text)
        raise VectorStoreError(f"Qdrant {what} returned an unreadable response", r.text) from ex


class QdrantVectorStore(VectorStore):
    """Vector store adapter for Qdrant REST."""

    def __init__(self, settings: Settings) -> None:
        self._base = settings.qdrant_url.rstrip("/")
        self._timeout = settings.http_timeout

    def check_ready(self) -> None:
        url = f"{self._base}/readyz"
        try:
            r = requests.get(url, timeout=self._timeout)
        except requests.RequestException as ex:
            logger.error("Qdrant connection failed | url=%s | error=%s", self._base, ex)
            raise UpstreamUnavailableError(f"Qdrant not available at {self._base}") from ex
        if _failed(r):
            logger.error("Qdrant connection failed | url=%s | status=%s", self._base, r.status_code)
            raise UpstreamUnavailableError(f"Qdrant not available at {self._base}", r.text)

    def ensure_collection(self, name: str, dim: int, distance: str = "Cosine") -> bool:
        r = self._request("get", f"/collections/{name}", error=CollectionError)
        if r.status_code == 404:
            body = {
                "vectors": {"size": dim, "distance": distance},
                "optimizers_config": dict(OPTIMIZERS_CONFIG),
            }
            r2 = self._request("put", f"/collections/{name}", json=body, error=CollectionError)
            if _failed(r2):
                logger.error("Collection creation failed | status=%s | body=%s", r2.status_code, r2.text)
                raise CollectionError("Collection creation failed", r2.text)
            logger.info("Collection %s created successfully", name)
            return True
        if _failed(r):
            logger.error("Collection check failed | status=%s | body=%s", r.status_code, r.text)
            raise CollectionError("Collection check failed", r.text)
        return False

    def upsert_points(self, name: str, points: List[Point]) -> dict:
        body = {
            "points": [
                {"id": p.id, "vector": p.vector.values, "payload": p.payload}
                for p in points
            ]
        }
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Qdrant upsert payload: %s", json.dumps(body, indent=2, default=str))
        r = self._request("put", f"/collections/{name}/points?wait=true", json=body)
        if _failed(r):
            logger.error("Qdrant upsert failed | status=%s | body=%s", r.status_code, r.text)
            raise VectorStoreError("Qdrant upsert failed", r.text)
        return _json(r, "upsert")

    def scroll_by_payload(
        self,
        name: str,
        key: str,
        value: object,
        limit: int = 1,
        with_payload: bool = False,
        offset: Optional[object] = None,
    ) -> Tuple[List[QueryResult], Optional[object]]:
        body: Dict[str, object] = {
            "filter": payload_match(key, value),
            "limit": limit,
            "with_payload": with_payload,
            "with_vector": False,
        }
        if offset is not None:
            body["offset"] = offset
        r = self._request("post", f"/collections/{name}/points/scroll", json=body)
        if _failed(r):
            logger.error("Qdrant scroll failed | %s=%s | status=%s | body=%s", key, value, r.status_code, r.text)
            raise VectorStoreError("Qdrant search failed", r.text)
        result = _json(r, "scroll").get("result") or {}
        points = [
            QueryResult(id=it.get("id"), score=0.0, payload=it.get("payload") or {})
            for it in (result.get("points") or [])
        ]
        return points, result.get("next_page_offset")

    def delete_points(self, name: str, ids: Sequence[PointId]) -> dict:
        body = {"points": list(ids)}
        r = self._request("post", f"/collections/{name}/points/delete?wait=true", json=body)
        if _failed(r):
            logger.error("Qdrant delete failed | ids=%s | status=%s | body=%s", list(ids), r.status_code, r.text)
            raise VectorStoreError("Qdrant delete failed", r.text)
        return _json(r, "delete")

    def search(
        self,
        name: str,
        vector: Vector,
        limit: int = 5,
        with_payload: bool = True,
        match: Optional[Dict[str, object]] = None,
    ) -> List[QueryResult]:
        body: Dict[str, object] = {
            "vector": vector.values,
            "limit": limit,
            "with_payload": with_payload,
            "with_vectors": False,
        }
        if match:
            body["filter"] = {
                "must": [{"key": k, "match": {"value": v}} for k, v in match.items()]
            }
        r = self._request("post", f"/collections/{name}/points/search", json=body)
        if _failed(r):
            logger.error("Qdrant search failed | status=%s | body=%s", r.status_code, r.text)
            raise VectorStoreError("Qdrant search failed", r.text)
        data = _json(r, "search")
        return [
            QueryResult(
                id=it.get("id"),
                score=float(it.get("score", 0.0)),
                payload=it.get("payload") or {},
            )
            for it in (data.get("result") or [])
        ]

    def _request(self, method: str, path: str, error=VectorStoreError, **kwargs) -> requests.Response:
        """Issue one HTTP call; transport failures surface as ``error``."""
        url = f"{self._base}{path}"
        try:
            return getattr(requests, method)(url, timeout=self._timeout, **kwargs)
        except requests.RequestException as ex:
            logger.error("Qdrant request failed | %s %s | error=%s", method.upper(), url, ex)
            raise error(f"Qdrant request failed: {method.upper()} {path}") from ex
