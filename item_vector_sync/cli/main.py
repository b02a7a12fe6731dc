from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..application.chat import ItemChatService
from ..application.synchronizer import ItemSynchronizer
from ..domain.errors import ItemSyncError
from ..infrastructure.config import Settings, load_settings
from ..infrastructure.logging import get_logger
from ..infrastructure.openai_api.client import OpenAIChatService, OpenAIEmbeddingService, build_client
from ..infrastructure.qdrant.client import QdrantVectorStore
from ..infrastructure.sqlite.items import SqliteItemRepository
from .parsers import build_parser

logger = get_logger("item_vector_sync.cli")


def _print(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2, default=str))


def build_synchronizer(settings: Settings) -> ItemSynchronizer:
    client = build_client(settings)
    return ItemSynchronizer(
        settings,
        SqliteItemRepository(settings.items_db),
        OpenAIEmbeddingService(client, settings.embed_model, settings.vector_size),
        QdrantVectorStore(settings),
    )


def build_chat_service(settings: Settings) -> ItemChatService:
    client = build_client(settings)
    return ItemChatService(
        settings,
        OpenAIEmbeddingService(client, settings.embed_model, settings.vector_size),
        OpenAIChatService(client, settings.chat_model),
        QdrantVectorStore(settings),
    )


def _load_history(path: Optional[str]) -> List[Dict[str, str]]:
    """Read chat history from a JSON file holding a list of {role, content} objects."""
    if not path:
        return []
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("History file must contain a JSON list of messages")
    return data


def run(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    ns = ap.parse_args(list(argv or []))

    try:
        settings = load_settings()
        return dispatch_commands(ns, settings)
    except ItemSyncError as ex:  # keep CLI concise and user-friendly
        _print({"status": "error", "kind": ex.kind.value, "error": str(ex)})
        return 3


def dispatch_commands(ns, settings: Settings) -> int:
    """
    Dispatches CLI commands to the synchronizer or chat service.

    Commands:
    - ensure-collection: create the configured collection when missing
    - sync-all: embed every item and bulk-upsert the points
    - sync-item / update-item / delete-item: act on one item by relational id
    - chat: answer a question with retrieved item context
    """
    if ns.cmd == "chat":
        return chat_command(ns, settings)

    sync = build_synchronizer(settings)
    if ns.cmd == "ensure-collection":
        created = sync.ensure_collection()
        _print({"status": "ok", "collection": settings.collection, "created": created})
        return 0
    if ns.cmd == "sync-all":
        count = sync.full_sync()
        logger.info("Full sync request completed | collection=%s | points=%d", settings.collection, count)
        _print({"status": "ok", "collection": settings.collection, "synced": count})
        return 0
    if ns.cmd == "sync-item":
        sync.sync_item_by_id(ns.item_id)
        _print({"status": "ok", "collection": settings.collection, "item_id": ns.item_id})
        return 0
    if ns.cmd == "update-item":
        sync.update_item_by_id(ns.item_id)
        _print({"status": "ok", "collection": settings.collection, "item_id": ns.item_id})
        return 0
    if ns.cmd == "delete-item":
        deleted = sync.delete_item(ns.item_id)
        _print({"status": "ok", "collection": settings.collection, "item_id": ns.item_id, "deleted": deleted})
        return 0

    _print({"status": "error", "error": f"Unknown command: {ns.cmd}"})
    return 2


def chat_command(ns, settings: Settings) -> int:
    try:
        history = _load_history(getattr(ns, "history", None))
    except (OSError, ValueError) as ex:
        _print({"status": "error", "error": f"Invalid history: {ex}"})
        return 2
    resp = build_chat_service(settings).chat(str(ns.q), history)
    _print({"status": "ok", "degraded": resp.degraded, **resp.to_dict()})
    return 0


def main() -> int:
    import sys
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
