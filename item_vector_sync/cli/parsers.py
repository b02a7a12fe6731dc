from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Item vector sync (OpenAI + Qdrant)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # Create the configured collection if it does not exist yet
    sub.add_parser("ensure-collection")

    # Re-embed and upsert every item in the relational store
    sub.add_parser("sync-all")

    add_item_subparser(sub, "sync-item")
    add_item_subparser(sub, "update-item")
    add_item_subparser(sub, "delete-item")

    # Ask a question answered from the nearest items
    ch = sub.add_parser("chat")
    ch.add_argument("--q", required=True, help="Question to ask")
    ch.add_argument("--history", default=None, help="JSON file with a list of {role, content} messages")

    return ap


def add_item_subparser(sub, name):
    """
    Adds a subcommand that acts on a single item by its relational id.

    Args:
        sub: The subparsers object from argparse.
        name: The name of the subcommand to add.

    Returns:
        argparse.ArgumentParser: The configured subparser.
    """
    result = sub.add_parser(name)
    result.add_argument("--id", type=int, required=True, dest="item_id", help="Item id in the relational store")
    return result
