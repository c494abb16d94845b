# =============================================================================
# ragkb/cli/main.py - Operator CLI
# =============================================================================
#
# Subcommands:
#
#   submit    - Ingest inline content (--content / --file) or queue a URL
#   enqueue   - Queue a URL for the worker pool
#   worker    - Run the worker pool until Ctrl-C / SIGTERM
#   query     - Hybrid vector + keyword query
#   graph     - Print the knowledge graph, optionally name-filtered
#   queue     - List non-deleted queue items, newest first
#   delete    - Delete a queued URL and its document by queue id
#   reindex   - Drop a document and put its queue item back to pending
#   document  - Read a document, its chunks, vectors or graph
#   stats     - Row counts and queue status totals
#
# Usage examples:
#   python -m ragkb.cli submit --url https://x/a --file page.txt
#   python -m ragkb.cli enqueue --url https://example.com/article
#   python -m ragkb.cli worker --workers 8
#   python -m ragkb.cli query "acme corp paris"
#   python -m ragkb.cli document 3 --chunks
# =============================================================================

"""Standalone CLI over the ragkb knowledge service."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import signal
import sys
from pathlib import Path
from typing import Any

from ragkb.config.loader import load_config, settings_from_config
from ragkb.config.settings import Settings
from ragkb.utils.errors import RagKBError
from ragkb.utils.logging import configure_logging


async def _build_application(app_settings: Settings):  # noqa: ANN202
    """Construct the full service graph.

    Deferred import keeps ``--help`` from loading numpy, httpx and
    trafilatura.
    """
    from ragkb.main import build_application

    return await build_application(app_settings)


def _emit(payload: Any) -> None:
    """Print pydantic models (or lists/dicts of them) as JSON on stdout."""
    print(json.dumps(_jsonable(payload), indent=2, ensure_ascii=False))


def _jsonable(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_submit(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    content = args.content
    if args.file:
        content = Path(args.file).read_text(encoding="utf-8", errors="ignore")
    outcome = await app.knowledge.submit_document(args.url, title=args.title, content=content)
    _emit(outcome)
    return 0


async def _handle_enqueue(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    _emit(await app.knowledge.enqueue_url(args.url))
    return 0


async def _handle_worker(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    """Run the pool until interrupted; in-flight items finish first."""
    if args.workers is not None:
        from ragkb.services.queue.worker_pool import WorkerPool

        pool = WorkerPool(
            store=app.store,
            ingestion_service=app.ingestion,
            worker_count=args.workers,
            poll_interval=app.settings.poll_interval_seconds,
        )
    else:
        pool = app.worker_pool

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Signal handlers are unavailable on Windows event loops.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, cancel_event.set)

    print("Worker pool running; press Ctrl-C to stop.", file=sys.stderr)
    await pool.run_until_cancelled(cancel_event)
    print(
        f"Stopped: {pool.completed_count} completed, {pool.failed_count} failed.",
        file=sys.stderr,
    )
    return 0


async def _handle_query(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    _emit(await app.knowledge.query(args.text, limit=args.limit))
    return 0


async def _handle_graph(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    _emit(await app.knowledge.get_graph(args.filter))
    return 0


async def _handle_queue(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    _emit(await app.knowledge.list_queue())
    return 0


async def _handle_delete(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    _emit({"queue_id": args.id, "deleted": await app.knowledge.delete_by_id(args.id)})
    return 0


async def _handle_reindex(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    _emit({"queue_id": args.id, "deleted": await app.knowledge.reindex_by_id(args.id)})
    return 0


async def _handle_document(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    knowledge = app.knowledge
    if args.chunks:
        _emit(await knowledge.get_chunks(args.id))
    elif args.vectors:
        _emit(await knowledge.get_vectors(args.id))
    elif args.graph:
        _emit(await knowledge.get_graph_for_document(args.id))
    else:
        _emit(await knowledge.get_document(args.id))
    return 0


async def _handle_stats(args: argparse.Namespace, app) -> int:  # noqa: ANN001
    _emit(await app.knowledge.get_stats())
    return 0


_HANDLERS = {
    "submit": _handle_submit,
    "enqueue": _handle_enqueue,
    "worker": _handle_worker,
    "query": _handle_query,
    "graph": _handle_graph,
    "queue": _handle_queue,
    "delete": _handle_delete,
    "reindex": _handle_reindex,
    "document": _handle_document,
    "stats": _handle_stats,
}


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ragkb CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m ragkb.cli",
        description="Manage the ragkb knowledge base.",
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="YAML config file (default: config/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # -- submit --
    submit_parser = subparsers.add_parser("submit", help="Submit a document")
    submit_parser.add_argument("--url", required=True, help="Document URL")
    submit_parser.add_argument("--title", default=None, help="Title (defaults to the URL)")
    body = submit_parser.add_mutually_exclusive_group()
    body.add_argument("--content", default=None, help="Inline document text")
    body.add_argument("--file", default=None, help="Read document text from a file")

    # -- enqueue --
    enqueue_parser = subparsers.add_parser("enqueue", help="Queue a URL for ingestion")
    enqueue_parser.add_argument("--url", required=True, help="URL to fetch")

    # -- worker --
    worker_parser = subparsers.add_parser("worker", help="Run the queue worker pool")
    worker_parser.add_argument(
        "--workers", type=int, default=None, help="Worker count (default from config)"
    )

    # -- query --
    query_parser = subparsers.add_parser("query", help="Hybrid query over chunks")
    query_parser.add_argument("text", help="Query text")
    query_parser.add_argument("--limit", type=int, default=None, help="Maximum results")

    # -- graph --
    graph_parser = subparsers.add_parser("graph", help="Show the knowledge graph")
    graph_parser.add_argument(
        "--filter", default="", help="Case-insensitive node name substring"
    )

    # -- queue --
    subparsers.add_parser("queue", help="List queue items")

    # -- delete / reindex --
    delete_parser = subparsers.add_parser("delete", help="Delete by queue id")
    delete_parser.add_argument("id", type=int, help="Queue item id")
    reindex_parser = subparsers.add_parser("reindex", help="Re-queue by queue id")
    reindex_parser.add_argument("id", type=int, help="Queue item id")

    # -- document --
    doc_parser = subparsers.add_parser("document", help="Read a document")
    doc_parser.add_argument("id", type=int, help="Document id")
    part = doc_parser.add_mutually_exclusive_group()
    part.add_argument("--chunks", action="store_true", help="Show chunks")
    part.add_argument("--vectors", action="store_true", help="Show chunk vectors")
    part.add_argument("--graph", action="store_true", help="Show the document's graph")

    # -- stats --
    subparsers.add_parser("stats", help="Show store statistics")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    app = await _build_application(app_settings)
    try:
        return await _HANDLERS[args.command](args, app)
    except RagKBError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        await app.close()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse, load settings, configure logging, dispatch."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = settings_from_config(load_config(args.config))
    configure_logging(log_level=app_settings.log_level, json_output=app_settings.log_json)

    exit_code = asyncio.run(_run(args, app_settings))
    sys.exit(exit_code)
