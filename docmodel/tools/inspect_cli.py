"""
Inspection CLI for docmodel collections.

Read-only tool for looking at what a collection holds:
- types: count documents per type discriminator
- dump: print the documents of one type as JSON

Usage:
    docmodel-inspect types
    docmodel-inspect dump --type Task
    DOCMODEL_BACKEND=sqlite DOCMODEL_DATA_DIR=/var/lib/docmodel docmodel-inspect types --format json

The store backend and default collection come from DOCMODEL_* environment
variables (see docmodel.config.Settings); --database and --collection
override the binding.

Invariants:
    - Never writes to the store
    - JSON output is deterministic (sorted keys)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from contextlib import aclosing
from typing import Optional, Sequence

from ..collection import collection_link
from ..config import Settings, setup_logging
from ..documents import TYPE_FIELD
from ..filters import F
from ..store.base import Document, DocumentClient, create_document_client
from ..store.sqlite import SqliteDocumentClient

logger = logging.getLogger(__name__)


class InspectCLI:
    """Inspection commands over one document client.

    Example:
        >>> cli = InspectCLI(client)
        >>> counts = await cli.types("dbs/app/colls/documents")
        >>> tasks = await cli.dump("dbs/app/colls/documents", "Task")
    """

    def __init__(self, client: DocumentClient) -> None:
        self._client = client

    async def types(self, link: str) -> dict[str, int]:
        """Count documents per type discriminator.

        Args:
            link: Collection link

        Returns:
            Mapping of type discriminator to count, sorted by type
        """
        if isinstance(self._client, SqliteDocumentClient):
            return await self._client.list_document_types(link)

        counts: dict[str, int] = {}
        async for document in self._client.query_documents(link):
            document_type = str(document.get(TYPE_FIELD))
            counts[document_type] = counts.get(document_type, 0) + 1
        return dict(sorted(counts.items()))

    async def dump(self, link: str, document_type: str, limit: Optional[int] = None) -> list[Document]:
        """Collect the documents of one type.

        Args:
            link: Collection link
            document_type: Type discriminator to select
            limit: Maximum number of documents to return

        Returns:
            Matching documents, in store order
        """
        documents: list[Document] = []
        async with aclosing(self._client.query_documents(link, F(TYPE_FIELD) == document_type)) as stored:
            async for document in stored:
                if limit is not None and len(documents) >= limit:
                    break
                documents.append(document)
        return documents


def _format_types(counts: dict[str, int], output_format: str) -> str:
    if output_format == "json":
        return json.dumps(counts, indent=2, sort_keys=True)
    if not counts:
        return "No documents found"
    width = max(len(name) for name in counts)
    return "\n".join(f"{name.ljust(width)}  {count}" for name, count in counts.items())


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="docmodel collection inspection tool")
    parser.add_argument("--database", help="Database id (default: DOCMODEL_DATABASE_ID)")
    parser.add_argument("--collection", help="Collection id (default: DOCMODEL_COLLECTION_ID)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # types command
    types_parser = subparsers.add_parser("types", help="Count documents per type")
    types_parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format"
    )

    # dump command
    dump_parser = subparsers.add_parser("dump", help="Print documents of one type as JSON")
    dump_parser.add_argument("--type", "-t", required=True, dest="document_type", help="Type discriminator")
    dump_parser.add_argument("--limit", type=int, help="Maximum number of documents")

    return parser


async def _run(args: argparse.Namespace, settings: Settings) -> str:
    client = create_document_client(settings)
    cli = InspectCLI(client)
    link = collection_link(
        args.database or settings.database_id,
        args.collection or settings.collection_id,
    )

    if args.command == "types":
        return _format_types(await cli.types(link), args.format)

    documents = await cli.dump(link, args.document_type, args.limit)
    return json.dumps(documents, indent=2, sort_keys=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for the inspection tool.

    Returns:
        Process exit code
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    setup_logging(settings.log_level, settings.log_format)

    try:
        output = asyncio.run(_run(args, settings))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
