"""Command-line entry point: index documents and query them."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pageindex.config import PAGEINDEX_MAX_RESULTS
from pageindex.exceptions import PageIndexError
from pageindex.index import PageIndex
from pageindex.schemas import DocumentNode, LLMProvider, PageIndexConfig, SearchQuery


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pageindex",
        description="Build document trees and search them with LLM reasoning.",
    )
    parser.add_argument("files", nargs="*", help="Documents to index (.pdf, .md, .html, .txt)")
    parser.add_argument("-q", "--query", help="Query to run; prints the tree outline when omitted")
    parser.add_argument("--provider", default="anthropic", help="LLM provider name")
    parser.add_argument("--model", default="claude-sonnet-4-5", help="LLM model name")
    parser.add_argument("--base-url", help="Override the provider endpoint")
    parser.add_argument("--max-results", type=int, default=PAGEINDEX_MAX_RESULTS)
    parser.add_argument("--collection", help="Only search sources containing this text")
    parser.add_argument("--load", help="Load a saved index before adding files")
    parser.add_argument("--save", help="Save the index to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if not args.files and not args.load:
        parser.error("Provide at least one file or --load")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = PageIndexConfig(
        llm_provider=LLMProvider(name=args.provider, model=args.model, base_url=args.base_url),
        debug=args.verbose,
    )
    try:
        return asyncio.run(_run(PageIndex(config), args))
    except PageIndexError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


async def _run(index: PageIndex, args: argparse.Namespace) -> int:
    if args.load:
        await index.load(args.load)
    await index.add_documents(args.files)

    if args.query:
        query = SearchQuery(
            query=args.query, max_results=args.max_results, collection=args.collection
        )
        results = await index.search(query)
        if not results:
            print("No results.")
        for rank, result in enumerate(results, start=1):
            citation = result.citation
            where = citation.section or citation.node_id
            if citation.page_number:
                where = f"{where}, page {citation.page_number}"
            print(f"{rank}. [{result.relevance:.2f} {result.source}] {citation.document_title} ({where})")
            print(f"   {result.excerpt}")
    else:
        for document in index.get_all_documents():
            print(f"{document.title} [{document.id}, {document.type}]")
            _print_outline(document.tree, 1)

    if args.save:
        await index.save(args.save)
    return 0


def _print_outline(node: DocumentNode, depth: int) -> None:
    for child in node.children:
        label = child.title or child.content[:60].replace("\n", " ")
        print(f"{'  ' * depth}- {child.kind}: {label}")
        _print_outline(child, depth + 1)


if __name__ == "__main__":
    sys.exit(main())
