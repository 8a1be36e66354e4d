# main.py

import asyncio
import sys
from pathlib import Path
from typing import List

from quote_finder.bootstrap import QuoteFinderServices, build_services
from quote_finder.domain.errors import CacheMiss, QuoteFinderError
from quote_finder.domain.models import IngestResult, Quote
from quote_finder.infrastructure.document_fetcher import DocumentFetcher
from quote_finder.interface.cli import (
    display_welcome_banner,
    display_document_status,
    prompt_for_topic,
    display_quotes,
    display_no_quotes,
    display_error,
    ask_continue,
)


TEXT_EXTENSIONS = {".txt", ".md", ".html", ".htm"}


def main() -> None:
    display_welcome_banner()

    if len(sys.argv) != 2:
        display_error("Usage: python main.py <document.(txt|md|html|pdf)>")
        sys.exit(1)

    path = Path(sys.argv[1])
    services = build_services()

    # ── 1. Load the document ─────────────────────────────────────────────────
    try:
        document = _load_document(services, path)
    except (QuoteFinderError, ValueError) as error:
        display_error(str(error))
        sys.exit(1)

    display_document_status(
        path.name,
        document.total_length,
        max(1, len(document.segments)),
        document.is_ocr,
    )

    # ── 2. Interactive topic loop ────────────────────────────────────────────
    try:
        while True:
            topic = prompt_for_topic()
            document = _search_with_reload(services, path, document, topic)

            if not ask_continue():
                break
    finally:
        services.close()


def _load_document(services: QuoteFinderServices, path: Path) -> IngestResult:
    """Read a local file and route it through the same ingestion as the API."""
    suffix = path.suffix.lower()

    if suffix == ".pdf":
        data = DocumentFetcher.read_local(path)
        result = asyncio.run(
            services.documents.extract_pdf(url=path.resolve().as_uri(), data=data, title=path.stem)
        )
        return result.ingest

    if suffix in TEXT_EXTENSIONS:
        text = DocumentFetcher.read_local(path).decode("utf-8", errors="ignore")
        return services.documents.ingest_text(text, url=path.resolve().as_uri(), title=path.stem)

    raise ValueError(f"Unsupported file type '{suffix}'.")


def _search_with_reload(
    services: QuoteFinderServices,
    path: Path,
    document: IngestResult,
    topic: str,
) -> IngestResult:
    """Search once; if the cached text expired, load the file again and retry once."""
    try:
        _search_document(services, document, topic)
        return document
    except CacheMiss:
        pass
    except (QuoteFinderError, ValueError) as error:
        display_error(str(error))
        return document

    # Idle past the cache TTL
    try:
        document = _load_document(services, path)
        _search_document(services, document, topic)
    except (QuoteFinderError, ValueError) as error:
        display_error(str(error))
    return document


def _search_document(services: QuoteFinderServices, document: IngestResult, topic: str) -> None:
    """Rank every segment in order; small documents are a single pass."""
    if not document.requires_segmentation:
        _rank_and_display(services, topic, document.content or "", document.is_ocr)
        return

    for segment in document.segments:
        _, content, is_ocr = services.documents.fetch_segment(document.key, segment.index)
        label = f"segment {segment.index + 1}/{len(document.segments)}"
        _rank_and_display(services, topic, content, is_ocr, label)


def _rank_and_display(
    services: QuoteFinderServices,
    topic: str,
    text: str,
    is_ocr: bool,
    label: str = "",
) -> List[Quote]:
    result = services.ranking.rank(topic, text, is_ocr=is_ocr)
    if result.is_empty:
        display_no_quotes(topic, result.message or "No relevant quotes found")
    else:
        display_quotes(topic, result.quotes, label)
    return result.quotes


if __name__ == "__main__":
    main()
