import asyncio
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from quote_finder.application.quote_service import NO_RELEVANT_QUOTES
from quote_finder.bootstrap import QuoteFinderServices, build_services
from quote_finder.domain.errors import (
    CacheMiss,
    DocumentFetchError,
    DocumentTooLargeForOCR,
    OCRGroupFailure,
    OCRUnavailable,
    RefinementUnavailable,
)
from quote_finder.domain.models import IngestResult
from quote_finder.infrastructure.document_fetcher import DocumentFetcher
from quote_finder.settings import Settings


# ── API Models ───────────────────────────────────────────────────────────────
class FindQuotesRequest(BaseModel):
    topic: str
    pageContent: str
    pageUrl: Optional[str] = None
    pageTitle: Optional[str] = None
    isOCR: bool = False

class QuoteSchema(BaseModel):
    quote: str
    relevance: str

class FindQuotesResponse(BaseModel):
    quotes: List[QuoteSchema]
    pageTitle: Optional[str] = None
    pageUrl: Optional[str] = None
    message: Optional[str] = None

class IngestRequest(BaseModel):
    content: str
    url: Optional[str] = None
    title: Optional[str] = None
    isOCR: bool = False

class ExtractPdfRequest(BaseModel):
    url: Optional[str] = None
    data: Optional[str] = Field(default=None, description="Base64-encoded PDF")
    title: Optional[str] = None

class SegmentRequest(BaseModel):
    pdfUrl: str
    segmentIndex: int = Field(ge=0)


def _ingest_payload(result: IngestResult) -> dict:
    if result.requires_segmentation:
        return {
            "requiresSegmentation": True,
            "key": result.key,
            "totalLength": result.total_length,
            "segmentCount": len(result.segments),
            "segments": [segment.to_dict() for segment in result.segments],
            "isOCR": result.is_ocr,
        }
    return {
        "requiresSegmentation": False,
        "key": result.key,
        "content": result.content,
        "totalLength": result.total_length,
        "isOCR": result.is_ocr,
    }


# ── App Initialization ───────────────────────────────────────────────────────
def create_app(
    settings: Optional[Settings] = None,
    services: Optional[QuoteFinderServices] = None,
) -> FastAPI:
    settings = settings or (services.settings if services else Settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.services = services or build_services(settings)
        print(f"[API] {settings.APP_NAME} ready ({settings.ENV}).")
        yield
        app.state.services.close()
        print("[API] Content cache cleared on shutdown.")

    app = FastAPI(
        title="Quote Finder API",
        description="Topic-relevant quote extraction from web pages and PDFs.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _services(request: Request) -> QuoteFinderServices:
        return request.app.state.services

    # ── Endpoints ────────────────────────────────────────────────────────────
    @app.get("/health")
    def health():
        return {"status": "ok", "env": settings.ENV}

    @app.get("/status")
    def get_status(request: Request):
        """Cache occupancy and the limits the pipeline runs with."""
        services = _services(request)
        return {
            "cached_documents": len(services.cache),
            "max_cache_size": services.cache.max_size,
            "cache_ttl_seconds": services.cache.ttl_seconds,
            "segment_size": services.segments.segment_size,
            "ocr_available": services.ocr.is_available,
            "refinement_model": getattr(services.refiner, "model", None),
        }

    @app.post("/api/find-quotes", response_model=FindQuotesResponse, response_model_exclude_none=True)
    async def find_quotes(payload: FindQuotesRequest, request: Request):
        services = _services(request)
        if not payload.topic.strip() or not payload.pageContent.strip():
            raise HTTPException(status_code=400, detail="Topic and page content are required")

        await asyncio.to_thread(
            services.request_log.record, payload.topic, payload.pageTitle, payload.pageUrl
        )

        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(
                    services.ranking.rank, payload.topic, payload.pageContent, payload.isOCR
                ),
                timeout=settings.REQUEST_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            raise HTTPException(status_code=504, detail="Quote analysis timed out")
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error))
        except RefinementUnavailable as error:
            print(f"[API] Refinement failed: {error}")
            raise HTTPException(status_code=502, detail="Quote refinement service unavailable")

        if result.is_empty:
            return FindQuotesResponse(quotes=[], message=result.message or NO_RELEVANT_QUOTES)

        return FindQuotesResponse(
            quotes=[QuoteSchema(**quote.to_dict()) for quote in result.quotes],
            pageTitle=payload.pageTitle or "Current Page",
            pageUrl=payload.pageUrl or "Unknown URL",
        )

    @app.post("/api/ingest-document")
    def ingest_document(payload: IngestRequest, request: Request):
        """Cache oversized page text and return its segment layout (or the text itself)."""
        try:
            result = _services(request).documents.ingest_text(
                payload.content, url=payload.url, title=payload.title, is_ocr=payload.isOCR
            )
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error))
        return {**_ingest_payload(result), "url": payload.url, "title": payload.title}

    @app.post("/api/extract-pdf")
    async def extract_pdf(payload: ExtractPdfRequest, request: Request):
        services = _services(request)
        if not payload.url and not payload.data:
            raise HTTPException(status_code=400, detail="URL is required")

        try:
            data = DocumentFetcher.decode_inline(payload.data) if payload.data else None
            result = await asyncio.wait_for(
                services.documents.extract_pdf(url=payload.url, data=data, title=payload.title),
                timeout=settings.REQUEST_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            raise HTTPException(status_code=504, detail="PDF extraction timed out")
        except DocumentTooLargeForOCR as error:
            return {
                "error": "scanned_pdf_too_large",
                "message": str(error),
                "pageCount": error.page_count,
                "maxPages": error.limit,
                "extractedText": error.extracted_text,
            }
        except OCRUnavailable as error:
            return JSONResponse(status_code=503, content={"error": "ocr_unavailable", "message": str(error)})
        except OCRGroupFailure as error:
            print(f"[API] OCR failed: {error}")
            return JSONResponse(status_code=502, content={"error": "ocr_failed", "message": str(error)})
        except (DocumentFetchError, ValueError) as error:
            raise HTTPException(status_code=400, detail=str(error))

        return {
            **_ingest_payload(result.ingest),
            "url": payload.url,
            "title": result.title,
            "pageCount": result.page_count,
        }

    @app.post("/api/get-pdf-segment")
    def get_pdf_segment(payload: SegmentRequest, request: Request):
        try:
            segment, content, is_ocr = _services(request).documents.fetch_segment(
                payload.pdfUrl, payload.segmentIndex
            )
        except CacheMiss as error:
            raise HTTPException(status_code=404, detail=str(error))

        return {
            "content": content,
            "segmentIndex": segment.index,
            "start": segment.start,
            "end": segment.end,
            "isOCR": is_ocr,
        }

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, error: Exception):
        print(f"[API] Unhandled error on {request.url.path}: {error}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
