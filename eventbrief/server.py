"""
HTTP Microservice
=================
Flask-based HTTP API for the Event Brief parser.

Endpoints:
    GET    /                  → Plain-text health check ("OK")
    GET    /api/health        → Health check (JSON)
    GET    /api/info          → Parser version info
    POST   /api/extract-all   → PDF bytes (or base64 JSON wrapper) → parsed brief
    POST   /api/parse-text    → Already-extracted text → parsed brief

Query knobs for /api/extract-all:
    maxPages=N   pages to read (1-10, default 1)
    raw=1        include the canonical text
    pages=1      include per-page text
    debug=1      include a debug block
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import time
import uuid
from typing import Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from . import __version__
from .engine import BriefParserEngine, ParserConfig
from .models import ExtractionResult
from .text_extractor import DEFAULT_MAX_PAGES, PdfExtractionError, clamp_pages

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

MIN_BODY_BYTES = 10
DATA_URL_PREFIX = re.compile(r"^data:.*?;base64,")


def create_app(config: dict = None) -> Flask:
    """Create and configure the Flask app."""
    if config:
        app.config.update(config)

    app.config.setdefault("MAX_CONTENT_LENGTH", 25 * 1024 * 1024)  # 25MB
    app.config.setdefault("DEFAULT_MAX_PAGES", DEFAULT_MAX_PAGES)
    app.config.setdefault("LOG_LEVEL", "INFO")
    app.config["DEFAULT_MAX_PAGES"] = clamp_pages(app.config["DEFAULT_MAX_PAGES"])

    return app


# ─── Helpers ──────────────────────────────────────────────────────────────────


def _flag(name: str) -> bool:
    return request.args.get(name, "").lower() in ("1", "true")


def _request_id() -> str:
    return str(uuid.uuid4())


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def decode_base64_pdf(payload: Optional[str]) -> Optional[bytes]:
    """Decode a base64 body, dropping any data-URL prefix."""
    if not payload:
        return None
    clean = DATA_URL_PREFIX.sub("", str(payload))
    try:
        return base64.b64decode(clean)
    except (binascii.Error, ValueError):
        return None


def _read_pdf_bytes(content_type: str) -> Optional[bytes]:
    """
    Raw bytes body, or a JSON wrapper {"$content": "<base64>"} as sent by
    workflow tools.
    """
    if "application/json" in content_type:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return None
        payload = data.get("$content") or data.get("content")
        if not isinstance(payload, str):
            return None
        logger.debug(f"JSON wrapper detected (has content: {bool(payload)})")
        return decode_base64_pdf(payload)

    return request.get_data(cache=False)


def _engine(max_pages: int = DEFAULT_MAX_PAGES) -> BriefParserEngine:
    return BriefParserEngine(ParserConfig(
        max_pages=max_pages,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
    ))


def _error(request_id: str, error: str, status: int, message: str = None):
    body = {"ok": False, "error": error, "meta": {"requestId": request_id}}
    if message:
        body["message"] = message
    return jsonify(body), status


def _result_body(
    result: ExtractionResult,
    request_id: str,
    content_type: Optional[str],
) -> dict:
    timings = result.timings
    return {
        "ok": True,
        "parsed": result.parsed.model_dump(mode="json"),
        "meta": {
            "requestId": request_id,
            "contentType": content_type or None,
            "totalPages": result.total_pages,
            "extractedPages": result.extracted_pages,
            "timingsMs": {
                "readMs": timings.read_ms,
                "extractMs": timings.extract_ms,
                "parseMs": timings.parse_ms,
                "totalMs": timings.total_ms,
            },
        },
    }


# ─── Health Check ─────────────────────────────────────────────────────────────


@app.route("/", methods=["GET"])
def root():
    return Response("OK", mimetype="text/plain")


@app.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "event-brief-parser",
        "version": __version__,
    })


@app.route("/api/info", methods=["GET"])
def info():
    """Parser version and capability info."""
    return jsonify({
        "version": __version__,
        "engine": "PyMuPDF",
        "maxPages": {"default": app.config.get("DEFAULT_MAX_PAGES", DEFAULT_MAX_PAGES), "limit": 10},
        "capabilities": [
            "header_extraction",
            "site_extraction",
            "contact_extraction",
            "flight_extraction",
            "confidence_scoring",
        ],
        "supported_formats": ["pdf", "text"],
    })


# ─── Extract Endpoint ─────────────────────────────────────────────────────────


@app.route("/api/extract-all", methods=["POST"])
def extract_all():
    """
    Extract and parse an Event Brief PDF.

    Accepts either:
        - Raw PDF bytes as the request body (preferred)
        - A JSON body {"$content": "<base64>"} or {"content": "<base64>"}
    """
    request_id = _request_id()
    t0 = time.perf_counter()
    content_type = (request.content_type or "").lower()
    max_pages = clamp_pages(
        request.args.get("maxPages"),
        default=app.config.get("DEFAULT_MAX_PAGES", DEFAULT_MAX_PAGES),
    )
    debug = _flag("debug")

    logger.info(
        f"[{request_id}] extract-all ct={content_type!r} maxPages={max_pages} "
        f"raw={_flag('raw')} pages={_flag('pages')}"
    )

    try:
        pdf_bytes = _read_pdf_bytes(content_type)
        read_ms = _elapsed_ms(t0)

        if not pdf_bytes or len(pdf_bytes) < MIN_BODY_BYTES:
            return _error(request_id, "empty_body", 400)

        result = _engine(max_pages).parse_pdf(pdf_bytes, read_ms=read_ms)
        result.timings.total_ms = _elapsed_ms(t0)

    except PdfExtractionError as e:
        logger.error(f"[{request_id}] extract_failed: {e.code}")
        return _error(request_id, "extract_failed", 500, str(e))
    except Exception as e:
        logger.error(f"[{request_id}] extract_failed: {e}", exc_info=True)
        return _error(request_id, "extract_failed", 500, str(e))

    body = _result_body(result, request_id, content_type)
    if _flag("pages"):
        body["pages"] = [p.model_dump() for p in result.pages]
    if _flag("raw"):
        body["rawText"] = result.canonical_text
    if debug:
        body["debug"] = {
            "url": request.url,
            "notes": "Enable raw/pages with ?raw=1&pages=1.",
            "engine": "PyMuPDF",
        }

    logger.info(
        f"[{request_id}] success booking={result.parsed.booking_number} "
        f"totalMs={result.timings.total_ms}"
    )
    return jsonify(body)


@app.route("/api/parse-text", methods=["POST"])
def parse_text():
    """
    Parse already-extracted text.

    Accepts a plain-text body or JSON {"text": "..."}.
    """
    request_id = _request_id()

    if request.is_json:
        data = request.get_json(silent=True)
        text = data.get("text") if isinstance(data, dict) else None
    else:
        text = request.get_data(as_text=True)

    if not isinstance(text, str) or not text.strip():
        return _error(request_id, "empty_body", 400)

    result = _engine().parse_text(text)
    body = _result_body(result, request_id, request.content_type)
    if _flag("raw"):
        body["rawText"] = result.canonical_text
    return jsonify(body)


# ─── Run Server ──────────────────────────────────────────────────────────────


def run_server(
    host: str = "0.0.0.0",
    port: int = 5000,
    debug: bool = False,
):
    """Start the microservice server."""
    create_app()
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run_server(debug=True)
