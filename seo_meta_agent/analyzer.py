from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

import httpx

from .config import FetchPolicy
from .errors import AnalysisError
from .fetcher import fetch_document
from .meta_extractor import extract_meta_tags
from .models import AnalyzeRequest, AnalyzeResponse
from .scoring import score_meta_tags
from .url_guard import sanitize

logger = logging.getLogger(__name__)


def analyze(
    req: AnalyzeRequest,
    policy: FetchPolicy | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> AnalyzeResponse:
    """Validate, fetch, extract and score one page.

    Any ``AnalysisError`` propagates unchanged; no partial report is built.
    """
    policy = policy or FetchPolicy()
    t0 = time.perf_counter()
    logger.info("Analyzing URL: %s", req.url)

    try:
        target = sanitize(req.url, policy)
        doc = fetch_document(target, policy, transport=transport)
    except AnalysisError as exc:
        logger.warning("analysis of %s rejected: %s: %s", req.url, exc.__class__.__name__, exc)
        raise

    meta = extract_meta_tags(doc.text)
    report = score_meta_tags(meta)

    elapsed_ms = int((time.perf_counter() - t0) * 1000)
    logger.info("Analysis completed for %s with score: %d (%d ms)", req.url, report.score, elapsed_ms)

    return AnalyzeResponse(
        url=req.url,
        **meta.as_dict(),
        score=report.score,
        issues=report.issues,
        tags=report.tags,
        analyzed_at=datetime.now(timezone.utc).isoformat(),
    )
