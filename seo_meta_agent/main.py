from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from .analyzer import analyze
from .config import FetchPolicy, cors_allow_origins, log_level
from .errors import AnalysisError
from .models import AnalyzeRequest, AnalyzeResponse


# Settings are read from the environment below, so load the repo root .env first.
_HERE = Path(__file__).resolve()
_AGENT_ROOT = _HERE.parents[1]
load_dotenv(_AGENT_ROOT / ".env", override=False)

logging.basicConfig(level=log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="SEO Meta Analyzer", version="0.1.0")
app.state.fetch_policy = FetchPolicy.from_env()

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AnalysisError)
async def _analysis_error_handler(request: Request, exc: AnalysisError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "Analysis failed", "message": exc.public_message},
    )


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": jsonable_encoder(details)},
    )


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.get("/api/health")
def health():
    return {"status": "ok", "service": "seo-analyzer"}


@app.post("/api/analyze", response_model=AnalyzeResponse, response_model_exclude_none=True)
def analyze_endpoint(req: AnalyzeRequest, request: Request):
    return analyze(req, request.app.state.fetch_policy)
