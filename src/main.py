"""
Tip Triage Service - HTTP wrapper around the credibility engine
Scores incoming missing-person tips and routes them to a review queue
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Dict, Any
from collections import Counter
from contextlib import asynccontextmanager
from pathlib import Path
import logging
import time
import os

from dotenv import load_dotenv
from tiptriage.config import get_settings
from tiptriage.models import TipValidationError, VerificationResult, VerifyTipRequest
from tiptriage.trust_engine import TriageEngine, validate_tip_input
from data_loader import load_datasets


# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('logs/tiptriage.log') if os.path.exists('logs') else logging.NullHandler()
    ]
)

logger = logging.getLogger(__name__)
DATASETS: Dict[str, Any] = {"scam_patterns": [], "verification_rules": []}

# Load environment variables early so Settings picks them up
load_dotenv()

settings = get_settings()
DATA_DIR = settings.data_dir or str(Path(__file__).resolve().parent.parent / "data")
CORS_ORIGINS = settings.cors_origins.split(",")


# Metrics tracker
class Metrics:
    """Track service metrics"""

    def __init__(self):
        self.total_requests = 0
        self.successful_requests = 0
        self.rejected_requests = 0
        self.failed_requests = 0
        self.total_processing_time = 0.0
        self.buckets: Counter = Counter()
        self.statuses: Counter = Counter()
        self.start_time = time.time()

    def record_result(self, result: VerificationResult, processing_time: float):
        """Record a scored tip"""
        self.total_requests += 1
        self.successful_requests += 1
        self.total_processing_time += processing_time
        self.buckets[result.priority_bucket] += 1
        self.statuses[result.verification_status] += 1

    def record_rejection(self):
        """Record a request refused before scoring"""
        self.total_requests += 1
        self.rejected_requests += 1

    def record_failure(self):
        self.total_requests += 1
        self.failed_requests += 1

    def get_stats(self) -> Dict[str, Any]:
        """Get current metrics"""
        uptime = time.time() - self.start_time
        avg_ms = (
            self.total_processing_time / self.successful_requests * 1000
            if self.successful_requests > 0 else 0
        )

        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "rejected_requests": self.rejected_requests,
            "failed_requests": self.failed_requests,
            "average_processing_time": f"{avg_ms:.1f}ms",
            "priority_buckets": dict(self.buckets),
            "verification_statuses": dict(self.statuses),
            "uptime_seconds": int(uptime)
        }


metrics = Metrics()
engine = TriageEngine(settings=settings)


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.service_title} v{settings.service_version}")
    logger.info("=" * 60)

    logger.info("Configuration loaded:")
    logger.info(f"  Data dir: {DATA_DIR}")
    logger.info(
        f"  Thresholds: auto-verify {settings.auto_verify_threshold}, "
        f"spam {settings.spam_threshold}, review {settings.review_threshold}"
    )

    global DATASETS
    DATASETS = load_datasets(DATA_DIR)
    app.state.datasets = DATASETS

    logger.info("Service ready")

    yield

    logger.info("Shutdown complete")


# FastAPI application
app = FastAPI(
    title=settings.service_title,
    version=settings.service_version,
    description="Credibility scoring and triage for missing-person tips",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc) if os.getenv("DEBUG") else "An error occurred"
        }
    )


# API endpoints
@app.get("/")
async def root():
    """Root endpoint with service information"""
    return {
        "service": settings.service_title,
        "version": settings.service_version,
        "status": "operational",
        "endpoints": {
            "verify": "POST /verify",
            "health": "GET /health",
            "metrics": "GET /metrics"
        }
    }


@app.get("/health")
async def health_check():
    """Health check with catalog status"""
    patterns = DATASETS.get("scam_patterns", [])
    return {
        "status": "healthy",
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "components": {
            "api": "healthy",
            "engine": "loaded",
            "scam_patterns": sum(1 for pattern in patterns if pattern.is_active),
            "verification_rules": len(DATASETS.get("verification_rules", []))
        },
        "metrics": metrics.get_stats()
    }


@app.get("/metrics")
async def get_metrics():
    """Get service metrics"""
    return {
        "service": settings.service_title,
        "version": settings.service_version,
        "metrics": metrics.get_stats()
    }


@app.post("/verify", response_model=VerificationResult)
async def verify(request_body: VerifyTipRequest):
    """
    Score a tip against its case context
    Uses the loaded scam catalog and rules when the request does not carry its own
    """
    try:
        validate_tip_input(request_body.tip, request_body.case_context)
    except TipValidationError as e:
        metrics.record_rejection()
        logger.warning(f"[{request_body.tip.tip_id}] Rejected tip: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    scam_patterns = request_body.scam_patterns
    if scam_patterns is None:
        scam_patterns = DATASETS.get("scam_patterns", [])
    verification_rules = request_body.verification_rules
    if verification_rules is None:
        verification_rules = DATASETS.get("verification_rules", [])

    start = time.perf_counter()
    try:
        result = engine.verify_tip(
            request_body.tip,
            request_body.case_context,
            request_body.tipster_profile,
            request_body.existing_leads,
            request_body.recent_tips,
            scam_patterns,
            verification_rules,
        )
    except Exception:
        metrics.record_failure()
        raise
    metrics.record_result(result, time.perf_counter() - start)
    return result


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
        log_level="info"
    )
