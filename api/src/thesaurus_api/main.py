#!/usr/bin/env python3

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from .core.auth import verify_admin_token
from .core.config import vocabulary_config
from .core.dependencies import get_s3_client
from .core.env_utils import getenv_list
from .core.logging import setup_logging
from .models.models import (
    LegacyKeywordRequest,
    MigratedKeyword,
    SubjectClassifyRequest,
    SubjectClassifyResponse,
    ThesaurusComparison,
    ThesaurusPayload,
    ThesaurusRebuildResponse,
    ThesaurusStatus,
)

logger = logging.getLogger(__name__)

# Application start time for uptime calculation
_app_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    setup_logging()
    logger.info("Starting thesaurus API service")

    await startup_tasks()

    yield

    logger.info("Shutting down thesaurus API service")


async def startup_tasks():
    """Make sure the thesaurus bucket exists"""
    from .clients.s3_client import create_bucket

    try:
        await create_bucket(get_s3_client(), vocabulary_config.BUCKET)
        logger.info("Startup tasks completed successfully")
    except Exception as e:
        logger.error(f"Startup tasks failed: {e}")
        raise


app = FastAPI(
    title="GCMD Thesaurus API",
    description="API for building and serving GCMD controlled vocabularies",
    version=os.getenv("APP_VERSION", "unknown"),
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=getenv_list("CORS_ORIGINS", ["http://localhost:3000"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_version_header(request, call_next):
    """Add version information to response headers"""
    response = await call_next(request)
    response.headers["X-API-Version"] = os.getenv("APP_VERSION", "unknown")
    return response


@app.get("/healthz")
async def health_check():
    """Liveness probe"""
    current_time = time.time()
    return {
        "status": "healthy",
        "timestamp": current_time,
        "uptime": current_time - _app_start_time,
        "api_version": os.getenv("APP_VERSION", "unknown"),
        "vocabularies": vocabulary_config.valid_types(),
    }


@app.get("/readyz")
async def readiness_check():
    """Readiness probe - checks MinIO connectivity"""
    try:
        s3_client = get_s3_client()
        s3_client.bucket_exists(vocabulary_config.BUCKET)
        return {"status": "ready"}
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail={"status": "not_ready"}) from e


# Thesaurus Routes

@app.get("/api/thesauri/{vocabulary_type}", response_model=ThesaurusPayload)
async def get_thesaurus(vocabulary_type: str, s3=Depends(get_s3_client)):
    """Get the concept forest of a vocabulary for keyword pickers"""
    from .handlers.thesaurus import handle_get_thesaurus
    return handle_get_thesaurus(vocabulary_type, s3)


@app.get("/api/thesauri/{vocabulary_type}/status", response_model=ThesaurusStatus)
async def get_thesaurus_status(vocabulary_type: str, s3=Depends(get_s3_client)):
    """Get concept count and last build time of a stored vocabulary"""
    from .handlers.thesaurus import handle_thesaurus_status
    return handle_thesaurus_status(vocabulary_type, s3)


@app.post("/api/thesauri/{vocabulary_type}/compare", response_model=ThesaurusComparison)
async def compare_thesaurus(
    vocabulary_type: str,
    remote_hits: int = Form(...),
    token: str = Depends(verify_admin_token),
    s3=Depends(get_s3_client)
):
    """Compare the stored vocabulary with the concept count reported by NASA KMS.

    Args:
        vocabulary_type: science_keywords, platforms or instruments
        remote_hits: Total concept count from the KMS ``gcmd:hits`` element
    """
    from .handlers.thesaurus import handle_thesaurus_compare
    return handle_thesaurus_compare(vocabulary_type, remote_hits, s3)


@app.post("/api/thesauri/{vocabulary_type}/rebuild", response_model=ThesaurusRebuildResponse)
async def rebuild_thesaurus(
    vocabulary_type: str,
    files: list[UploadFile] = File(...),
    token: str = Depends(verify_admin_token),
    s3=Depends(get_s3_client)
):
    """Rebuild a vocabulary from KMS RDF result pages.

    All pages of one export must be uploaded together, in page order.
    """
    from .handlers.thesaurus import handle_thesaurus_rebuild
    return await handle_thesaurus_rebuild(vocabulary_type, files, s3)


# Subject Routes

@app.post("/api/subjects/classify", response_model=SubjectClassifyResponse)
async def classify_subjects(request: SubjectClassifyRequest):
    """Split dataset subjects into free keywords and controlled paths"""
    from .handlers.subjects import handle_classify_subjects
    return handle_classify_subjects(request)


@app.post("/api/subjects/classify/xml", response_model=SubjectClassifyResponse)
async def classify_subjects_xml(file: UploadFile = File(...)):
    """Classify the subjects of an uploaded DataCite XML file"""
    from .handlers.subjects import handle_classify_subjects_xml
    content = await file.read()
    return handle_classify_subjects_xml(content)


@app.post("/api/keywords/legacy/migrate", response_model=list[MigratedKeyword])
async def migrate_legacy_keywords(
    request: LegacyKeywordRequest,
    token: str = Depends(verify_admin_token)
):
    """Rewrite keywords stored with legacy GCMD URIs to current concept URIs"""
    from .handlers.subjects import handle_migrate_legacy_keywords
    return handle_migrate_legacy_keywords(request)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
