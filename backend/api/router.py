import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_optimization_advisor, get_resume_analyzer
from config import settings
from models.requests import OptimizeRequest, QuickAnalyzeRequest
from models.responses import AnalysisResponse, OptimizationResponse
from services import text_extractor
from services.errors import AnalysisServiceError, ExtractionError
from services.optimization_advisor import OptimizationAdvisor
from services.resume_analyzer import ResumeAnalyzer

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


async def _run_analysis(
    analyzer: ResumeAnalyzer, resume_text: str, job_description: str, mode: str
) -> AnalysisResponse:
    try:
        return await analyzer.analyze(resume_text, job_description, mode)
    except AnalysisServiceError as e:
        logger.error("Analysis failed (%s): %s", e.code, e)
        raise HTTPException(status_code=502, detail=f"AI analysis unavailable: {e}")


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
    }


@router.post("/analyze", response_model=AnalysisResponse)
@limiter.limit(settings.rate_limit)
async def analyze(
    request: Request,
    resume_file: UploadFile = File(...),
    job_description: str = Form(...),
    mode: str = Form("both"),
    analyzer: ResumeAnalyzer = Depends(get_resume_analyzer),
):
    if mode not in ("both", "keyword", "ai"):
        raise HTTPException(status_code=400, detail="mode must be one of: both, keyword, ai")

    if not resume_file.filename:
        raise HTTPException(status_code=400, detail="A resume file is required")

    # Read and validate size
    content = await resume_file.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
        )

    if len(job_description) > settings.max_job_description_chars:
        raise HTTPException(
            status_code=400,
            detail=f"Job description too long (max {settings.max_job_description_chars} chars)",
        )

    try:
        resume_text = text_extractor.extract_text(
            content, text_extractor.extension_of(resume_file.filename)
        )
    except ExtractionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return await _run_analysis(analyzer, resume_text, job_description, mode)


@router.post("/analyze/quick", response_model=AnalysisResponse)
@limiter.limit(settings.rate_limit)
async def analyze_quick(
    request: Request,
    body: QuickAnalyzeRequest,
    analyzer: ResumeAnalyzer = Depends(get_resume_analyzer),
):
    return await _run_analysis(analyzer, body.resume_text, body.job_description, body.mode)


@router.post("/optimize", response_model=OptimizationResponse)
@limiter.limit(settings.rate_limit)
async def optimize(
    request: Request,
    body: OptimizeRequest,
    advisor: OptimizationAdvisor = Depends(get_optimization_advisor),
):
    return await advisor.optimize(
        body.job_description, body.resume_text, body.level, body.analysis
    )
