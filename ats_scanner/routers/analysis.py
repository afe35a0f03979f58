import asyncio

from fastapi import APIRouter, HTTPException, Request

from ats_scanner.models.analysis import ATSSimulationResult, IndustryAssessment, SemanticAnalysisResult
from ats_scanner.models.schemas import (
    AnalysisRecord, ATSSimulationRequest, ComprehensiveAnalysisRequest, ComprehensiveAnalysisResponse,
    IndustryAnalysisRequest, SemanticAnalysisRequest
)
from ats_scanner.services.db import get_analysis_record, save_analysis_record
from ats_scanner.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/comprehensive", response_model=ComprehensiveAnalysisResponse)
async def comprehensive_analysis(body: ComprehensiveAnalysisRequest, request: Request):
    """Full pipeline: semantic, industry, ATS and weighted scoring"""
    engine = request.app.state.engine
    result = await engine.comprehensive_analysis(
        body.resume_text, body.job_text, body.target_industry, body.target_role_level
    )

    analysis_id = None
    if request.app.state.settings.features.persist_results:
        analysis_id = await save_analysis_record(AnalysisRecord.from_result(result))

    return ComprehensiveAnalysisResponse(analysis_id=analysis_id, result=result)


@router.get("/records/{analysis_id}")
async def get_analysis(analysis_id: str):
    """Fetch a stored analysis record"""
    record = await get_analysis_record(analysis_id)
    if not record:
        raise HTTPException(status_code=404, detail="Analysis record not found")
    return record


@router.post("/semantic", response_model=SemanticAnalysisResult)
async def semantic_analysis(body: SemanticAnalysisRequest, request: Request):
    matcher = request.app.state.engine.semantic_matcher
    return await asyncio.to_thread(matcher.analyze, body.resume_text, body.job_text, body.industry)


@router.post("/industry", response_model=IndustryAssessment)
async def industry_analysis(body: IndustryAnalysisRequest, request: Request):
    classifier = request.app.state.engine.classifier
    return await asyncio.to_thread(classifier.classify, body.resume_text, body.job_text)


@router.post("/ats", response_model=ATSSimulationResult)
async def ats_simulation(body: ATSSimulationRequest, request: Request):
    """Replay the resume through every registered ATS profile"""
    simulator = request.app.state.engine.ats_simulator
    return await asyncio.to_thread(simulator.simulate, body.resume_text, body.target_keywords)
