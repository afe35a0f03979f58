from typing import List

from fastapi import APIRouter, Request

from ats_scanner.models.reference import ATSSystemProfile, IndustryProfile, WeightTable

router = APIRouter()


@router.get("/industries", response_model=List[IndustryProfile])
async def list_industries(request: Request):
    """Registered industry profiles, in tie-break priority order"""
    return list(request.app.state.reference.industries)


@router.get("/ats-systems", response_model=List[ATSSystemProfile])
async def list_ats_systems(request: Request):
    return list(request.app.state.reference.ats_profiles)


@router.get("/weight-tables", response_model=List[WeightTable])
async def list_weight_tables(request: Request):
    return list(request.app.state.reference.weight_tables)
