"""
AI Advisor Endpoints

Probable-cause diagnosis from reported symptoms.
"""

import logging
import httpx
from fastapi import APIRouter, HTTPException

from autofix.models.schemas import DiagnosisRequest, DiagnosisResponse
from autofix.services.ai_advisor import get_advisor_client

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/diagnosis", response_model=DiagnosisResponse)
async def get_diagnosis(request: DiagnosisRequest):
    """
    Ask the AI advisor for a diagnosis

    - **vehicleInfo**: Make, model and year
    - **symptoms**: What the customer reports

    Returns 503 when no API key is configured and 502 when the model call fails.
    """
    advisor = get_advisor_client()
    if not advisor.configured:
        raise HTTPException(status_code=503, detail="AI advisor API key is missing (set GEMINI_API_KEY)")

    try:
        text = await advisor.generate_diagnosis(request.symptoms, request.vehicle_info)
        return DiagnosisResponse(diagnosis=text, model=advisor.model)
    except httpx.HTTPError as e:
        logger.error(f"[Advisor] Diagnosis request failed: {e}")
        raise HTTPException(status_code=502, detail=f"AI advisor request failed: {e}")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
