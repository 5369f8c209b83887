import math
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .services.comparison_service import ComparisonRequestError, ComparisonService, get_default_service
from .utils.logging import get_logger

LOGGER = get_logger("api")

GENERIC_ERROR = {"error": "Failed to generate comparison"}

app = FastAPI(title="propcompare")
router = APIRouter(prefix="/api")


def _sanitize(value: Any) -> Any:
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    if isinstance(value, dict):
        return {k: _sanitize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_sanitize(item) for item in value]
    return value


def get_comparison_service() -> ComparisonService:
    return get_default_service()


@router.post("/comparison")
async def compare_properties(request: Request, service: ComparisonService = Depends(get_comparison_service)):
    try:
        payload = await request.json()
    except Exception:
        LOGGER.exception("comparison_body_unreadable")
        return JSONResponse(status_code=500, content=GENERIC_ERROR)

    try:
        response = await service.compare(payload)
    except ComparisonRequestError as exc:
        LOGGER.info("comparison_rejected error=%r", exc.message)
        return JSONResponse(status_code=400, content=jsonable_encoder(exc.to_payload()))
    except Exception:
        LOGGER.exception("comparison_failed")
        return JSONResponse(status_code=500, content=GENERIC_ERROR)

    return jsonable_encoder(_sanitize(response.model_dump()))


@router.get("/health")
def health():
    return {"status": "ok"}


app.include_router(router)
