# main.py

import logging
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import config
from ai.gemini import GeminiClient
from services.itinerary import ItineraryPlanner, MissingFieldsError, build_error_response

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Request body; presence is checked by the planner so that an empty field
# gets the 400 "missing fields" answer rather than a validation error.
class ItineraryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    location: Optional[str] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")


def get_planner(request: Request) -> ItineraryPlanner:
    return request.app.state.planner


router = APIRouter()


@router.get("/health")
def health_check():
    return {
        "status": "healthy",
        "service": config.SERVICE_NAME,
        "version": config.SERVICE_VERSION,
    }


@router.get("/")
def root():
    return {
        "message": "Itinerary Generator Microservice",
        "version": config.SERVICE_VERSION,
        "endpoints": {
            "generate": "POST /generate-itinerary",
            "health": "GET /health",
        },
    }


@router.post("/generate-itinerary")
async def generate_itinerary_endpoint(
    req: Optional[ItineraryRequest] = None,
    planner: ItineraryPlanner = Depends(get_planner),
):
    payload = req.model_dump(by_alias=True) if req else {}
    try:
        return await planner.plan(
            payload.get("location"), payload.get("startDate"), payload.get("endDate")
        )
    except MissingFieldsError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})
    except Exception as e:
        logger.exception("Error generating itinerary")
        return JSONResponse(status_code=500, content=build_error_response(payload, e))


async def _http_error(request: Request, exc: StarletteHTTPException):
    # unknown path or unsupported method on a known path
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def _invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request body",
            "details": str(exc.errors()),
        },
    )


def create_app(client: Optional[GeminiClient] = None) -> FastAPI:
    """Build the FastAPI app around one Gemini client (a fake one in tests)."""
    if client is None:
        client = GeminiClient(api_key=config.GEMINI_API_KEY)
        logger.info("Gemini AI configured: %s", bool(config.GEMINI_API_KEY))

    app = FastAPI(title="Itinerary Generator Microservice", version=config.SERVICE_VERSION)
    app.state.planner = ItineraryPlanner(client)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    logger.info("Itinerary Generator Microservice running on port %d", config.PORT)
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
