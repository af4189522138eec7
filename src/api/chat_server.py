"""
Chat API Server.

A FastAPI service exposing the clinic and restaurant chat flows plus the
catalogues backing the display pages. Requests are stateless; datasets
are loaded once at startup and the completion client is owned by the
application lifespan.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Union

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, Field

from src.config import GENERIC_ERROR, configure_logging, get_settings
from src.services.clinic import ClinicAssistant
from src.services.completion import create_completion_service
from src.services.datasets import load_dishes, load_doctors
from src.services.restaurant import MenuAssistant

# ============================================================================
# Data Models
# ============================================================================


class ChatRequest(BaseModel):
    """Incoming chat message."""

    message: str = Field(description="Free-text user message")


class ChatReply(BaseModel):
    """Reply to a chat message."""

    reply: str


class ErrorReply(BaseModel):
    """Body returned when a request cannot be processed."""

    error: str


# ============================================================================
# FastAPI Application
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting Chat API Server")

    # Datasets first: a bad file must fail before any client exists
    doctors = load_doctors(settings.clinic_data_path)
    dishes = load_dishes(settings.menu_data_path)
    completion = create_completion_service(settings)

    app.state.clinic_assistant = ClinicAssistant(completion, doctors)
    app.state.menu_assistant = MenuAssistant(
        completion, dishes, validate_dishes=settings.validate_dishes
    )
    yield
    # Shutdown
    logger.info("Shutting down Chat API Server")
    await completion.close()


app = FastAPI(
    title="Lookup Assistant API",
    description="Chat-assisted doctor appointment and restaurant menu search",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for the display pages
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def invalid_request_handler(request: Request, exc: RequestValidationError):
    """Malformed chat bodies are reported like any other handler failure."""
    logger.error(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=500, content=ErrorReply(error=GENERIC_ERROR).model_dump())


def get_clinic_assistant(request: Request) -> ClinicAssistant:
    return request.app.state.clinic_assistant


def get_menu_assistant(request: Request) -> MenuAssistant:
    return request.app.state.menu_assistant


async def _answer(
    assistant: Union[ClinicAssistant, MenuAssistant], payload: ChatRequest, flow: str
):
    logger.info(f"Received {flow} query: '{payload.message[:100]}'")
    try:
        reply = await assistant.reply(payload.message)
    except Exception:
        logger.exception(f"Unhandled error in {flow} chat")
        return JSONResponse(status_code=500, content=ErrorReply(error=GENERIC_ERROR).model_dump())
    return ChatReply(reply=reply)


# ============================================================================
# API Endpoints
# ============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.post(
    "/api/chat_clinic",
    response_model=ChatReply,
    responses={500: {"model": ErrorReply}},
)
async def chat_clinic(
    payload: ChatRequest,
    assistant: ClinicAssistant = Depends(get_clinic_assistant),
):
    """Answer a doctor or appointment question."""
    return await _answer(assistant, payload, "clinic")


@app.post(
    "/api/chat_restaurant",
    response_model=ChatReply,
    responses={500: {"model": ErrorReply}},
)
async def chat_restaurant(
    payload: ChatRequest,
    assistant: MenuAssistant = Depends(get_menu_assistant),
):
    """Answer a dish or menu question."""
    return await _answer(assistant, payload, "restaurant")


@app.get("/api/v1/doctors")
async def list_doctors(assistant: ClinicAssistant = Depends(get_clinic_assistant)):
    """List every doctor in the clinic dataset."""
    doctors = [d.model_dump() for d in assistant.doctors]
    return {"doctors": doctors, "total": len(doctors)}


@app.get("/api/v1/dishes")
async def list_dishes(assistant: MenuAssistant = Depends(get_menu_assistant)):
    """List every dish, keyed the way the menu dataset is."""
    dishes = [d.model_dump(by_alias=True) for d in assistant.dishes]
    return {"dishes": dishes, "total": len(dishes)}


# ============================================================================
# Run Server
# ============================================================================


def run_server(host: str = "0.0.0.0", port: int = 8080, workers: int = 4):
    """Run the chat API server."""
    import uvicorn

    uvicorn.run(
        "src.api.chat_server:app",
        host=host,
        port=port,
        reload=False,
        workers=workers,
        loop="uvloop",  # High-performance event loop
        http="httptools",  # Fast HTTP parser
    )


if __name__ == "__main__":
    settings = get_settings()
    run_server(host=settings.host, port=settings.port)
