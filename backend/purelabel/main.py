"""
PureLabel AI - FastAPI Application

Main entry point for the PureLabel backend API.
Implements the /analyze and /chat endpoints and health checks.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, UploadFile, File, Form, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from purelabel.config import get_settings
from purelabel.core.exceptions import AnalysisFailed
from purelabel.core.orchestrator import EngineType, LabelOrchestrator
from purelabel.core.state import AnalysisInput, AnalysisResult, ChatMessage, ChatRole, LabelModel

VERSION = "0.1.0"

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# === Lifespan Management ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup application resources."""
    settings = get_settings()

    # Startup
    logger.info("🚀 Starting PureLabel AI Backend")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Default engine: {settings.default_engine}")

    # Validate API keys
    key_status = settings.validate_required_keys()
    for key, configured in key_status.items():
        status = "✅" if configured else "⚠️ Missing"
        logger.info(f"  {key}: {status}")

    if settings.opik_api_key:
        try:
            import opik
            opik.configure(api_key=settings.opik_api_key)
            logger.info(f"📊 Opik tracing enabled - Project: {settings.opik_project_name}")
        except Exception as e:
            logger.warning(f"⚠️ Opik initialization failed: {e}")

    yield

    # Shutdown
    logger.info("👋 Shutting down PureLabel AI Backend")


# === FastAPI Application ===
app = FastAPI(
    title="PureLabel AI",
    description="Plain-language health assessment of food-label ingredients",
    version=VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_orchestrator() -> LabelOrchestrator:
    """Shared orchestrator; agents hold no per-request state."""
    return LabelOrchestrator()


# === Request/Response Models ===
class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    api_keys_configured: dict[str, bool]


class ChatRequest(LabelModel):
    """Follow-up question with the full conversation so far."""
    history: list[ChatMessage]
    context: Optional[str] = None
    result: Optional[AnalysisResult] = None


class ChatResponse(LabelModel):
    reply: str
    history: list[ChatMessage]


# === Endpoints ===
@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "PureLabel AI",
        "version": VERSION,
        "description": "Food-label ingredient interpreter",
        "engines": [e.value for e in EngineType],
        "docs_url": "/docs",
    }


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint for monitoring."""
    settings = get_settings()
    return HealthResponse(
        status="ok",
        timestamp=datetime.utcnow().isoformat(),
        version=VERSION,
        api_keys_configured=settings.validate_required_keys(),
    )


@app.post("/analyze", response_model=AnalysisResult, tags=["analysis"])
async def analyze_label(
    image: UploadFile | None = File(None, description="Photo of the ingredient label"),
    text_input: str | None = Form(None, description="Typed ingredient list"),
    engine: str | None = Form(None, description="Engine: local or cloud"),
    orchestrator: LabelOrchestrator = Depends(get_orchestrator),
):
    """
    Analyze a food label from a photo or typed ingredient list.

    The image takes precedence when both are sent. Engine failures are
    reported with a short message telling the user what to try next.
    """
    if not image and not text_input:
        raise HTTPException(
            status_code=400,
            detail="Either an image or an ingredient list is required"
        )

    requested = engine or get_settings().default_engine
    try:
        selected = EngineType(requested)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown engine '{requested}'. Use one of: {[e.value for e in EngineType]}"
        )

    if image:
        image_bytes = await image.read()
        logger.info(f"Received image: {len(image_bytes)} bytes")
        image_format = (image.content_type or "image/jpeg").split("/")[-1]
        input = AnalysisInput(image_bytes=image_bytes, image_format=image_format)
    else:
        input = AnalysisInput(text=text_input)

    try:
        result = await orchestrator.analyze(input, selected)
    except AnalysisFailed as e:
        raise HTTPException(status_code=422, detail=e.user_message)
    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Analysis failed: {str(e)}"
        )

    logger.info(f"Analysis complete: '{result.verdict}' for '{result.product_name}'")
    return result


@app.post("/chat", response_model=ChatResponse, tags=["analysis"])
async def chat(
    request: ChatRequest,
    orchestrator: LabelOrchestrator = Depends(get_orchestrator),
):
    """
    Answer a follow-up question about an analyzed product.

    Send the whole conversation each time; the last turn must be the
    user's question. Model failures are answered with an apology.
    """
    if not request.history:
        raise HTTPException(status_code=400, detail="Conversation history is empty")
    if request.history[-1].role != ChatRole.USER:
        raise HTTPException(status_code=400, detail="The last turn must be the user's question")

    history = await orchestrator.ask(
        request.history,
        result=request.result,
        context=request.context,
    )
    return ChatResponse(reply=history[-1].content, history=history)


# === Run with Uvicorn ===
if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "purelabel.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
