import os
from collections.abc import AsyncIterator
from contextlib import aclosing
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
import uvicorn
from customer_service.agents import AgentFactory
from customer_service.config import SERVICE_NAME, AgentSettings, get_cors_origins
from customer_service.db import MockDB
from customer_service.errors import ConfigurationError, EmptyMessageError
from customer_service.logger import get_logger
from customer_service.orchestrator import InquiryOrchestrator
from customer_service.schemas import InquiryRequest, InquiryResponse

logger = get_logger(__name__)

"""
NOTE: create_app() builds the settings, the agent factory and the orchestrator once. Every request shares the same orchestrator
NOTE: A missing GITHUB_TOKEN does not stop the server. /health keeps working, inquiries fail with a generic 500
NOTE: HTTPException is FastAPI's way of returning error responses with specific status codes
NOTE: The internal error detail is logged, never returned to the client
NOTE: StreamingResponse sends each fragment as soon as it is yielded. When the client disconnects, Starlette cancels the generator
      and the cancellation travels down to the open model stream
NOTE: Once the first fragment is sent the status code is already 200, so a failure mid-stream can only end the stream
"""

router = APIRouter(prefix="/api/customerservice", tags=["customer service"])


def get_orchestrator(request: Request) -> InquiryOrchestrator:
    return request.app.state.orchestrator


@router.post("/inquiry", response_model=InquiryResponse)
async def inquiry(request: InquiryRequest, orchestrator: InquiryOrchestrator = Depends(get_orchestrator)):
    customer = request.customer_id or "anonymous"
    logger.info(f"Inquiry request received | customer={customer}")
    try:
        reply = await orchestrator.process(request.message, request.customer_id)
    except EmptyMessageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(f"Error processing customer inquiry | customer={customer}")
        raise HTTPException(status_code=500, detail="An error occurred processing your request")

    return InquiryResponse(message=reply, timestamp=datetime.now(timezone.utc))


async def stream_fragments(orchestrator: InquiryOrchestrator, request: InquiryRequest) -> AsyncIterator[str]:
    customer = request.customer_id or "anonymous"
    try:
        async with aclosing(orchestrator.process_stream(request.message, request.customer_id)) as fragments:
            async for fragment in fragments:
                yield fragment
    except Exception:
        logger.exception(f"Streaming inquiry failed, closing stream | customer={customer}")


@router.post("/inquiry/stream")
async def inquiry_stream(request: InquiryRequest, orchestrator: InquiryOrchestrator = Depends(get_orchestrator)):
    logger.info(f"Streaming inquiry request received | customer={request.customer_id or 'anonymous'}")
    return StreamingResponse(
        stream_fragments(orchestrator, request),
        media_type="text/plain; charset=utf-8",
    )


def create_app(orchestrator: InquiryOrchestrator | None = None, settings: AgentSettings | None = None) -> FastAPI:
    settings = settings or AgentSettings.from_env()

    try:
        settings.require_credentials()
    except ConfigurationError as e:
        logger.warning(f"{e} The API will not be able to answer inquiries until it is set.")

    if orchestrator is None:
        orchestrator = InquiryOrchestrator(AgentFactory(settings), MockDB())

    app = FastAPI(
        title="CrossBorder ERP Customer Service API",
        description="Routes customer inquiries to order, product and general agents powered by Pydantic AI",
    )
    app.state.orchestrator = orchestrator
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    # Check if the server is running without triggering any LLM calls
    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    logger.info(
        f"{SERVICE_NAME} API ready | model={settings.model_id} | "
        f"github_token={'SET' if settings.has_token else 'NOT SET'}"
    )
    logger.info("Endpoints | POST /api/customerservice/inquiry | POST /api/customerservice/inquiry/stream | GET /health")
    return app


app = create_app()

if __name__ == "__main__":
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("api:app", host=host, port=port)
