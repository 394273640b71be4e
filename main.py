import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, Form, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel
from dotenv import load_dotenv

from awardbot.config import settings
from awardbot.formatters.whatsapp import ERROR_MESSAGE, SEARCHING_MESSAGE
from awardbot.infrastructure.resilience import ProductionMiddleware, RequestValidator
from awardbot.obs.context import from_var, message_sid_var
from awardbot.obs.logger import log_event
from awardbot.obs.middleware import ObservabilityMiddleware
from awardbot.pipeline import AwardPipeline
from awardbot.smiles.source import build_source
from awardbot.utils.twilio import send_whatsapp_message, to_twiml_message

load_dotenv()


def build_pipeline() -> AwardPipeline:
    return AwardPipeline(
        config=settings.pipeline_config(),
        source=build_source(settings.AWARD_SOURCE, settings),
    )


def get_pipeline(request: Request) -> AwardPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = build_pipeline()
        request.app.state.pipeline = pipeline
    return pipeline


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.pipeline = build_pipeline()
    log_event(
        "startup",
        source=app.state.pipeline.source.name,
        reply_mode=settings.REPLY_MODE,
        env=settings.APP_ENV,
    )
    yield
    log_event("shutdown")


api = FastAPI(
    title="Smiles Award WhatsApp Bot",
    version="1.0.0",
    lifespan=lifespan,
)


class SearchRequest(BaseModel):
    text: str


@api.get("/")
async def root():
    return {
        "service": "Smiles Award WhatsApp Bot",
        "version": "1.0.0",
        "status": "running",
        "usage": "NYC-YYZ 2025-12-15 max=30000",
    }


@api.get("/health")
async def health():
    return {"status": "healthy", "service": "award-bot"}


@api.get("/metrics")
async def metrics():
    from awardbot.obs.metrics import get_metrics_snapshot
    return get_metrics_snapshot()


@api.post("/search")
async def search(request: Request, body: SearchRequest):
    """Run a command without Twilio in the loop; handy for local testing."""
    reply = await get_pipeline(request).handle(body.text)
    return {"reply": reply}


async def _reply_later(pipeline: AwardPipeline, to: str, message: str) -> None:
    reply = await pipeline.handle(message)
    try:
        await asyncio.to_thread(send_whatsapp_message, to, reply)
        log_event("reply_sent", user_from=to, reply_length=len(reply))
    except Exception as e:
        log_event("reply_send_failed", level="ERROR", user_from=to, error=str(e))


@api.post("/whatsapp/webhook")
async def whatsapp_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    Body: str = Form(...),
    From: str = Form(...),
    To: str = Form(...),
    MessageSid: Optional[str] = Form(None),
):
    valid, error = RequestValidator.validate_whatsapp_message({
        "Body": Body,
        "From": From,
        "To": To,
    })
    if not valid:
        raise HTTPException(status_code=400, detail=error)

    phone_number = From.replace("whatsapp:", "")
    message = Body.strip()
    from_var.set(phone_number)
    message_sid_var.set(MessageSid)

    log_event("webhook_received", message_length=len(message), reply_mode=settings.REPLY_MODE)

    pipeline = get_pipeline(request)
    if settings.REPLY_MODE == "async":
        background_tasks.add_task(_reply_later, pipeline, phone_number, message)
        reply = SEARCHING_MESSAGE
    else:
        try:
            reply = await pipeline.handle(message)
        except Exception as e:
            log_event("webhook_error", level="ERROR", error=str(e))
            reply = ERROR_MESSAGE

    # Twilio accepts both application/xml and text/xml; prefer text/xml per docs
    return Response(content=to_twiml_message(reply), media_type="text/xml")


# Apply middleware
app = ObservabilityMiddleware(api)

# Share the rate-limit window through Redis when it is configured
redis_client = None
if settings.REDIS_URL:
    import redis
    redis_client = redis.from_url(settings.REDIS_URL)

app = ProductionMiddleware(
    app,
    redis_client=redis_client,
    max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.APP_ENV == "dev",
        log_level="info"
    )
