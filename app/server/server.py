from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.router import api_router
from infrastructure.logging import bind_request_context
from infrastructure.services import get_settings
from server.lifespan import lifespan

settings = get_settings()

handler = FastAPI(title="Notification Dispatch", lifespan=lifespan)


allow_origins = (
    ["*"]
    if settings.is_production
    else [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]
)
handler.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@handler.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a correlation id to every log entry of the request."""
    with bind_request_context(
        correlation_id=request.headers.get("X-Correlation-ID"),
        request_path=request.url.path,
        request_method=request.method,
    ) as correlation_id:
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


handler.include_router(api_router)
