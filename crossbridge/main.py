from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from crossbridge.api.routes import router
from crossbridge.api.admin_routes import router as admin_router
from crossbridge.core.errors import BridgeError
from crossbridge.observability.logging import log
from crossbridge.settings import settings
from crossbridge.store.codec import CodecError
from crossbridge.utils.lock import LockNotAcquired

app = FastAPI(title="Cross-Chain Bridge Request API")

origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

app.include_router(router)
app.include_router(admin_router)


@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Bridge request API is running. Use /health, POST /requests and GET /requests/{requester}.",
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.exception_handler(BridgeError)
async def bridge_error_handler(request: Request, exc: BridgeError):
    return JSONResponse(
        status_code=exc.http_status,
        content={"status": "error", "error": exc.to_dict()},
    )


@app.exception_handler(CodecError)
async def codec_error_handler(request: Request, exc: CodecError):
    log(event="stored_record_corrupt", path=request.url.path, detail=str(exc))
    return JSONResponse(
        status_code=500,
        content={"status": "error", "error": {"kind": "CorruptRecord", "message": "stored record could not be decoded"}},
    )


@app.exception_handler(LockNotAcquired)
async def lock_error_handler(request: Request, exc: LockNotAcquired):
    log(event="lock_contention", path=request.url.path, detail=str(exc))
    return JSONResponse(
        status_code=503,
        content={"status": "error", "error": {"kind": "Busy", "message": str(exc)}},
        headers={"Retry-After": "1"},
    )
