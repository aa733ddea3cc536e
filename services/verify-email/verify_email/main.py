"""
send-verification-email function — entry point.

  OPTIONS /  — CORS preflight, empty 200
  POST    /  — { user_id, email } → token persisted, debug link returned

Every response carries the CORS headers below.
"""
import logging
from typing import Callable

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import Counter, make_asgi_app

from verify_email.config import Settings, get_settings
from verify_email.errors import VerificationError
from verify_email.issuer import issue_verification
from verify_email.store import ProfileStore
from verify_email.telemetry import TelemetrySettings, instrument_app, setup_tracing

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

VERIFICATION_ISSUED_TOTAL = Counter(
    "verification_issued_total",
    "Verification tokens issued and persisted",
)

VERIFICATION_ERRORS_TOTAL = Counter(
    "verification_errors_total",
    "Verification requests that failed",
    ["kind"],  # 'missing_field' | 'persistence' | 'misconfigured' | 'unexpected'
)

telemetry_settings = TelemetrySettings()
setup_tracing(telemetry_settings)

app = FastAPI(title="send-verification-email", version="1.0.0")
app.mount("/metrics", make_asgi_app())
instrument_app(app, telemetry_settings)


@app.middleware("http")
async def cors_mw(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


def get_store_factory() -> Callable[[Settings], ProfileStore]:
    return ProfileStore


def _request_origin(request: Request, settings: Settings) -> str:
    origin = request.headers.get("origin")
    if origin:
        return origin
    if settings.site_url:
        return settings.site_url
    return str(request.base_url).rstrip("/")


@app.post("/")
async def send_verification_email(
    request: Request,
    store_factory: Callable[[Settings], ProfileStore] = Depends(get_store_factory),
):
    try:
        settings = get_settings()
        body = await request.json()
        if not isinstance(body, dict):
            body = {}

        async with store_factory(settings) as store:
            issued = await issue_verification(
                store,
                body.get("user_id"),
                body.get("email"),
                _request_origin(request, settings),
            )
    except VerificationError as exc:
        if getattr(exc, "cause", None):
            logger.error("%s error: %s", exc.kind, exc.cause)
        VERIFICATION_ERRORS_TOTAL.labels(kind=exc.kind).inc()
        return JSONResponse({"error": exc.public_message}, status_code=exc.status_code)
    except Exception as exc:
        logger.exception("Error in send-verification-email")
        VERIFICATION_ERRORS_TOTAL.labels(kind="unexpected").inc()
        return JSONResponse({"error": str(exc)}, status_code=500)

    VERIFICATION_ISSUED_TOTAL.inc()
    return JSONResponse(
        {
            "success": True,
            "message": "Verification email sent",
            # Development affordance: no mail provider is wired in
            "debug_link": issued.link,
        },
        status_code=200,
    )


@app.get("/health")
async def health():
    return {"status": "ok"}
