import datetime as dt
import json
import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from geomail.config import settings
from geomail.models import ErrorResponse, MessageResponse
from geomail.services.mailer import SmtpTransport
from geomail.services.notifier import GeolocationEmailHandler

ENDPOINT = "/send-geolocation-email"

# ===== Logging =====
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

# ===== App =====
app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["POST", "GET"],
    allow_headers=["Content-Type", "Authorization"],
)

@app.on_event("startup")
async def announce():
    logger.info("Backend server listening at http://localhost:%s", settings.PORT)
    logger.info("API endpoint: http://localhost:%s%s", settings.PORT, ENDPOINT)

# ===== Dependencies =====
@lru_cache()
def get_handler() -> GeolocationEmailHandler:
    return GeolocationEmailHandler(settings, SmtpTransport(settings))

async def read_payload(request: Request):
    """Decoded JSON body; anything unreadable counts as an empty payload."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}

# ===== Endpoints =====
@app.get("/health")
async def health():
    return {"ok": True, "ts": dt.datetime.now(dt.timezone.utc).isoformat()}

@app.post(
    ENDPOINT,
    response_model=MessageResponse,
    responses={400: {"model": MessageResponse}, 500: {"model": ErrorResponse}},
)
async def send_geolocation_email(
    request: Request,
    handler: GeolocationEmailHandler = Depends(get_handler),
):
    payload = await read_payload(request)
    return await handler.handle(payload)


# ===== Main =====
def run():
    import uvicorn
    uvicorn.run("geomail.main:app", host=settings.HOST, port=settings.PORT, reload=False)

if __name__ == "__main__":
    run()
