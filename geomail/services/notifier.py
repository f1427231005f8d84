import datetime as dt
import html
import logging
import math
from decimal import Decimal
from typing import Any, Callable, Optional

from fastapi.responses import JSONResponse

from geomail.config import Settings
from geomail.errors import DeliveryError, ValidationError
from geomail.models import Envelope, ErrorResponse, GeolocationEvent, MessageResponse
from geomail.services.mailer import Transport

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "Geolocation Update from Website"
MAPS_URL = "https://www.google.com/maps?q={lat},{lon}"

BODY_TEMPLATE = """
<p>Hello,</p>
<p>Here are the latest geolocation coordinates:</p>
<ul>
    <li><strong>Latitude:</strong> {lat}</li>
    <li><strong>Longitude:</strong> {lon}</li>
    <li><strong>Timestamp:</strong> {ts}</li>
</ul>
<p>You can view this location on Google Maps: <a href="{link}">Click Here</a></p>
<p>Best regards,<br>Your Geolocation App</p>
"""


# ===== Rendering =====
def display_value(value: Any) -> str:
    """Renders a payload value the way the client wrote it in JSON."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def format_number(value: float) -> str:
    """Shortest round-trip digits, exponent only below 1e-6 or from 1e21 up."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    sign, digits, exponent = Decimal(repr(value)).as_tuple()
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    text = "".join(str(d) for d in digits)
    point = len(text) + exponent
    if len(text) <= point <= 21:
        out = text + "0" * (point - len(text))
    elif 0 < point <= 21:
        out = text[:point] + "." + text[point:]
    elif -6 < point <= 0:
        out = "0." + "0" * -point + text
    else:
        mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
        power = point - 1
        out = f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"
    return ("-" if sign else "") + out


def format_locale_time(moment: dt.datetime) -> str:
    """M/D/YYYY, h:MM:SS AM|PM"""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


def maps_link(latitude: Any, longitude: Any) -> str:
    return MAPS_URL.format(lat=display_value(latitude), lon=display_value(longitude))


def render_body(event: GeolocationEvent) -> str:
    return BODY_TEMPLATE.format(
        lat=html.escape(display_value(event.latitude)),
        lon=html.escape(display_value(event.longitude)),
        ts=html.escape(display_value(event.timestamp)),
        link=html.escape(maps_link(event.latitude, event.longitude)),
    )


# ===== Handler =====
class GeolocationEmailHandler:
    """Validates a geolocation payload and mails it to the configured recipient.

    Each call makes at most one send attempt; duplicates are not suppressed
    and failures are reported once, never retried.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Transport,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ):
        self.settings = settings
        self.transport = transport
        self.clock = clock or dt.datetime.now

    def validate(self, payload: Any) -> GeolocationEvent:
        event = GeolocationEvent.from_payload(payload)
        if not event.has_coordinates():
            raise ValidationError()
        return event

    def build_envelope(self, event: GeolocationEvent, now: dt.datetime) -> Envelope:
        # Subject carries server time, body carries the client timestamp.
        return Envelope(
            sender=self.settings.EMAIL_USER,
            recipient=self.settings.RECIPIENT_EMAIL,
            subject=f"{SUBJECT_PREFIX} - {format_locale_time(now)}",
            html=render_body(event),
        )

    async def deliver(self, envelope: Envelope) -> None:
        try:
            await self.transport.send(envelope)
        except Exception as e:
            raise DeliveryError(e) from e

    async def handle(self, payload: Any) -> JSONResponse:
        try:
            event = self.validate(payload)
        except ValidationError as e:
            logger.error("Missing latitude or longitude in request body.")
            return JSONResponse(
                status_code=e.status_code,
                content=MessageResponse(message=e.message).model_dump(),
            )

        envelope = self.build_envelope(event, self.clock())
        try:
            await self.deliver(envelope)
        except DeliveryError as e:
            logger.exception("Error sending email: %s", e.error)
            return JSONResponse(
                status_code=e.status_code,
                content=ErrorResponse(message=e.message, error=e.error).model_dump(),
            )

        logger.info(
            "Email sent successfully to %s with coordinates: %s, %s",
            envelope.recipient,
            display_value(event.latitude),
            display_value(event.longitude),
        )
        return JSONResponse(
            status_code=200,
            content=MessageResponse(message="Email sent successfully!").model_dump(),
        )
