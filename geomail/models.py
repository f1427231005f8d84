from typing import Any, Optional
from pydantic import BaseModel

class GeolocationEvent(BaseModel):
    latitude: Any = None
    longitude: Any = None
    timestamp: Any = None  # opaque, echoed verbatim

    @classmethod
    def from_payload(cls, payload: Any) -> "GeolocationEvent":
        if not isinstance(payload, dict):
            return cls()
        return cls(
            latitude=payload.get("latitude"),
            longitude=payload.get("longitude"),
            timestamp=payload.get("timestamp"),
        )

    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class Envelope(BaseModel):
    sender: str
    recipient: str
    subject: str
    html: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    message: str
    error: Optional[str] = None
