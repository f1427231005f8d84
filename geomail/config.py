from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # App
    APP_NAME: str = "Geolocation Mailer"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # CORS (narrow to the frontend domain in production)
    CORS_ORIGINS: List[str] = ["*"]

    # Mail account
    EMAIL_USER: str = ""
    EMAIL_PASS: str = ""
    RECIPIENT_EMAIL: str = ""

    # SMTP relay
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USE_SSL: bool = True
    SMTP_TIMEOUT: float = 60.0

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
