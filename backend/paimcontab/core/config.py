from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "PaimContab"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DOMAIN: str = "example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/paimcontab.db"
    LOG_LEVEL: str = "INFO"

    # DAS (MEI monthly tax)
    DAS_RATE: Decimal = Decimal("0.06")
    DAS_MIN_AMOUNT: Decimal = Decimal("66.60")
    DAS_DUE_DAY: int = 20
    DAS_DUE_SOON_DAYS: int = 30

    # Payment providers
    stripe_api_key: str = ""
    stripe_webhook_secret: str = ""
    manual_webhook_secret: str = ""
    CHECKOUT_CURRENCY: str = "brl"
    FRONTEND_URL: str = "http://localhost:3000"

    # SMTP (admin notifications)
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SMTP_FROM_EMAIL: str = "noreply@paimcontab.com.br"
    SMTP_FROM_NAME: str = "PaimContab"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"


settings = Settings()
