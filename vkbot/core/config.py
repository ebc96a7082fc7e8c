from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    VK_TOKEN: str | None = None
    VK_API_VERSION: str = "5.131"
    VK_CONFIRMATION_TOKEN: str = ""
    VK_SECRET_KEY: str | None = None

    PARK_API_BASE_URL: str = "https://apigateway.nordciti.ru/v1/aqua"
    PARK_SITE_ID: str = "1"
    PARK_API_TIMEOUT_SECONDS: float = 10.0
    TICKETS_URL: str = "https://yes35.ru/aquapark/tickets"

    ADMIN_PANEL_BASE_URL: str = ""
    ADMIN_PANEL_TIMEOUT_SECONDS: float = 3.0
    ADMIN_USER_IDS: list[int] = []

    DATABASE_URL: str = "sqlite:///./data/bot.db"
    STORE_DIR: str = "./data/conversations"

    OFFLINE_AFTER_SECONDS: float = 300.0

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    AUTO_REPLY_ENABLED: bool = True


settings = Settings()
