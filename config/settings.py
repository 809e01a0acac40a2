from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Database (SQLite for local dev; use postgresql+asyncpg://... in production)
    DATABASE_URL: str = "sqlite+aiosqlite:///./stock_sim.db"
    AUTO_CREATE_TABLES: bool = True

    # App
    APP_NAME: str = "Stock Trading Simulator"
    API_PREFIX: str = "/api"
    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev

    # Pricing engine
    PRICE_TICK_ENABLED: bool = True
    PRICE_TICK_SECONDS: float = 300.0

    # Ledger rules (dollars)
    MAX_LOAN_AMOUNT: float = 100_000
    TRADING_SUSPENSION_FLOOR: float = -5_000

    # Credentials
    BCRYPT_ROUNDS: int = 12


settings = Settings()
