from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    PROJECT_NAME: str = "FinVault"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_TRANSACTIONS_TABLE: str = Field(default="finvault-transactions", alias="DYNAMO_TABLE_TRANSACTIONS")
    DYNAMO_TAX_TABLE: str = Field(default="finvault-tax-data", alias="DYNAMO_TABLE_TAX")

    # JWT Authentication
    JWT_SECRET_KEY: str = Field(default="change-me-in-production", alias="JWT_SECRET")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Tax planner
    DEFAULT_FINANCIAL_YEAR: str = "2025-26"

    # Insight thresholds
    SAVINGS_TARGET_PERCENT: float = 20.0
    CATEGORY_SHARE_LIMIT_PERCENT: float = 40.0
    SPENDING_SPIKE_RATIO: float = 1.3
    FORECAST_MIN_TRANSACTIONS: int = 5


settings = Settings()
