"""
Core configuration settings for AgentOS API
"""
from pydantic_settings import BaseSettings
from typing import List, Optional

from agentos.services.commission_rules import CommissionRules


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # App Config
    APP_NAME: str = "AgentOS"
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Google Cloud / Firebase
    GOOGLE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS: Optional[str] = None
    FIRESTORE_ENABLED: bool = False

    # Firestore collections
    USERS_COLLECTION: str = "users"
    COMMISSIONS_COLLECTION: str = "commission-calculations"
    ORDERS_COLLECTION: str = "shopify-orders"

    # Commission
    DEFAULT_COMMISSION_RATE: float = 0.05
    DEFAULT_CURRENCY: str = "MYR"

    # CORS
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS_ORIGINS string to list"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    def commission_rules(self) -> CommissionRules:
        """Build the commission rule set, applying environment overrides"""
        return CommissionRules(
            default_rate=self.DEFAULT_COMMISSION_RATE,
            currency=self.DEFAULT_CURRENCY,
        )

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Create global settings instance
settings = Settings()
