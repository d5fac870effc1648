"""
Configuration for the Order Alerts Service.

Settings are loaded from environment variables or a .env file using
Pydantic Settings. Endpoint URLs are resolved once at startup and handed to
the pipeline as a frozen UrlConfiguration.

Example:
    >>> from apps.order_alerts.config import Settings
    >>> settings = Settings()
    >>> settings.urls().orders_api
    'http://localhost:8001/orders'
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class UrlConfiguration(BaseModel):
    """Endpoint addresses used by the pipeline. Immutable for the process lifetime."""

    model_config = ConfigDict(frozen=True)

    orders_api: str
    alert_api: str
    update_api: str


class Settings(BaseSettings):
    """
    Order alerts configuration settings.

    All settings can be overridden via environment variables with uppercase
    names, e.g. ORDERS_API_URL overrides orders_api_url.

    Attributes:
        service_name: Name reported in every log line
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        orders_api_url: GET endpoint returning the orders to process
        alert_api_url: POST endpoint receiving delivery alerts
        update_api_url: POST endpoint receiving updated orders
        request_timeout_seconds: Timeout applied to every HTTP call
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # Service Configuration
    # ========================================================================

    service_name: str = "order_alerts"
    log_level: str = "INFO"

    # ========================================================================
    # Remote APIs
    # ========================================================================

    orders_api_url: str = "http://localhost:8001/orders"
    alert_api_url: str = "http://localhost:8002/alerts"
    update_api_url: str = "http://localhost:8003/update"

    request_timeout_seconds: float = 30.0

    def urls(self) -> UrlConfiguration:
        """Return the frozen endpoint record shared by all components."""
        return UrlConfiguration(
            orders_api=self.orders_api_url,
            alert_api=self.alert_api_url,
            update_api=self.update_api_url,
        )
