import yaml
import os
import logging
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"  # development, test or production

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


class HubSpotConfig(BaseModel):
    """HubSpot public app credentials and API location."""
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    app_id: Optional[str] = None
    redirect_uri: str = "http://localhost:3000/oauth/callback"
    scopes: List[str] = Field(default_factory=lambda: [
        "crm.objects.deals.read",
        "crm.objects.deals.write",
    ])
    base_url: str = "https://api.hubapi.com"
    authorize_url: str = "https://app.hubspot.com/oauth/authorize"
    request_timeout_seconds: int = 30
    timeline_event_template_id: Optional[str] = None


class TrackerRMSConfig(BaseModel):
    """TrackerRMS REST API settings."""
    api_key: Optional[str] = None
    base_url: str = "https://api.trackerrms.com/v1"
    app_url: str = "https://app.trackerrms.com"
    request_timeout_seconds: int = 30


class ScoringConfig(BaseModel):
    """
    Weights for the overall placement score.

    overall_score = velocity_weight * velocity_score + roi_weight * roi_score
    (weights are normalized to sum to 1 before use)
    """
    velocity_weight: float = Field(default=0.4, ge=0)
    roi_weight: float = Field(default=0.6, ge=0)

    @property
    def weights(self) -> Dict[str, float]:
        return {"velocity": self.velocity_weight, "roi": self.roi_weight}


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    hubspot: HubSpotConfig = Field(default_factory=HubSpotConfig)
    trackerrms: TrackerRMSConfig = Field(default_factory=TrackerRMSConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# env var -> (section, key)
_ENV_OVERRIDES = {
    "PORT": ("server", "port"),
    "APP_ENV": ("server", "environment"),
    "HUBSPOT_CLIENT_ID": ("hubspot", "client_id"),
    "HUBSPOT_CLIENT_SECRET": ("hubspot", "client_secret"),
    "HUBSPOT_APP_ID": ("hubspot", "app_id"),
    "HUBSPOT_REDIRECT_URI": ("hubspot", "redirect_uri"),
    "HUBSPOT_SCOPES": ("hubspot", "scopes"),
    "TRACKERRMS_API_KEY": ("trackerrms", "api_key"),
    "TRACKERRMS_BASE_URL": ("trackerrms", "base_url"),
    "LOG_LEVEL": ("logging", "level"),
}


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides on top of the YAML data."""
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        if key == "scopes":
            value = [s.strip() for s in value.split(",") if s.strip()]
        if data.get(section) is None:
            data[section] = {}
        data[section][key] = value
    return data


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from root), try the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", os.path.basename(config_path))

    data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.info(f"No config file at {config_path}, using defaults and environment")

    return AppConfig(**_apply_env_overrides(data))


def validate_config(config: AppConfig) -> List[str]:
    """
    Check that the HubSpot app credentials are present.

    Returns:
        Dotted names of the missing settings (empty when complete).

    Raises:
        ConfigurationError: If settings are missing in production.
    """
    required = {
        "hubspot.client_id": config.hubspot.client_id,
        "hubspot.client_secret": config.hubspot.client_secret,
    }
    missing = [name for name, value in required.items() if not value]

    if missing and config.server.is_production:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

    return missing
