"""
ThreatSense Configuration Management
Handles all application settings and environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # API key for the HTTP surface; requests are rejected until one is configured
    API_KEY: str | None = None

    # Substituted for {app_display_name} in threat messages
    APP_DISPLAY_NAME: str | None = None

    # Threat monitor
    THREAT_HISTORY_LIMIT: int = 100
    AUTO_DISMISS_LOW_THREATS: bool = True
    AUTO_DISMISS_DELAY_SECONDS: float = 10.0
    ESCALATION_SEVERITY: str = 'critical'

    # Application settings
    API_EVENT_LIMIT: int = 100
    LOG_LEVEL: str = 'INFO'

    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

settings = Settings()
