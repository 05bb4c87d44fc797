"""
Configuration module for the CRM.

This module handles all environment variables and application settings.
It uses Pydantic to validate and parse environment variables automatically.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings class that manages all environment variables.

    Pydantic reads environment variables automatically:
    if DATABASE_URL exists in env, it maps to the database_url field.
    Bad values (e.g. PORT=abc) cause startup failure.
    """

    # Relational backend holding contacts, appointments and properties
    database_url: str = "sqlite:///./realty_crm.db"

    # Local preference store (message templates, theme flag)
    preferences_path: str = "crm_preferences.json"

    # Application settings with defaults
    debug: bool = False  # Enable debug mode (more logs, show docs)
    port: int = 8000    # Port to run the server on

    # Messaging shortcuts
    whatsapp_country_code: str = "55"  # Prefixed to every wa.me number
    min_phone_digits: int = 8          # Shorter numbers are rejected
    agent_name: str = "Alexandre"      # Signs the pre-filled email

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Create a single instance to use throughout the app
settings = Settings()
