"""
Main application module.

Creates the FastAPI app, wires the services onto app.state and
registers the routers.
"""

from typing import Optional

from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker
from realty_crm import __version__
from realty_crm.core.config import settings
from realty_crm.core.logging import setup_logging
import logging

# Logging must be set up before anything else logs
setup_logging(debug=settings.debug)

logger = logging.getLogger(__name__)


def create_app(
    session_factory: Optional[sessionmaker] = None,
    preference_path: Optional[str] = None,
) -> FastAPI:
    """
    Factory function that creates and configures the application.

    Args:
        session_factory: Backend sessions; defaults to the configured database
        preference_path: Preference file; defaults to settings.preferences_path

    Returns:
        FastAPI: A configured application whose view state is already loaded
    """
    from realty_crm.api import appointments, contacts, dashboard, health, preferences, properties
    from realty_crm.api.deps import register_error_handlers
    from realty_crm.db.database import SessionLocal, init_db
    from realty_crm.services.commands import CommandHandlers
    from realty_crm.services.data_service import DataService
    from realty_crm.services.preferences import PreferenceStore, TemplateService, ThemePreference
    from realty_crm.services.view_state import ViewStateStore

    app = FastAPI(
        title="Realty CRM",
        description="Contacts, agenda and listings for an independent real-estate agent",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    session_factory = session_factory or SessionLocal
    init_db(session_factory.kw["bind"])

    data_service = DataService(session_factory)
    view_state = ViewStateStore(data_service)
    view_state.start()

    store = PreferenceStore(preference_path or settings.preferences_path)

    app.state.session_factory = session_factory
    app.state.data_service = data_service
    app.state.view_state = view_state
    app.state.commands = CommandHandlers(data_service, view_state)
    app.state.templates = TemplateService(store)
    app.state.theme = ThemePreference(store)

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(dashboard.router)
    app.include_router(contacts.router)
    app.include_router(appointments.router)
    app.include_router(properties.router)
    app.include_router(preferences.router)
    logger.info(f"App created - Debug mode: {settings.debug}")

    return app


app = create_app()
