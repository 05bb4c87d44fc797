"""
Entry point to run the CRM API.

    python run.py
"""

import uvicorn
from realty_crm.core.config import settings

if __name__ == "__main__":
    # Auto-reload only in development
    uvicorn.run(
        "realty_crm.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
