"""
Invoice Generator API.

Mounts the invoices router under /api/v1. The users service behind the
subscriber lookup is configured through repositories.client.
"""

from fastapi import FastAPI

from api import __version__
from api.routers import invoices

app = FastAPI(
    title="Invoice Generator API",
    description="Generates telephone line invoices from call records",
    version=__version__,
)

app.include_router(invoices.router, prefix="/api/v1", tags=["Invoices"])


@app.get("/health", tags=["Health"])
def health_check():
    """Liveness check. Does not contact the users service."""
    return {"status": "healthy", "version": __version__, "service": "invoice-generator-api"}
