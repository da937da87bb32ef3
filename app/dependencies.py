"""FastAPI dependencies for route handlers."""

from fastapi import Depends, HTTPException, Request

from app.container import Services
from app.services.reporting import ReportingFacade


def get_services(request: Request) -> Services:
    """Services built by the application lifespan."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Service not initialised")
    return services


def get_reporting(services: Services = Depends(get_services)) -> ReportingFacade:
    return services.reporting
