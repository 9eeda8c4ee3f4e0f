"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from tokenlens.config.settings import Settings, get_settings
from tokenlens.services.ave.service import AveMarketService

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_market_service(request: Request) -> AveMarketService:
    """Get the market service built at application startup."""
    service: AveMarketService = request.app.state.market_service
    return service


MarketServiceDep = Annotated[AveMarketService, Depends(get_market_service)]
