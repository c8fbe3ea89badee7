from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
import structlog
from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from config import Settings, load_settings
from middleware import RequestLoggingMiddleware
from portfolio import DEFAULT_TAB, build_portfolio_view
from sim_client import SimClient
from utils.log import configure_logging

BASE_DIR = Path(__file__).resolve().parent

logger = structlog.get_logger(__name__)

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def create_app(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One shared HTTP client for every outbound Sim call
        async with SimClient.build_http_client(settings, transport=transport) as http:
            app.state.sim_client = SimClient(settings, http)
            logger.info("startup", sim_api_base_url=settings.sim_api_base_url)
            yield
        logger.info("shutdown")

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(RequestLoggingMiddleware)

    # Static files
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    # ---------- Route ----------

    @app.get("/", response_class=HTMLResponse)
    async def wallet_view(
        request: Request,
        walletAddress: str = Query(""),
        tab: str = Query(DEFAULT_TAB),
    ):
        view = await build_portfolio_view(request.app.state.sim_client, walletAddress, tab)
        return templates.TemplateResponse(request, "wallet.html", view.as_context())

    return app


# Load env vars; a missing SIM_API_KEY stops the process here
settings = load_settings()
configure_logging(settings.log_level)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3001)
