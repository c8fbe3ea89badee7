import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import structlog

from balances import total_usd_value
from sim_client import SimClient
from utils.formatting import format_usd

logger = structlog.get_logger(__name__)

DEFAULT_TAB = "tokens"
FETCH_ERROR_MESSAGE = "Failed to fetch wallet data. Please try again."


@dataclass(frozen=True)
class PortfolioView:
    """Everything wallet.html needs for one render."""

    wallet_address: str = ""
    current_tab: str = DEFAULT_TAB
    total_wallet_usd_value: str = field(default_factory=lambda: format_usd(0.0))
    tokens: Tuple[Dict[str, Any], ...] = ()
    activities: Tuple[Dict[str, Any], ...] = ()
    collectibles: Tuple[Dict[str, Any], ...] = ()
    error_message: Optional[str] = None
    # resources whose upstream call failed, e.g. ("activity",)
    unavailable: Tuple[str, ...] = ()

    def as_context(self) -> Dict[str, Any]:
        return {
            "walletAddress": self.wallet_address,
            "currentTab": self.current_tab,
            "totalWalletUSDValue": self.total_wallet_usd_value,
            "tokens": list(self.tokens),
            "activities": list(self.activities),
            "collectibles": list(self.collectibles),
            "errorMessage": self.error_message,
            "unavailable": list(self.unavailable),
        }


async def build_portfolio_view(
    client: SimClient,
    wallet_address: str,
    tab: str = DEFAULT_TAB,
) -> PortfolioView:
    wallet_address = (wallet_address or "").strip()
    tab = tab or DEFAULT_TAB

    if not wallet_address:
        return PortfolioView(current_tab=tab)

    try:
        # Fetch balances, activities, and collectibles concurrently;
        # each fetch swallows its own upstream failures
        balances, activity, collectibles = await asyncio.gather(
            client.fetch_balances(wallet_address),
            client.fetch_activity(wallet_address),
            client.fetch_collectibles(wallet_address),
        )
        total_value = total_usd_value(balances.items)
    except Exception:
        logger.exception("portfolio_view_failed", wallet_address=wallet_address)
        return PortfolioView(
            wallet_address=wallet_address,
            current_tab=tab,
            error_message=FETCH_ERROR_MESSAGE,
        )

    unavailable = tuple(
        name
        for name, result in (
            ("balances", balances),
            ("activity", activity),
            ("collectibles", collectibles),
        )
        if result.failed
    )

    logger.info(
        "portfolio_view_built",
        wallet_address=wallet_address,
        tokens=len(balances.items),
        activities=len(activity.items),
        collectibles=len(collectibles.items),
        unavailable=unavailable,
    )

    return PortfolioView(
        wallet_address=wallet_address,
        current_tab=tab,
        total_wallet_usd_value=format_usd(total_value),
        tokens=balances.items,
        activities=activity.items,
        collectibles=collectibles.items,
        unavailable=unavailable,
    )
