"""
Live sync port definitions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from src.core.ports.changes import ChangeChannelPort

if TYPE_CHECKING:
    from src.components.portfolio_view import PortfolioView


class ViewBuilderPort(Protocol):
    async def build_view(self) -> PortfolioView:
        ...


__all__ = ["ChangeChannelPort", "ViewBuilderPort"]
