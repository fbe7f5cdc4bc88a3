import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from src.api.deps import get_live_sync, get_repository, get_view_builder
from src.api.schemas import ContactRequest
from src.components.contact import ContactSubmission, submit_contact_message
from src.components.live_sync import LiveSyncController
from src.components.portfolio_view import PortfolioView, ViewBuilder
from src.domain.schema import CONTACT_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter()


def _snapshot_message(view: PortfolioView) -> dict[str, Any]:
    return {"type": "snapshot", "seq": view.seq, "view": view.to_dict()}


@router.get("/view")
async def get_public_view(
    live: LiveSyncController = Depends(get_live_sync),
    builder: ViewBuilder = Depends(get_view_builder),
) -> dict[str, Any]:
    """Aggregated portfolio with derived stats.

    Served from the live snapshot when one exists; otherwise built on demand,
    so a failed build surfaces as 503 and can be retried.
    """
    view = live.snapshot if live.running else None
    if view is None:
        view = await builder.build_view()
    return view.to_dict()


@router.websocket("/view/live")
async def public_view_live(websocket: WebSocket) -> None:
    """Push a fresh snapshot every time the portfolio changes."""
    live = get_live_sync()
    await websocket.accept()

    updates: asyncio.Queue[PortfolioView] = asyncio.Queue()
    remove_listener = live.add_listener(updates.put_nowait)
    receive = asyncio.ensure_future(websocket.receive_text())
    try:
        current = live.snapshot or await live.refresh()
        if current is None:
            await websocket.send_json(
                {"type": "error", "error": str(live.error) if live.error else "unavailable"}
            )
        else:
            await websocket.send_json(_snapshot_message(current))

        while True:
            update = asyncio.ensure_future(updates.get())
            done, _ = await asyncio.wait(
                {receive, update}, return_when=asyncio.FIRST_COMPLETED
            )
            if update in done:
                await websocket.send_json(_snapshot_message(update.result()))
            else:
                update.cancel()
            if receive in done:
                # Raises WebSocketDisconnect once the client goes away
                receive.result()
                receive = asyncio.ensure_future(websocket.receive_text())
    except WebSocketDisconnect:
        logger.debug("Live view client disconnected")
    finally:
        remove_listener()
        receive.cancel()


@router.post("/contact", status_code=status.HTTP_201_CREATED)
def submit_contact(body: ContactRequest) -> dict[str, str]:
    """Anonymous, write-only contact form."""
    submit_contact_message(
        ContactSubmission.from_dict(body.model_dump()),
        get_repository(CONTACT_MESSAGE.table),
    )
    return {"status": "received"}
