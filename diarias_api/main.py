"""FastAPI application entry point."""
from fastapi import Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import router as auth_router
from .database import init_models
from .dependencies import get_db_session, user_from_token
from .routers.employees import roster_documents
from .routers.employees import router as employees_router
from .websocket_manager import roster_feed

app = FastAPI(title="Diárias Roster Store", version="0.1.0")
app.include_router(auth_router)
app.include_router(employees_router)


@app.on_event("startup")
async def on_startup() -> None:
    """Ensure database tables exist."""

    await init_models()


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Simple readiness probe for uptime checks."""

    return {"status": "ok"}


@app.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    token: str,
    session: AsyncSession = Depends(get_db_session),
) -> None:
    """Authenticate a subscriber, send the current roster, then keep it open for pushes."""

    try:
        user = await user_from_token(token, session)
    except HTTPException:
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION,
            reason="Invalid or expired token",
        )
        return

    owner_id = user.id
    await roster_feed.subscribe(owner_id, websocket, await roster_documents(session, owner_id))
    try:
        while True:
            # Client pings only; snapshots flow server -> client
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await roster_feed.unsubscribe(owner_id, websocket)
