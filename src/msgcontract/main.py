from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
import asyncio
import uvicorn

from msgcontract.bus import EventBus
from msgcontract.config import Settings
from msgcontract.errors import MessageValidationError, UnknownMessageError
from msgcontract.protocol import registry
from msgcontract.receiver import TypedReceiver
from msgcontract.sender import to_peer
from msgcontract.shapes import describe
from msgcontract.utils.logger_util import get_logger

settings = Settings.from_env()
logger = get_logger(__name__, settings.log_level_value)

app = FastAPI(title="msgcontract-host", version="0.1.0")
# per-connection outbound channels
bus = EventBus(default_maxsize=settings.channel_maxsize)
host_contract, peer_contract = registry.contracts
inbound = TypedReceiver(host_contract, extra=settings.extra_fields)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/contracts")
async def contracts():
    return {
        "to_host": {name: describe(shape) for name, shape in host_contract.items()},
        "to_peer": {name: describe(shape) for name, shape in peer_contract.items()},
    }


@app.websocket("/ws/{connection_id}")
async def ws_endpoint(websocket: WebSocket, connection_id: str):
    await websocket.accept()
    peer = to_peer(registry, bus.transport(connection_id, "to_peer"), extra=settings.extra_fields)

    # drain validated outbound frames to the socket
    async def _forwarder():
        q = bus.subscribe(connection_id, "to_peer")
        try:
            while True:
                item = await q.get()
                await websocket.send_json(jsonable_encoder(item))
        except asyncio.CancelledError:
            return

    forward_task = asyncio.create_task(_forwarder())

    try:
        while True:
            frame = await websocket.receive_json()
            try:
                msg = inbound.receive(frame)
            except UnknownMessageError as exc:
                peer.send("error", {"message": exc.message_name, "path": "", "reason": "unknown message for direction"})
                continue
            except MessageValidationError as exc:
                peer.send("error", {"message": exc.message_name, "path": exc.dotted_path, "reason": exc.reason})
                continue

            if msg.name == "join":
                name = str(msg.value["name"])
                peer.send("join", {"id": msg.value["id"], "name": name})
            elif msg.name == "leave":
                logger.info("peer %s left (connection %s)", msg.value["userId"], connection_id)
                break
    except WebSocketDisconnect:
        logger.info("ws disconnected (socket closed) for connection %s", connection_id)
    finally:
        forward_task.cancel()
        bus.drop_session(connection_id)
        logger.debug("cleaned up connection %s", connection_id)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
