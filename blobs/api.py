"""FastAPI service streaming blob outline paths."""
from __future__ import annotations

import argparse
import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict, replace
from typing import Annotated, Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field
from starlette.websockets import WebSocketState

from . import metrics
from .config import DEFAULT_CONFIG, MAX_VERTICES, SceneConfig
from .logging_config import setup_logging
from .presets import get_preset, list_presets
from .scene import Scene

logger = logging.getLogger(__name__)

# ============================================================================
# Pydantic Models
# ============================================================================

class ConfigUpdate(BaseModel):
    """Update scene parameters."""
    n_blobs: Optional[int] = Field(default=None, ge=0, le=200)
    vertex_step: Optional[int] = Field(default=None, ge=0, le=100)
    vertex_counts: Optional[List[Annotated[int, Field(ge=0, le=MAX_VERTICES)]]] = Field(default=None, max_length=200)
    radius: Optional[float] = Field(default=None, ge=0.0)
    tick_interval: Optional[float] = Field(default=None, gt=0.0, le=1.0)


# ============================================================================
# FastAPI App with Lifespan
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the blob tick tasks and the broadcaster, cancel both on shutdown."""
    global _broadcast_task, _state_lock
    logger.info("Startup: starting scene and broadcast task")
    _state_lock = asyncio.Lock()
    _scene.start()
    _broadcast_task = asyncio.create_task(_broadcast_loop())

    yield

    logger.info("Shutdown: stopping scene and broadcast task")
    if _broadcast_task:
        _broadcast_task.cancel()
        try:
            await _broadcast_task
        except asyncio.CancelledError:
            pass
        _broadcast_task = None
    await _scene.stop()

app = FastAPI(title="Blob Rings", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global state
_config = DEFAULT_CONFIG
_scene = Scene(_config)
_state_lock = asyncio.Lock()
_websocket_clients: set = set()
_broadcast_task = None


# ============================================================================
# Background Broadcast Task
# ============================================================================

async def _state_message() -> Dict[str, Any]:
    async with _state_lock:
        blobs = await _scene.snapshot_async()
        return {
            "type": "state",
            "payload": {
                "width": _scene.config.width,
                "height": _scene.config.height,
                "blobs": blobs,
            },
        }


async def _broadcast_loop():
    """Send the latest paths to every connected client each frame."""
    logger.info("Broadcast task started")
    frame = 0
    while True:
        await asyncio.sleep(_scene.config.frame_interval)
        if not _websocket_clients:
            continue

        message = await _state_message()
        frame += 1
        dead_clients = set()
        for client in list(_websocket_clients):
            try:
                if client.client_state == WebSocketState.CONNECTED:
                    await client.send_json(message)
                else:
                    dead_clients.add(client)
            except Exception as e:
                logger.warning("Error sending to client: %s: %s", type(e).__name__, e)
                dead_clients.add(client)

        if dead_clients:
            logger.info("Removing %d dead clients", len(dead_clients))
        _websocket_clients.difference_update(dead_clients)

        if frame % 100 == 0:
            logger.debug("Frame %d sent to %d clients", frame, len(_websocket_clients))


# ============================================================================
# Helper Functions
# ============================================================================

def _update_config(config_update: ConfigUpdate) -> SceneConfig:
    """Create new config with updates applied."""
    changes = {k: v for k, v in config_update.model_dump().items() if v is not None}
    if "vertex_counts" not in changes and ("n_blobs" in changes or "vertex_step" in changes):
        changes["vertex_counts"] = None
    return replace(_config, **changes)


async def _replace_scene(config: SceneConfig) -> None:
    """Stop the current scene and start a fresh one built from `config`."""
    global _config, _scene
    await _scene.stop()
    _config = config
    _scene = Scene(_config)
    _scene.start()


def _config_payload() -> Dict[str, Any]:
    return {
        "config": _scene.config.as_dict(),
        "params": asdict(_scene.params),
        "canvas_center": list(_scene.config.canvas_center),
    }


# ============================================================================
# REST Endpoints
# ============================================================================

@app.get("/health")
async def health() -> Dict[str, str]:
    """Health check."""
    return {"status": "ok"}


@app.get("/config")
async def get_config() -> Dict[str, Any]:
    """Get current scene configuration and force constants."""
    async with _state_lock:
        return _config_payload()


@app.post("/config")
async def update_config(config_update: ConfigUpdate) -> Dict[str, Any]:
    """Update configuration and rebuild the scene."""
    async with _state_lock:
        try:
            new_config = _update_config(config_update)
        except (TypeError, ValueError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        await _replace_scene(new_config)
        return _config_payload()


@app.post("/reset")
async def reset_scene() -> Dict[str, str]:
    """Reset every blob to its initial ring."""
    async with _state_lock:
        await _scene.stop()
        _scene.reset()
        _scene.start()
        return {"status": "reset"}


@app.get("/presets")
async def get_presets() -> List[Dict[str, Any]]:
    """List available presets."""
    return [
        {
            "name": p.name,
            "description": p.description,
            "vertex_counts": p.config.blob_vertex_counts(),
        }
        for p in list_presets()
    ]


@app.post("/presets/{name}")
async def apply_preset(name: str) -> Dict[str, Any]:
    """Apply a preset scene."""
    async with _state_lock:
        try:
            preset = get_preset(name)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))
        await _replace_scene(preset.config)
        return {"preset": preset.name, **_config_payload()}


@app.get("/blobs")
async def get_blobs() -> List[Dict[str, Any]]:
    """Latest outline path and style of every blob."""
    async with _state_lock:
        return await _scene.snapshot_async()


@app.get("/blobs/{index}")
async def get_blob(index: int) -> Dict[str, Any]:
    """One blob with ring diagnostics."""
    async with _state_lock:
        try:
            entry = _scene.entry(index)
        except IndexError as e:
            raise HTTPException(status_code=404, detail=str(e))
        async with entry.lock:
            return {**entry.to_dict(), "metrics": metrics.summary(entry.ring)}


@app.get("/scene.svg")
async def scene_svg() -> Response:
    """Whole scene as an SVG document."""
    async with _state_lock:
        return Response(content=_scene.to_svg(), media_type="image/svg+xml")


# ============================================================================
# WebSocket
# ============================================================================

async def _handle_message(message: Any) -> None:
    """Handle client commands."""
    if not isinstance(message, dict):
        raise ValueError(f"Message must be a JSON object, got {type(message).__name__}")
    msg_type = message.get("type")

    if msg_type == "reset":
        await _scene.stop()
        _scene.reset()
        _scene.start()

    elif msg_type == "use_preset":
        name = message.get("name")
        if name is None:
            raise ValueError("Message missing 'name'")
        if not isinstance(name, str):
            raise ValueError(f"Preset name must be a string, got {name!r}")
        await _replace_scene(get_preset(name).config)

    else:
        raise ValueError(f"Unknown message type {msg_type!r}")


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """WebSocket endpoint - clients subscribe to outline updates."""
    await websocket.accept()
    await websocket.send_json(await _state_message())
    _websocket_clients.add(websocket)
    logger.info("Client connected, total clients: %d", len(_websocket_clients))

    try:
        while True:
            try:
                # JSONDecodeError is a ValueError
                message = await websocket.receive_json()
                async with _state_lock:
                    await _handle_message(message)
            except ValueError as exc:
                await websocket.send_json({"type": "error", "detail": str(exc)})
    except WebSocketDisconnect as e:
        logger.info("WebSocket disconnected: %s", e.code)
    finally:
        _websocket_clients.discard(websocket)
        logger.info("Client removed, remaining clients: %d", len(_websocket_clients))


# ============================================================================
# Entry point
# ============================================================================

def main() -> None:
    parser = argparse.ArgumentParser(description="Blob ring animation server")
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", type=str, default=None)
    args = parser.parse_args()

    setup_logging(args.log_level, args.log_file)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
