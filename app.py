"""FastAPI bootstrap wiring an in-memory engine registry."""
from typing import Optional

from fastapi import FastAPI

from yieldstate import __version__
from yieldstate.registry import EngineRegistry
from yieldstate.api import markets_api


def create_app(registry: Optional[EngineRegistry] = None) -> FastAPI:
    app = FastAPI(title="yieldstate Market API", version=__version__)

    # Snapshot producers feed this registry via registry.process_snapshot
    registry = registry if registry is not None else EngineRegistry()
    markets_api.attach_to_app(app, registry)

    return app


app = create_app()
