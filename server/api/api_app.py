"""FastAPI application entry point for the document cache API."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
from server.api.routers.DocumentsRouter import documents_router
from shared.clients.api.ApiClientManager import ApiClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.stores.RootStore import RootStore

app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown."""
    app.state.logging = setup_logging()
    app.state.config = HelperConfig(logger=app.state.logging)

    # Initialise client
    api_client = ApiClientManager(helper_config=app.state.config).get_client()
    await api_client.boot()

    # Health check
    await api_client.do_healthcheck()

    # Wire up stores
    app.state.root_store = RootStore(helper_config=app.state.config, client=api_client)

    app.state.logging.info("Document cache API ready (%s).", api_client.get_engine_name(), color="green")
    yield

    # Shutdown
    await api_client.close()
    app.state.logging.info("Document cache API shut down.")


app = FastAPI(
    title="Document Cache",
    description="Cached, sorted and searchable views over the documents of a wiki backend.",
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(documents_router)


# Server Start
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("APP_PORT", "8000")))
