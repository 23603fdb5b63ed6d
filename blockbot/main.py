import logging

from fastapi import FastAPI

from blockbot import __version__
from blockbot.api.routes import router
from blockbot.session import init_session

app = FastAPI(title="blockbot", version=__version__)
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    session = init_session()
    grid = session.ctx.settings.grid
    logger.info("blockbot ready: %dx%d grid, cell %dpx", grid.cols, grid.rows, grid.cell_size)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "blockbot", "version": __version__}
