from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

try:
    from .config import get_log_level, get_port
    from .routes.family_tree import router as family_tree_router
except ImportError:  # pragma: no cover
    # Support running with CWD=treesvg (e.g., `python -m uvicorn main:app`).
    from config import get_log_level, get_port
    from routes.family_tree import router as family_tree_router

log = logging.getLogger(__name__)

app = FastAPI(title="Family Tree SVG API", version="0.1.0")
app.include_router(family_tree_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


def run() -> None:
    """Serve the API with uvicorn on ``PORT`` (default 3000)."""

    level = get_log_level()
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = get_port()
    log.info("Family Tree SVG API listening on port %d", port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level=level)


if __name__ == "__main__":  # pragma: no cover
    run()
