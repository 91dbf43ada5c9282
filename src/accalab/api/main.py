"""CLI entrypoint to run the AccaLab FastAPI server."""

from __future__ import annotations

import logging
import os

import uvicorn

from accalab.config import get_settings


def main() -> None:
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("accalab.api.server:app", host="0.0.0.0", port=port, reload=False)


if __name__ == "__main__":  # pragma: no cover
    main()
