"""Helper script to run the FundQuery backend locally."""

from __future__ import annotations

import os
from pathlib import Path

import uvicorn


def str_to_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def main() -> None:
    backend_dir = Path(__file__).resolve().parent

    host = os.getenv("BACKEND_HOST", "127.0.0.1")
    port = int(os.getenv("BACKEND_PORT", "8000"))
    reload = str_to_bool(os.getenv("BACKEND_RELOAD"), False)

    uvicorn.run(
        "fundquery.main:app",
        host=host,
        port=port,
        reload=reload,
        reload_dirs=[str(backend_dir / "fundquery")],
        app_dir=str(backend_dir),
    )


if __name__ == "__main__":
    main()
