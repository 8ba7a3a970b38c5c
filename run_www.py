#!/usr/bin/env python3
from __future__ import annotations

import logging
import os
import sys

from ribbit.settings_store import load_settings


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.environ.get("RIBBIT_HOST") or "127.0.0.1"
    port = int(os.environ.get("RIBBIT_PORT") or "8000")
    try:
        import uvicorn
    except ImportError:
        print("uvicorn is missing. Install with: pip install -e .", file=sys.stderr)
        raise
    uvicorn.run("ribbitweb.server:app", host=host, port=port)


if __name__ == "__main__":
    main()
