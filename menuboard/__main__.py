"""
Run the Menuboard API.

    python -m menuboard --port 8000 --reload
"""

import argparse
import os

from .app_factory import run


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Menuboard API")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    run(host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
