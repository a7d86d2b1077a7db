"""Entry point for the web version: python -m tapgame.web"""

import argparse
import logging

from tapgame.config import load_settings
from tapgame.engine.variants import VARIANTS
from tapgame.notifier import TelegramNotifier
from tapgame.web.server import run_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Tapgame — Web Version")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    parser.add_argument("--variant", choices=sorted(VARIANTS), default="quest", help="Which game to serve")
    parser.add_argument("--env-file", default=None, help="Path to a .env file with bot settings")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    notifier = TelegramNotifier(load_settings(args.env_file))
    run_server(
        host=args.host,
        port=args.port,
        debug=args.debug,
        variant_id=args.variant,
        notifier=notifier,
    )


if __name__ == "__main__":
    main()
