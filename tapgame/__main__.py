"""Entry point for Tapgame: python -m tapgame"""

import argparse
import logging

from textual.logging import TextualHandler

from tapgame.app import TapGameApp
from tapgame.config import load_settings
from tapgame.engine.variants import VARIANTS
from tapgame.notifier import TelegramNotifier


def configure_logging(level: str = "INFO") -> None:
    """Route log records to the textual devtools console instead of the screen."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[TextualHandler()],
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Tapgame — terminal clicker")
    parser.add_argument(
        "--variant",
        choices=sorted(VARIANTS),
        default="quest",
        help="Which game to play (default: quest)",
    )
    parser.add_argument("--env-file", default=None, help="Path to a .env file with bot settings")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args()

    configure_logging(args.log_level)
    notifier = TelegramNotifier(load_settings(args.env_file))
    if not notifier.enabled:
        logging.getLogger(__name__).info("Telegram bot not configured; notifications disabled")

    app = TapGameApp(variant_id=args.variant, notifier=notifier)
    app.run()


if __name__ == "__main__":
    main()
