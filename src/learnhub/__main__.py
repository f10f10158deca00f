"""Punto de entrada principal."""

import logging
import sys


def main() -> int:
    """Ejecutar aplicación."""
    from .config import get_config
    from .tui.app import LearnHubApp

    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return LearnHubApp().run()


if __name__ == "__main__":
    sys.exit(main())
