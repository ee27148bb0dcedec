"""Application entry point for Clarity backend server."""

from clarity.app import App
from clarity.config import Config
from clarity.logging import setup_logging
from clarity.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
