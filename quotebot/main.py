import argparse
import asyncio
import logging
from dataclasses import replace

from quotebot.bot import create_app
from quotebot.config import load_settings
from quotebot.exceptions import ConfigurationError
from quotebot.http_server import HTTPServer


async def main():
    """Main entry point for the async quotebot server."""
    parser = argparse.ArgumentParser()
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    parser.add_argument("--host", default=None, help="Overrides QUOTEBOT_HOST")
    parser.add_argument("--port", type=int, default=None, help="Overrides QUOTEBOT_PORT")
    parser.add_argument(
        "--debug", action="store_true", help="Enable the /dump/* debug route"
    )
    args = parser.parse_args()

    try:
        settings = load_settings(args.env_file)
    except ConfigurationError as e:
        parser.error(str(e))
    if args.debug:
        settings = replace(settings, debug=True)

    logging.basicConfig(level=settings.log_level)
    logger = logging.getLogger(__name__)

    http_server = HTTPServer(
        logger,
        host=args.host or settings.host,
        port=args.port or settings.port,
        handler=create_app(settings, logger=logger),
    )
    await http_server.start()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
