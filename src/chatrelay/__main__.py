"""Entry point for the chat relay server."""

import argparse
import asyncio
import logging
import sys

from chatrelay.api.app import create_api, serve
from chatrelay.config import Config


def main():
    """Parse arguments, configure logging and run the server."""
    parser = argparse.ArgumentParser(
        description="Chat Relay — real-time chat over newline-delimited JSON",
    )
    parser.add_argument("--host", help="Interface to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument(
        "--keepalive",
        type=float,
        help="Seconds between keepalive frames on /listen",
    )
    args = parser.parse_args()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    logger = logging.getLogger(__name__)

    config = Config.from_args(host=args.host, port=args.port, keepalive=args.keepalive)

    errors = config.validate()
    if errors:
        for err in errors:
            logger.error(err)
        sys.exit(1)

    app = create_api(config)
    asyncio.run(serve(app, config))


if __name__ == "__main__":
    main()
