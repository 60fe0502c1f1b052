#!/usr/bin/env python3
"""
Startup script for the ordering bot.

Usage:
    # Run on the configured PORT (default 3000)
    python run_bot.py

    # Run with custom port
    python run_bot.py --port 8001

    # Run with reload for development
    python run_bot.py --reload

    # Print the menu and exit
    python run_bot.py --menu
"""

import argparse

from bites_bot import config
from bites_bot.app_factory import run_server
from bites_bot.formatting import format_full_menu
from bites_bot.logging_config import setup_logging
from bites_bot.menu import build_default_catalog


def main():
    parser = argparse.ArgumentParser(
        description="Run the WhatsApp restaurant ordering bot"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        help=f"Port to run on (default: {config.PORT})",
    )
    parser.add_argument(
        "--reload",
        "-r",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    parser.add_argument(
        "--menu",
        "-m",
        action="store_true",
        help="Print the menu and exit",
    )

    args = parser.parse_args()

    if args.menu:
        print(format_full_menu(build_default_catalog()))
        return

    setup_logging(args.log_level)

    print(f"\n{'=' * 50}")
    print(f"Starting: {config.RESTAURANT_NAME}")
    print(f"Port:     {args.port or config.PORT}")
    print(f"Webhook:  {config.BASE_URL}/webhook")
    print(f"Orders:   {config.BASE_URL}/orders")
    print(f"{'=' * 50}\n")

    run_server(host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
