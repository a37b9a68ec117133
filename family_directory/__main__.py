"""Entry point for running the family directory server as a module.

Usage:
    python -m family_directory --store-file /path/to/family.json
    family-directory --store-file /path/to/family.json
"""

import argparse
import logging
import os


def main():
    """Main entry point for the family directory MCP server."""
    parser = argparse.ArgumentParser(
        description="Family Directory MCP Server - family address book and tree via MCP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  family-directory --store-file ~/family.json
  family-directory -f ~/family.json --log-level DEBUG

Environment variables:
  FAMILY_STORE_FILE     JSON snapshot of members and relations (default: in-memory only)
  PHOENIX_ENABLED       Set to 'true' to send traces to Arize Phoenix
""",
    )
    parser.add_argument(
        "--store-file",
        "-f",
        metavar="PATH",
        help="JSON snapshot file for the store (or set FAMILY_STORE_FILE env var)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level)

    # CLI args override env vars
    if args.store_file:
        os.environ["FAMILY_STORE_FILE"] = args.store_file

    # Import and initialize AFTER setting env vars
    from . import initialize, mcp

    initialize()
    mcp.run()


if __name__ == "__main__":
    main()
