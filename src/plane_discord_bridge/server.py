"""Server runner for the Plane to Discord bridge.

Usage:
    # Run from command line
    plane-bridge-server --host 0.0.0.0 --port 8080

    # Or programmatically
    from plane_discord_bridge.server import run_server
    run_server(port=8080)
"""

from __future__ import annotations

import logging

from plane_discord_bridge import __version__
from plane_discord_bridge.core.config import LOG_LEVELS, BridgeConfig, get_config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(log_level: str = "info") -> None:
    """Configure root logging for the process."""
    logging.basicConfig(level=getattr(logging, log_level.upper()), format=LOG_FORMAT)


def run_server(
    host: str | None = None,
    port: int | None = None,
    log_level: str | None = None,
    config: BridgeConfig | None = None,
) -> None:
    """Run the bridge with uvicorn.

    Args:
        host: Host to bind to. Defaults to WEB_HOST or 0.0.0.0.
        port: Port to bind to. Defaults to WEB_PORT or 8080.
        log_level: Log level. Defaults to LOG_LEVEL or info.
        config: Configuration to use. Defaults to the environment.

    Environment Variables:
        WORKSPACE_NAME: Workspace display name.
        WEBHOOK_SECRET: Shared secret for X-Plane-Signature (empty disables checks).
        DISCORD_WEBHOOK_URL: Discord incoming webhook URL.
        APP_URL: Plane application URL.
    """
    import uvicorn

    from plane_discord_bridge.api.server import create_app

    config = config or get_config()
    effective_host = host or config.host
    effective_port = port or config.port
    effective_log_level = log_level or config.log_level

    configure_logging(effective_log_level)
    logger.info(f"Server listening on {effective_host}:{effective_port}")

    app = create_app(config=config)
    uvicorn.run(app, host=effective_host, port=effective_port, log_level=effective_log_level)


def main() -> None:
    """Main entry point for the server CLI."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Run the Plane to Discord webhook bridge",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  WORKSPACE_NAME       Workspace display name (Workspace)
  WEBHOOK_SECRET       Shared secret for X-Plane-Signature (empty disables checks)
  DISCORD_WEBHOOK_URL  Discord incoming webhook URL
  APP_URL              Plane application URL (https://plane.so)
  WEB_HOST             Default host (0.0.0.0)
  WEB_PORT             Default port (8080)
  LOG_LEVEL            Default log level (info)
""",
    )
    parser.add_argument("--host", help="Host to bind to (default: WEB_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to bind to (default: WEB_PORT or 8080)")
    parser.add_argument("--log-level", choices=list(LOG_LEVELS), help="Log level (default: info)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args()
    run_server(host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
