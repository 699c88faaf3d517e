import asyncio
import logging
import os
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server

from bug_tracker.adapters.inbound.mcp.tools import register_tools
from bug_tracker.configuration.container import build_container, clear_container


def setup_logging():
    """Logging to stderr and to a rotating log file."""
    log_dir = Path(os.getenv("LOG_DIR", Path(__file__).parent.parent / "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "bug-tracker.log"

    formatter = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # stdout carries the MCP protocol, so console logging goes to stderr
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    # 10MB per file, 5 backups
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return logging.getLogger(__name__)


async def main() -> None:
    logger = setup_logging()
    try:
        logger.info("=" * 60)
        logger.info("Bug tracker server starting")

        container = build_container()
        logger.info("✅ Container built")
        logger.info("Server name: %s", container.settings.server_name)
        logger.info("Environment: %s", container.settings.app_env)
        logger.info("Store backend: %s", container.settings.store_backend)
        logger.info("Data file: %s", container.settings.data_file)

        app = Server(container.settings.server_name)
        register_tools(app)
        logger.info("✅ MCP tools registered")
        logger.info("=" * 60)

        try:
            async with stdio_server() as (read_stream, write_stream):
                await app.run(read_stream, write_stream, app.create_initialization_options())
        finally:
            if container.settings.app_env == "local":
                clear_container()
            logger.info("Bug tracker server stopped")

    except Exception as e:
        logger.error("=" * 60)
        logger.error("Bug tracker server failed to start")
        logger.error("Error type: %s", type(e).__name__)
        logger.error("Error message: %s", str(e))
        logger.error("=" * 60)
        traceback.print_exc(file=sys.stderr)
        raise


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
