# Image MCP - image generation tool server for MCP clients
# Copyright (C) 2025 brokechubb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

import argparse
import asyncio
import logging
import sys

import config
from ai.exceptions.image_api_exceptions import ConfigurationError
from tools.image_tool import ImageToolManager
from tools.mcp_image_server import MCPImageServer
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Command line overrides for the environment configuration"""
    parser = argparse.ArgumentParser(
        description="Image generation MCP server for OpenAI compatible APIs"
    )
    parser.add_argument("--api-key", default=config.OPENAI_API_KEY,
                        help="API key for the image endpoint (env: OPENAI_API_KEY)")
    parser.add_argument("--api-url", default=config.API_URL,
                        help="Image generation endpoint (env: API_URL)")
    parser.add_argument("--model", default=config.IMAGE_DEFAULT_MODEL,
                        help="Default model (env: IMAGE_DEFAULT_MODEL)")
    parser.add_argument("--response-mode", choices=config.RESPONSE_MODES,
                        default=config.IMAGE_RESPONSE_MODE,
                        help="inline JSON with optional save, or url only (env: IMAGE_RESPONSE_MODE)")
    parser.add_argument("--transport", choices=config.MCP_TRANSPORTS, default=config.MCP_TRANSPORT,
                        help="Serve over MCP stdio or HTTP (env: MCP_TRANSPORT)")
    parser.add_argument("--host", default=config.MCP_HTTP_HOST, help="HTTP host")
    parser.add_argument("--port", type=int, default=config.MCP_HTTP_PORT, help="HTTP port")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    setup_logging(args.log_level, log_to_file=config.LOG_TO_FILE, log_file_path=config.LOG_FILE_PATH)

    # argparse does not check environment defaults against choices
    if args.transport not in config.MCP_TRANSPORTS:
        logger.error(
            f"❌ Unknown transport '{args.transport}', expected one of {', '.join(config.MCP_TRANSPORTS)}"
        )
        sys.exit(1)

    try:
        tool_manager = ImageToolManager(
            api_key=args.api_key,
            api_url=args.api_url,
            default_model=args.model,
            response_mode=args.response_mode,
        )
    except ConfigurationError as e:
        logger.error(f"❌ {e.message}. Please check your .env file.")
        sys.exit(1)

    server = MCPImageServer(tool_manager)
    logger.info(
        f"🚀 Starting image MCP server ({args.transport}, {tool_manager.response_mode} mode, "
        f"endpoint {tool_manager.api.api_url})"
    )

    try:
        if args.transport == "http":
            asyncio.run(server.run_http(args.host, args.port))
        else:
            asyncio.run(server.run_stdio())
    except KeyboardInterrupt:
        logger.info("🛑 Server stopped by user")


if __name__ == "__main__":
    main()
