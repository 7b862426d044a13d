#!/usr/bin/env python3
"""
Tests for the server entry point
"""

import os
import sys
import unittest
from unittest.mock import MagicMock, patch

# Add the project root to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import main


class TestMain(unittest.TestCase):
    """Test cases for startup and argument handling"""

    def test_parse_args_overrides(self):
        args = main.parse_args([
            "--api-key", "sk-cli",
            "--api-url", "http://localhost:8080/v1/images/generations",
            "--model", "stabilityai/sdxl",
            "--response-mode", "url",
            "--transport", "http",
            "--port", "9200",
        ])
        self.assertEqual(args.api_key, "sk-cli")
        self.assertEqual(args.api_url, "http://localhost:8080/v1/images/generations")
        self.assertEqual(args.model, "stabilityai/sdxl")
        self.assertEqual(args.response_mode, "url")
        self.assertEqual(args.transport, "http")
        self.assertEqual(args.port, 9200)

    @patch("tools.image_tool.OPENAI_API_KEY", None)
    @patch("main.setup_logging")
    def test_missing_api_key_exits(self, mock_logging):
        with patch("main.MCPImageServer") as mock_server:
            with self.assertRaises(SystemExit) as ctx:
                main.main(["--api-key", ""])

        self.assertEqual(ctx.exception.code, 1)
        mock_server.assert_not_called()

    @patch("main.config.MCP_TRANSPORT", "sse")
    @patch("main.setup_logging")
    def test_unknown_transport_from_environment_exits(self, mock_logging):
        with patch("main.MCPImageServer") as mock_server, patch("main.asyncio.run") as mock_run:
            with self.assertRaises(SystemExit) as ctx:
                main.main(["--api-key", "sk-cli"])

        self.assertEqual(ctx.exception.code, 1)
        mock_server.assert_not_called()
        mock_run.assert_not_called()

    @patch("main.setup_logging")
    @patch("main.asyncio.run")
    @patch("main.MCPImageServer")
    def test_http_transport_selected(self, mock_server_cls, mock_run, mock_logging):
        server = MagicMock()
        mock_server_cls.return_value = server

        main.main(["--api-key", "sk-cli", "--transport", "http", "--host", "0.0.0.0", "--port", "9200"])

        server.run_http.assert_called_once_with("0.0.0.0", 9200)
        server.run_stdio.assert_not_called()
        mock_run.assert_called_once_with(server.run_http.return_value)

    @patch("main.setup_logging")
    @patch("main.asyncio.run")
    @patch("main.MCPImageServer")
    def test_stdio_transport_selected(self, mock_server_cls, mock_run, mock_logging):
        server = MagicMock()
        mock_server_cls.return_value = server

        main.main(["--api-key", "sk-cli", "--transport", "stdio"])

        server.run_stdio.assert_called_once_with()
        tool_manager = mock_server_cls.call_args.args[0]
        self.assertEqual(tool_manager.api.api_key, "sk-cli")


if __name__ == '__main__':
    unittest.main()
