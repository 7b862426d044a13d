import logging
import os
import sys
from logging import Formatter, StreamHandler, getLogger
from logging.handlers import RotatingFileHandler
from logging import DEBUG, INFO, WARNING, ERROR, CRITICAL

class ColourFormatter(Formatter):
    """Custom formatter with colored output for different log levels."""

    LEVEL_COLOURS = [
        (DEBUG, "\x1b[40;1m"),
        (INFO, "\x1b[34;1m"),
        (WARNING, "\x1b[33;1m"),
        (ERROR, "\x1b[31m"),
        (CRITICAL, "\x1b[41m"),
    ]

    FORMATS = {
        level: Formatter(
            f"\x1b[30;1m%(asctime)s\x1b[0m {colour}%(levelname)-8s\x1b[0m "
            f"\x1b[35m%(name)s\x1b[0m %(message)s",
            "%H:%M:%S",
        )
        for level, colour in LEVEL_COLOURS
    }

    def format(self, record):
        formatter = self.FORMATS.get(record.levelno, self.FORMATS[DEBUG])
        return formatter.format(record)

class PlainFormatter(Formatter):
    """Formatter without colors, for files and process managers."""

    def __init__(self):
        super().__init__(
            "%(asctime)s %(levelname)-8s %(name)s %(message)s (%(filename)s:%(lineno)d)",
            "%Y-%m-%d %H:%M:%S"
        )

class SystemdFormatter(Formatter):
    """Formatter optimized for systemd journal output."""

    def __init__(self):
        super().__init__("%(levelname)s %(name)s %(message)s")

def _console_formatter(stream):
    is_pm2 = os.environ.get('PM2_HOME') is not None or os.environ.get('PM2_JSON_PROCESSING') is not None
    is_systemd = os.environ.get('JOURNAL_STREAM') is not None or os.environ.get('INVOCATION_ID') is not None

    if is_systemd:
        return SystemdFormatter()
    if is_pm2 or not hasattr(stream, "isatty") or not stream.isatty():
        return PlainFormatter()
    return ColourFormatter()

def setup_logging(level="INFO", log_to_file=False, log_file_path="logs/image_mcp.log", max_file_size=10*1024*1024, backup_count=5):
    """
    Set up logging for the server.

    Console output always goes to stderr: stdout carries MCP protocol
    messages when the stdio transport is used.

    Args:
        level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file (bool): Whether to log to a file in addition to stderr
        log_file_path (str): Path to the log file (if log_to_file is True)
        max_file_size (int): Maximum size of log file before rotation (default 10MB)
        backup_count (int): Number of backup files to keep

    Returns:
        logging.Logger: Configured root logger
    """
    console_handler = StreamHandler(sys.stderr)
    console_handler.setFormatter(_console_formatter(sys.stderr))
    handlers = [console_handler]

    if log_to_file:
        log_dir = os.path.dirname(log_file_path)
        try:
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)
            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=max_file_size,
                backupCount=backup_count
            )
            file_handler.setFormatter(PlainFormatter())
            handlers.append(file_handler)
        except OSError as e:
            # Keep serving with console logging only
            print(f"Warning: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        force=True
    )

    return logging.getLogger()

def get_logger(name=None):
    """
    Get a logger that inherits the root configuration.

    Args:
        name (str): Logger name (typically __name__ from the calling module)

    Returns:
        logging.Logger: Logger instance
    """
    return getLogger(name)
