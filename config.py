import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Image Generation API Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
DEFAULT_API_URL = "https://api.openai.com/v1/images/generations"
API_URL = os.getenv("API_URL") or DEFAULT_API_URL
IMAGE_DEFAULT_MODEL = os.getenv(
    "IMAGE_DEFAULT_MODEL", "black-forest-labs/FLUX.1-schnell-Free"
)

# Response shaping: "inline" returns the JSON result (optionally saving the
# image to disk), "url" returns only the first image URL
RESPONSE_MODE_INLINE = "inline"
RESPONSE_MODE_URL = "url"
RESPONSE_MODES = (RESPONSE_MODE_INLINE, RESPONSE_MODE_URL)
IMAGE_RESPONSE_MODE = os.getenv("IMAGE_RESPONSE_MODE", RESPONSE_MODE_INLINE).lower()

# Generation defaults, overlaid by caller-supplied arguments
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768
DEFAULT_STEPS = 1
DEFAULT_N = 1
DEFAULT_RESPONSE_FORMAT = "b64_json"

# Advertised argument bounds (not enforced locally)
MIN_DIMENSION = 128
MAX_DIMENSION = 2048
MIN_STEPS = 1
MAX_STEPS = 100
MIN_IMAGES = 1
MAX_IMAGES = 4

# MCP Server Configuration
MCP_SERVER_NAME = "openai-image-generator"
MCP_SERVER_VERSION = "0.1.8"
MCP_TRANSPORTS = ("stdio", "http")
MCP_TRANSPORT = os.getenv("MCP_TRANSPORT", "stdio").lower()
MCP_HTTP_HOST = os.getenv("MCP_HTTP_HOST", "localhost")
MCP_HTTP_PORT = int(os.getenv("MCP_HTTP_PORT", "8501"))

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "logs/image_mcp.log")
