import base64
import json
import os
from typing import Any, Dict, List, Optional

from ai.exceptions.image_api_exceptions import APIError, ConfigurationError
from ai.image_api import ImageGenerationAPI
from ai.models.image_models import GenerationRequest, GenerationResult
from config import (
    API_URL,
    DEFAULT_HEIGHT,
    DEFAULT_N,
    DEFAULT_RESPONSE_FORMAT,
    DEFAULT_STEPS,
    DEFAULT_WIDTH,
    IMAGE_DEFAULT_MODEL,
    IMAGE_RESPONSE_MODE,
    MAX_DIMENSION,
    MAX_IMAGES,
    MAX_STEPS,
    MIN_DIMENSION,
    MIN_IMAGES,
    MIN_STEPS,
    OPENAI_API_KEY,
    RESPONSE_MODE_URL,
    RESPONSE_MODES,
)
from utils.error_handler import ErrorCode, ToolError
from utils.logging_config import get_logger

logger = get_logger(__name__)

GENERATE_IMAGE = "generate_image"

# Caller fields overlaid on the defaults, in payload order
OVERRIDABLE_FIELDS = ("model", "width", "height", "steps", "n", "response_format")


def _text_result(text: str, is_error: bool = False) -> Dict[str, Any]:
    result = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


class ImageToolManager:
    """Catalog and invocation handler for the generate_image tool"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        default_model: Optional[str] = None,
        response_mode: Optional[str] = None,
    ):
        self.response_mode = (response_mode or IMAGE_RESPONSE_MODE).lower()
        if self.response_mode not in RESPONSE_MODES:
            raise ConfigurationError(
                f"Unknown response mode '{self.response_mode}', expected one of {', '.join(RESPONSE_MODES)}"
            )

        self.api = ImageGenerationAPI(api_key or OPENAI_API_KEY, api_url or API_URL)
        self.default_model = default_model or IMAGE_DEFAULT_MODEL

        # Single fixed table; add entries here if more tools are exposed
        self.tools = {GENERATE_IMAGE: self.generate_image}

    @property
    def url_mode(self) -> bool:
        return self.response_mode == RESPONSE_MODE_URL

    def defaults(self) -> Dict[str, Any]:
        """Configured values used for every field the caller leaves out"""
        return {
            "model": self.default_model,
            "width": DEFAULT_WIDTH,
            "height": DEFAULT_HEIGHT,
            "steps": DEFAULT_STEPS,
            "n": DEFAULT_N,
            "response_format": "url" if self.url_mode else DEFAULT_RESPONSE_FORMAT,
        }

    def _input_schema(self) -> Dict[str, Any]:
        properties = {
            "prompt": {
                "type": "string",
                "description": "Text prompt for image generation",
            },
            "model": {
                "type": "string",
                "description": f"Model to use for generation (default: {self.default_model})",
            },
            "width": {
                "type": "number",
                "description": f"Image width (default: {DEFAULT_WIDTH})",
                "minimum": MIN_DIMENSION,
                "maximum": MAX_DIMENSION,
            },
            "height": {
                "type": "number",
                "description": f"Image height (default: {DEFAULT_HEIGHT})",
                "minimum": MIN_DIMENSION,
                "maximum": MAX_DIMENSION,
            },
            "steps": {
                "type": "number",
                "description": f"Number of inference steps (default: {DEFAULT_STEPS})",
                "minimum": MIN_STEPS,
                "maximum": MAX_STEPS,
            },
            "n": {
                "type": "number",
                "description": f"Number of images to generate (default: {DEFAULT_N})",
                "minimum": MIN_IMAGES,
                "maximum": MAX_IMAGES,
            },
        }

        if not self.url_mode:
            properties["response_format"] = {
                "type": "string",
                "description": f"Response format (default: {DEFAULT_RESPONSE_FORMAT})",
                "enum": ["b64_json", "url"],
            }
            properties["image_path"] = {
                "type": "string",
                "description": "Optional path to save the generated image as PNG",
            }

        return {
            "type": "object",
            "properties": properties,
            "required": ["prompt"],
        }

    def get_available_tools(self) -> List[Dict[str, Any]]:
        """Return the tool manifest in MCP tools/list format"""
        if self.url_mode:
            description = (
                "Generate an image using an OpenAI compatible API. Returns the image URL; "
                "show it to the user as a markdown image, e.g. ![prompt](url)"
            )
        else:
            description = (
                "Generate an image using an OpenAI compatible API. Returns the JSON result; "
                "pass image_path to save the image to disk, or response_format 'url' "
                "to get a link that can be shown as a markdown image"
            )

        return [
            {
                "name": GENERATE_IMAGE,
                "description": description,
                "inputSchema": self._input_schema(),
            }
        ]

    def execute_tool(self, tool_name: str, arguments: Any) -> Dict[str, Any]:
        """
        Run a tool by name.

        Returns a result dictionary with text content blocks, flagged with
        ``isError`` when the downstream API rejected the request. Raises
        ToolError for unknown tools, bad arguments and local failures.
        """
        tool_func = self.tools.get(tool_name)
        if tool_func is None:
            raise ToolError(f"Unknown tool: {tool_name}", ErrorCode.METHOD_NOT_FOUND)

        return tool_func(arguments)

    def _validate_arguments(self, arguments: Any) -> Dict[str, Any]:
        if not isinstance(arguments, dict):
            raise ToolError("Invalid arguments provided", ErrorCode.INVALID_PARAMS)

        if not isinstance(arguments.get("prompt"), str):
            raise ToolError(
                "Prompt is required and must be a string", ErrorCode.INVALID_PARAMS
            )

        properties = self._input_schema()["properties"]
        for field in OVERRIDABLE_FIELDS + ("image_path",):
            value = arguments.get(field)
            # Falsy values are treated as absent and never validated
            if not value or field not in properties:
                continue

            schema = properties[field]
            if schema["type"] == "number":
                valid = isinstance(value, (int, float)) and not isinstance(value, bool)
            else:
                valid = isinstance(value, str)
            if valid and "enum" in schema:
                valid = value in schema["enum"]

            if not valid:
                expected = " or ".join(schema["enum"]) if "enum" in schema else f"a {schema['type']}"
                raise ToolError(
                    f"Invalid value for '{field}': expected {expected}",
                    ErrorCode.INVALID_PARAMS,
                )

        return arguments

    def build_request(self, arguments: Dict[str, Any]) -> GenerationRequest:
        """Overlay the truthy caller fields on the configured defaults"""
        fields = self.defaults()
        for field in OVERRIDABLE_FIELDS:
            if arguments.get(field):
                fields[field] = arguments[field]

        if self.url_mode:
            fields["response_format"] = "url"

        return GenerationRequest(prompt=arguments["prompt"], **fields)

    def generate_image(self, arguments: Any) -> Dict[str, Any]:
        """Validate, call the image API once and shape the result"""
        arguments = self._validate_arguments(arguments)
        request = self.build_request(arguments)

        logger.info(
            f"Generating {request.n} image(s) with {request.model} "
            f"at {request.width}x{request.height}"
        )

        try:
            data = self.api.generate_image(request)
        except APIError as e:
            return _text_result(f"API Error: {e.message}", is_error=True)

        if self.url_mode:
            return self._url_result(data)

        pretty = json.dumps(data, indent=2, ensure_ascii=False)
        image_path = arguments.get("image_path")
        if image_path:
            image = GenerationResult.from_body(data).first_image()
            if image is not None and isinstance(image.b64_json, str) and image.b64_json:
                output_path = self.save_image(image.b64_json, image_path)
                return _text_result(
                    f"Image saved successfully to: {output_path}\n\n{pretty}"
                )

        return _text_result(pretty)

    def _url_result(self, data: Any) -> Dict[str, Any]:
        image = GenerationResult.from_body(data).first_image()
        if image is None or not isinstance(image.url, str) or not image.url:
            raise ToolError(
                "Response did not contain an image URL", ErrorCode.INTERNAL_ERROR
            )
        return _text_result(image.url)

    def save_image(self, b64_data: str, image_path: str) -> str:
        """
        Decode base64 image data and write it to ``image_path``.

        The parent directory must already exist. A failed write may leave a
        partial file behind.

        Returns:
            The absolute path that was written
        """
        output_path = os.path.abspath(image_path)
        try:
            image_bytes = base64.b64decode(b64_data)
            with open(output_path, "wb") as f:
                f.write(image_bytes)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save image to {output_path}: {e}")
            raise ToolError(f"Failed to save image: {e}", ErrorCode.INTERNAL_ERROR) from e

        logger.info(f"Saved {len(image_bytes)} bytes to {output_path}")
        return output_path
