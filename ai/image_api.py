from typing import Any, Dict, Optional

import requests

from ai.exceptions.image_api_exceptions import APIError, ConfigurationError
from ai.models.image_models import GenerationRequest
from config import API_URL
from utils.error_handler import extract_api_error_message
from utils.logging_config import get_logger

logger = get_logger(__name__)


class ImageGenerationAPI:
    """Client for an OpenAI compatible image generation endpoint"""

    def __init__(self, api_key: Optional[str], api_url: Optional[str] = None):
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is required")

        self.api_key = api_key
        self.api_url = api_url or API_URL

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def generate_image(self, request: GenerationRequest) -> Dict[str, Any]:
        """
        Send one generation request and return the decoded JSON body.

        A single attempt is made with no timeout of its own. An HTTP error
        response is raised as APIError carrying the downstream message;
        connection failures and undecodable bodies propagate unchanged.
        """
        payload = request.to_payload()
        logger.debug(
            f"POST {self.api_url} model={payload['model']} "
            f"size={payload['width']}x{payload['height']} n={payload['n']}"
        )

        response = requests.post(self.api_url, headers=self._headers(), json=payload)

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            message = extract_api_error_message(e.response, str(e))
            logger.warning(f"Image API returned {response.status_code}: {message}")
            raise APIError(message, status_code=response.status_code) from e

        return response.json()
