"""Tests for the image generation API client"""
import os
import sys
import unittest
from unittest.mock import MagicMock, patch

import requests

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ai.exceptions.image_api_exceptions import APIError, ConfigurationError, ImageAPIError
from ai.image_api import ImageGenerationAPI
from ai.models.image_models import GenerationRequest, GenerationResult
from config import DEFAULT_API_URL


class TestImageGenerationAPI(unittest.TestCase):
    """Test cases for ImageGenerationAPI"""

    def setUp(self):
        self.api = ImageGenerationAPI("secret-key", "https://images.example.com/v1/images/generations")
        self.request = GenerationRequest(prompt="a lighthouse at dusk", model="test/model")

    def _response(self, body, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = body
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Server Error", response=response
            )
        return response

    def test_requires_api_key(self):
        for key in (None, ""):
            with self.assertRaises(ConfigurationError):
                ImageGenerationAPI(key)

    @patch("ai.image_api.API_URL", DEFAULT_API_URL)
    def test_default_endpoint(self):
        api = ImageGenerationAPI("secret-key")
        self.assertEqual(api.api_url, "https://api.openai.com/v1/images/generations")

    @patch("ai.image_api.requests.post")
    def test_posts_json_with_bearer_token(self, mock_post):
        mock_post.return_value = self._response({"id": "gen-1", "object": "list", "data": []})

        result = self.api.generate_image(self.request)

        self.assertEqual(result, {"id": "gen-1", "object": "list", "data": []})
        mock_post.assert_called_once_with(
            "https://images.example.com/v1/images/generations",
            headers={
                "Authorization": "Bearer secret-key",
                "Content-Type": "application/json",
            },
            json=self.request.to_payload(),
        )

    @patch("ai.image_api.requests.post")
    def test_no_client_side_timeout(self, mock_post):
        mock_post.return_value = self._response({"data": []})
        self.api.generate_image(self.request)
        self.assertNotIn("timeout", mock_post.call_args.kwargs)

    @patch("ai.image_api.requests.post")
    def test_http_error_raises_api_error(self, mock_post):
        mock_post.return_value = self._response({"message": "model not found"}, status_code=404)

        with self.assertRaises(APIError) as ctx:
            self.api.generate_image(self.request)

        self.assertEqual(ctx.exception.message, "model not found")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertIsInstance(ctx.exception, ImageAPIError)
        mock_post.assert_called_once()

    @patch("ai.image_api.requests.post")
    def test_timeout_propagates(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout("read timed out")
        with self.assertRaises(requests.exceptions.Timeout):
            self.api.generate_image(self.request)
        mock_post.assert_called_once()


class TestImageModels(unittest.TestCase):
    """Test cases for the request and response models"""

    def test_request_payload_fields(self):
        payload = GenerationRequest(prompt="a cat", model="m", width=512).to_payload()
        self.assertEqual(
            set(payload), {"prompt", "model", "width", "height", "steps", "n", "response_format"}
        )
        self.assertEqual(payload["width"], 512)
        self.assertIsInstance(payload["width"], int)

    def test_result_keeps_unknown_fields(self):
        result = GenerationResult.model_validate({
            "id": "gen-1",
            "model": "m",
            "object": "list",
            "created": 1700000000,
            "data": [{"index": 0, "url": "https://x/y.png", "revised_prompt": "a cat"}],
        })
        image = result.first_image()
        self.assertEqual(image.url, "https://x/y.png")
        self.assertIsNone(image.b64_json)

    def test_result_without_images(self):
        self.assertIsNone(GenerationResult.model_validate({"object": "list"}).first_image())

    def test_result_from_non_object_body(self):
        self.assertIsNone(GenerationResult.from_body(["not", "an", "object"]).first_image())
        self.assertIsNone(GenerationResult.from_body({"data": None}).first_image())

    def test_loose_field_types(self):
        result = GenerationResult.from_body({"id": 7, "data": [{"index": "0", "timings": None, "url": "https://x/y.png"}]})
        self.assertEqual(result.id, 7)
        self.assertEqual(result.first_image().index, "0")


if __name__ == '__main__':
    unittest.main()
