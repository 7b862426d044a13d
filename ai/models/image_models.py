"""Pydantic models for image generation requests and responses"""
from typing import List, Dict, Any, Optional, Union
from pydantic import BaseModel, ConfigDict

from config import (
    DEFAULT_HEIGHT,
    DEFAULT_N,
    DEFAULT_RESPONSE_FORMAT,
    DEFAULT_STEPS,
    DEFAULT_WIDTH,
    IMAGE_DEFAULT_MODEL,
)


class GenerationRequest(BaseModel):
    """Request body sent to the image generation endpoint"""
    prompt: str
    model: str = IMAGE_DEFAULT_MODEL
    # Numbers are forwarded as supplied; the endpoint owns range checks
    width: Union[int, float] = DEFAULT_WIDTH
    height: Union[int, float] = DEFAULT_HEIGHT
    steps: Union[int, float] = DEFAULT_STEPS
    n: Union[int, float] = DEFAULT_N
    response_format: str = DEFAULT_RESPONSE_FORMAT

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


class ImageData(BaseModel):
    """A single generated image entry; fields are passed through untyped"""
    model_config = ConfigDict(extra="allow")

    index: Any = None
    timings: Any = None
    b64_json: Any = None
    url: Any = None


class GenerationResult(BaseModel):
    """Response model for image generation; the body itself stays opaque"""
    model_config = ConfigDict(extra="allow")

    id: Any = None
    model: Any = None
    object: Any = None
    data: Optional[List[Any]] = None

    @classmethod
    def from_body(cls, body: Any) -> "GenerationResult":
        """Wrap a decoded response body; anything but an object has no images"""
        if not isinstance(body, dict):
            return cls()
        return cls.model_validate(body)

    def first_image(self) -> Optional[ImageData]:
        if not self.data or not isinstance(self.data[0], dict):
            return None
        return ImageData.model_validate(self.data[0])
