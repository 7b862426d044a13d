"""Custom exceptions for the image generation API"""
from typing import Optional


class ImageAPIError(Exception):
    """Base exception for image generation API errors"""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class APIError(ImageAPIError):
    """Exception for a structured rejection returned by the downstream API"""
    pass


class ConfigurationError(ImageAPIError):
    """Exception for missing or invalid startup configuration"""
    pass
