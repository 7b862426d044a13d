from .image_tool import ImageToolManager, GENERATE_IMAGE

__all__ = ['ImageToolManager', 'GENERATE_IMAGE']
