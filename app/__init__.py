"""Video analysis application package.

This package contains FastAPI routes, services, and schemas for a REST
front-end to a hosted multimodal model. Subpackages include:
- api: FastAPI route definitions, dependencies and error mapping
- core: configuration, logging and the error taxonomy
- services: media normalization, the model client and the analysis service
- schemas: Pydantic request/response models
- resources: videos bundled with the application
"""

__all__ = [
    "api",
    "core",
    "services",
    "schemas",
]

__version__ = "1.0.0"
