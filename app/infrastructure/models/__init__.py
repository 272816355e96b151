"""Infrastructure models and response wrappers.

Exports:
    APIResponse: Success response wrapper with success, message, data, alreadySent
    ErrorResponse: Error response with error, message, details
    InfrastructureModel: Base model configuration for infrastructure models
"""

from infrastructure.models.base import InfrastructureModel
from infrastructure.models.responses import APIResponse, ErrorResponse

__all__ = [
    "APIResponse",
    "ErrorResponse",
    "InfrastructureModel",
]
