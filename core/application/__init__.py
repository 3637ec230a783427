"""Application layer - use cases driving the remote scheduling service."""

from .use_cases import CareFlowOptions, CareFlowResponse, CareFlowUseCase, ContextKeys

__all__ = [
    "CareFlowOptions",
    "CareFlowResponse",
    "CareFlowUseCase",
    "ContextKeys",
]
