"""Application use cases."""
from .care_flow import (
    CareFlowOptions,
    CareFlowResponse,
    CareFlowUseCase,
    ContextKeys,
)

__all__ = [
    "CareFlowOptions",
    "CareFlowResponse",
    "CareFlowUseCase",
    "ContextKeys",
]
