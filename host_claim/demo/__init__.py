"""Demo collaborators for running the claim flow without a remote service."""

from .simulated import SimulatedCloud

__all__ = ["SimulatedCloud"]
