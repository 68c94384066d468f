"""
Testing helpers for restmachine-resources.

Provides an in-memory model to stand in for a real persistence layer and a
controller client that runs actions across requests:

    from restmachine_resources.testing import ControllerClient, MemoryModel
"""

from .dsl import ActionResult, ControllerClient
from .models import AbortDestroy, MemoryModel, before_destroy, before_save

__all__ = [
    "ActionResult",
    "ControllerClient",
    "MemoryModel",
    "AbortDestroy",
    "before_save",
    "before_destroy",
]
