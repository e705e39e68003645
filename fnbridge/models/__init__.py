from .context import InputContext
from .events import InvocationEvent, InvocationResult

__all__ = ["InputContext", "InvocationEvent", "InvocationResult"]
