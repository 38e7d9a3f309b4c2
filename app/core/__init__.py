# Core package: settings and error taxonomy
from .config import settings

__all__ = ["settings"]
