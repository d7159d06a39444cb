"""HTTP surface of the curation dashboard."""

from .app import create_app
from .tasks import BackgroundTasks

__all__ = ["BackgroundTasks", "create_app"]
