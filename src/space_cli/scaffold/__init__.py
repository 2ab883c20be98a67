"""Project scaffolding for new nodes."""
from .project import PROJECT_FILES, create_project

__all__ = ["PROJECT_FILES", "create_project"]
