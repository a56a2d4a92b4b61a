"""Models of MongoDB Atlas custom resources, their specifications and status."""

__version__ = "0.5.0"

__all__ = ["cluster", "common", "project", "provider", "status"]