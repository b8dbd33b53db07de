"""Celery tasks for scheduled idea generation."""

from .celery_app import celery_app

__all__ = ["celery_app"]
