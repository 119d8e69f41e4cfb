"""Celery tasks and the engines they drive."""
