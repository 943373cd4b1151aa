"""Presentation layer for Tasklist CalDAV Server."""

from .app import create_app

__all__ = ['create_app']
