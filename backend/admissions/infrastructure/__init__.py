"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .http_client import get_http_client, HttpClient

__all__ = ['get_http_client', 'HttpClient']
