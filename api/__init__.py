"""
API client layer for the draft clock service

HTTP client for communicating with the league persistence API.
"""
from .client import APIClient, get_global_client, cleanup_global_client

__all__ = ['APIClient', 'get_global_client', 'cleanup_global_client']
