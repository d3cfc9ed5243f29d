"""Database-backed metric collectors"""
from .base import BaseCollector, CollectionError
from .wordpress import WordPressCollector

__all__ = [
    'BaseCollector',
    'CollectionError',
    'WordPressCollector'
]
