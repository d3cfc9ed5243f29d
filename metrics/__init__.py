"""Metric models, catalog and exposition"""
from .models import MetricDefinition, MetricQuery, MetricType, MetricValue

__all__ = [
    'MetricDefinition',
    'MetricQuery',
    'MetricType',
    'MetricValue'
]
