"""Expose constructed client wrappers."""

from .aws_sqs import SQSClient
from .carthooks import CarthooksClient

__all__ = [
    "CarthooksClient",
    "SQSClient",
]
