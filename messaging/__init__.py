"""
Message queue and progress communication module.

This module provides RabbitMQ consumer functionality and Redis progress publishing
for the deck generation service.
"""

from .redis import ProgressPublisher
from .rabbitmq import JobConsumer

__all__ = [
    'ProgressPublisher',
    'JobConsumer',
]
