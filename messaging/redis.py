"""
Progress Publisher uses Redis for job updates
Publishes job status, streamed text chunks and results while jobs run
"""

import json
import os
import logging
from typing import Any, Dict, Optional

import redis

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = 'deckforge'

FAILURE_CODES = {
    400: 'INVALID_REQUEST',
    500: 'JOB_FAILED',
}


def channel_for(job_id: str) -> str:
    return f"{CHANNEL_PREFIX}:{job_id}"


class ProgressPublisher:
    """Publishes job progress updates to Redis"""

    def __init__(self, redis_url: Optional[str] = None, client=None):
        """
        Initialize Redis publisher

        Args:
            redis_url: Redis connection URL (defaults to env var REDIS_URL)
            client: Already connected client; skips connecting when given
        """
        self.redis_url = redis_url or os.getenv('REDIS_URL')
        self.redis_client = client

        if client is not None:
            return
        if not self.redis_url:
            logger.warning("REDIS_URL is not set, progress updates are disabled")
            return

        try:
            self.connect()
        except (redis.RedisError, ValueError) as e:
            # Progress updates are optional, jobs still run without Redis
            logger.error("Failed to connect to Redis: %s", e)

    def connect(self):
        """Establish Redis connection"""
        try:
            self.redis_client = redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=5
            )
            self.redis_client.ping()
            logger.info("Connected to Redis at %s", self.redis_url)
        except (redis.RedisError, ValueError) as e:
            logger.error("Redis connection failed: %s", e)
            self.redis_client = None
            raise

    def publish_status(self, job_id: str, status: str, message_data: Dict[str, Any]):
        """
        Publish status change to Redis

        Args:
            job_id: Unique job identifier
            status: Status (processing, chunk, completed, failed)
            message_data: Data associated with the status
        """
        if not self.redis_client:
            return

        payload = {
            "status": status,
            "message": message_data
        }

        try:
            self.redis_client.publish(channel_for(job_id), json.dumps(payload))
        except redis.RedisError as e:
            logger.error("Failed to publish status for job %s: %s", job_id, e)

    def start_job(self, job_id: str, action: Optional[str] = None):
        """Publish that the job has started."""
        self.publish_status(job_id, "processing", {"action": action, "details": "Job has started."})

    def publish_chunk(self, job_id: str, text: str):
        """Forward one raw chunk of streamed generation text"""
        self.publish_status(job_id, "chunk", {"text": text})

    def complete_job(self, job_id: str, status_code: int, envelope: Dict[str, Any]):
        """Mark job as completed with its response envelope"""
        self.publish_status(job_id, "completed", {"statusCode": status_code, **envelope})

    def fail_job(self, job_id: str, status_code: int, envelope: Dict[str, Any]):
        """Mark job as failed with its error envelope"""
        error_data = {
            "code": FAILURE_CODES.get(status_code, FAILURE_CODES[500]),
            "statusCode": status_code,
            **envelope
        }
        self.publish_status(job_id, "failed", error_data)

    def close(self):
        """Close Redis connection"""
        if self.redis_client:
            try:
                self.redis_client.close()
                logger.info("Redis connection closed")
            except redis.RedisError as e:
                logger.error("Error closing Redis connection: %s", e)
