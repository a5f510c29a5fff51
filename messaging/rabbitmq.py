#!/usr/bin/env python3
# pylint: disable=too-many-instance-attributes
"""
RabbitMQ Consumer for deck jobs
Listens to the job queue and runs generate and export jobs
"""

import base64
import json
import time
import logging
import traceback
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import pika
from pika.exceptions import AMQPConnectionError, AMQPError

from deckforge.ai_adapter import OutlineGenerator, LLMConfig
from deckforge.config import Settings
from deckforge.errors import ValidationError
from deckforge.service import (
    handle_generate, handle_export, build_generator, failure,
    OK, BAD_REQUEST, SERVER_ERROR
)
from .redis import ProgressPublisher


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

RECONNECT_DELAY_SECONDS = 5
ACTIONS = ('generate', 'export')


class JobConsumer:
    """Handles RabbitMQ message consumption and dispatches deck jobs"""

    def __init__(self, settings: Optional[Settings] = None,
                 progress_publisher: Optional[ProgressPublisher] = None,
                 outline_generator: Optional[OutlineGenerator] = None):
        self.settings = settings or Settings.from_env()
        self.connection = None
        self.channel = None
        self.queue_name = self.settings.queue_name

        self.rabbitmq_url = self.settings.rabbitmq_url

        if not self.rabbitmq_url:
            raise ValueError("RABBITMQ_URL environment variable is not set")

        self.shared_dir = Path(self.settings.shared_dir)

        self.shared_dir.mkdir(parents=True, exist_ok=True)

        self.progress_publisher = progress_publisher or ProgressPublisher(self.settings.redis_url)

        self.outline_generator = outline_generator or OutlineGenerator(
            LLMConfig.from_settings(self.settings)
        )

        logger.info("Consumer initialized with queue: %s", self.queue_name)
        logger.info("Shared directory: %s", self.shared_dir)

    def connect(self):
        """Establish connection to RabbitMQ"""
        try:
            logger.info("Connecting to RabbitMQ: %s", self.rabbitmq_url)

            parameters = pika.URLParameters(self.rabbitmq_url)
            parameters.heartbeat = 600
            parameters.blocked_connection_timeout = 300

            self.connection = pika.BlockingConnection(parameters)
            self.channel = self.connection.channel()

            self.channel.queue_declare(queue=self.queue_name, durable=True)

            # Process one message at a time
            self.channel.basic_qos(prefetch_count=1)

            logger.info("Successfully connected to RabbitMQ")
            return True

        except AMQPConnectionError as e:
            logger.error("Failed to connect to RabbitMQ: %s", e)
            return False
        except AMQPError as e:
            logger.error("Unexpected error during connection: %s", e)
            return False

    @staticmethod
    def decode_message(body: bytes) -> Dict[str, Any]:
        """Parse a job message; raises ValueError for anything but a JSON object"""
        message = json.loads(body)
        if not isinstance(message, dict):
            raise ValueError("Job message must be a JSON object")
        return message

    def write_output(self, output_file: str, encoded: str) -> Path:
        """Write an exported deck below the shared directory"""
        root = self.shared_dir.resolve()
        output_path = (root / output_file).resolve()
        if root not in output_path.parents:
            raise ValidationError(
                "Output file must stay inside the shared directory",
                [{'field': 'outputFile', 'message': f'invalid path: {output_file}'}]
            )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(base64.b64decode(encoded))
        logger.info("Output saved to: %s", output_path)
        return output_path

    def handle_job(self, job_id: str, message: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """
        Run one job and return its ``(status, envelope)``

        Expected message format:
        {
            "id": "unique-job-id",
            "action": "generate" | "export",
            "payload": {...},              # request body of the action
            "stream": false,               # generate only: publish text chunks
            "outputFile": "deck.pptx"      # export only, optional, relative to shared dir
        }
        """
        action = message.get('action')
        payload = message.get('payload')

        if action == 'generate':
            on_chunk = None
            if message.get('stream'):
                def on_chunk(chunk: str):
                    self.progress_publisher.publish_chunk(job_id, chunk)
            return handle_generate(payload, self.outline_generator, on_chunk)

        if action == 'export':
            status, envelope = handle_export(payload, build_generator(self.settings))
            output_file = message.get('outputFile')
            if status == OK and output_file:
                try:
                    self.write_output(output_file, envelope['data']['base64'])
                except ValidationError as e:
                    return BAD_REQUEST, failure(e.message, e.details)
                envelope['data']['outputFile'] = output_file
            return status, envelope

        return BAD_REQUEST, failure(
            f"Unknown action: {action}",
            [{'field': 'action', 'message': f"expected one of: {', '.join(ACTIONS)}"}]
        )

    def process_message(self, ch, method, properties, body):  # pylint: disable=unused-argument
        """Process a job message and publish its outcome"""
        job_id = 'unknown'
        try:
            message = self.decode_message(body)
        except ValueError as e:
            logger.error("Invalid JSON in message: %s", e)
            self.progress_publisher.fail_job(job_id, BAD_REQUEST,
                                             failure("Invalid message format", str(e)))
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
            return

        job_id = str(message.get('id') or 'unknown')
        try:
            logger.info("Processing job %s (%s)", job_id, message.get('action'))
            self.progress_publisher.start_job(job_id, message.get('action'))

            status, envelope = self.handle_job(job_id, message)

            if envelope['success']:
                self.progress_publisher.complete_job(job_id, status, envelope)
                logger.info("Successfully completed job %s", job_id)
            else:
                self.progress_publisher.fail_job(job_id, status, envelope)
                logger.warning("Job %s failed with status %d: %s",
                               job_id, status, envelope['error'])

            ch.basic_ack(delivery_tag=method.delivery_tag)

        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error processing job %s: %s", job_id, e)
            logger.error(traceback.format_exc())

            self.progress_publisher.fail_job(job_id, SERVER_ERROR, failure("Job failed", str(e)))

            # Transport or filesystem trouble, likely temporary
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=True)

    def start_consuming(self):
        """Start consuming messages from the queue"""
        try:
            self.channel.basic_consume(
                queue=self.queue_name,
                on_message_callback=self.process_message,
                auto_ack=False
            )

            logger.info("Starting to consume from %s", self.queue_name)
            logger.info("Waiting for messages. To exit press CTRL+C")

            self.channel.start_consuming()

        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            self.stop_consuming()
        except AMQPError as e:
            logger.error("Error during consumption: %s", e)
            self.stop_consuming()

    def stop_consuming(self):
        """Gracefully stop consuming and close connections"""
        logger.info("Stopping consumer...")

        if self.progress_publisher:
            self.progress_publisher.close()

        if self.channel and not self.channel.is_closed:
            try:
                self.channel.stop_consuming()
                self.channel.close()
            except AMQPError as e:
                logger.error("Error closing channel: %s", e)

        if self.connection and not self.connection.is_closed:
            try:
                self.connection.close()
            except AMQPError as e:
                logger.error("Error closing connection: %s", e)

        logger.info("Consumer stopped")

    def run(self):
        """Main run loop with automatic reconnection"""
        while True:
            try:
                if self.connect():
                    self.start_consuming()
                else:
                    logger.error("Failed to connect, retrying in %d seconds...",
                                 RECONNECT_DELAY_SECONDS)
                    time.sleep(RECONNECT_DELAY_SECONDS)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error("Unexpected error in run loop: %s", e)
                logger.error(traceback.format_exc())
                time.sleep(RECONNECT_DELAY_SECONDS)
