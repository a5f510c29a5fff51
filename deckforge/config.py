"""
Runtime settings read from the environment.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class Settings:
    """Environment-driven configuration for the worker and the generator"""
    rabbitmq_url: Optional[str] = None
    redis_url: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 4096
    queue_name: str = "deckforge_jobs"
    shared_dir: Path = Path("/app/shared")
    image_cache_dir: str = ".image_cache"
    visual_style: str = "decorated"
    allow_remote_images: bool = False

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from environment variables, keeping defaults for unset ones"""
        return cls(
            rabbitmq_url=os.getenv('RABBITMQ_URL'),
            redis_url=os.getenv('REDIS_URL'),
            anthropic_api_key=os.getenv('ANTHROPIC_API_KEY'),
            model=os.getenv('DECKFORGE_MODEL', cls.model),
            max_tokens=int(os.getenv('DECKFORGE_MAX_TOKENS', str(cls.max_tokens))),
            queue_name=os.getenv('DECKFORGE_QUEUE', cls.queue_name),
            shared_dir=Path(os.getenv('DECKFORGE_SHARED_DIR', str(cls.shared_dir))),
            image_cache_dir=os.getenv('DECKFORGE_IMAGE_CACHE', cls.image_cache_dir),
            visual_style=os.getenv('DECKFORGE_VISUAL_STYLE', cls.visual_style),
            allow_remote_images=os.getenv('DECKFORGE_ALLOW_REMOTE_IMAGES', '').lower()
            in ('1', 'true', 'yes'),
        )
