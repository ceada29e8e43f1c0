"""Runtime configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Process-wide settings, overridable through ``PIXELSTRETCH_*`` variables."""

    # Limits
    MAX_IMAGE_PIXELS: int = 64_000_000  # Largest accepted W*H

    # Rendering
    RENDER_WORKERS: int = 1  # Row shards for mapping and grain, 1 = single pass
    CANVAS_SWATCH_SIZE: int = 256  # Edge length of the canvas texture swatch

    # Export / CLI
    EXPORT_FILENAME: str = "pixel-stretch-art.png"
    LOG_LEVEL: str = "WARNING"

    model_config = {"env_prefix": "PIXELSTRETCH_"}


settings = Settings()
