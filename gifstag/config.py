"""Application configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Canvas
    DEFAULT_CANVAS_WIDTH: int = 800
    DEFAULT_CANVAS_HEIGHT: int = 800
    BACKGROUND_COLOR: str = "#000000"  # Behind transparent uploads

    # Timeline
    DEFAULT_FPS: float = 10.0
    DEFAULT_TRANSITION_FRAMES: int = 10
    DEFAULT_DURATION_SECONDS: int = 3
    MAX_DURATION_SECONDS: int = 10

    # Captions
    CAPTION_MARGIN: int = 20  # Pixels between last line and bottom edge
    LINE_HEIGHT: float = 1.2  # Multiple of the font size
    TEXT_MAX_WIDTH_RATIO: float = 0.9

    # Uploads
    COMPRESS_UPLOADS: bool = True
    MAX_UPLOAD_DIMENSION: int = 1920
    UPLOAD_JPEG_QUALITY: int = 80
    MAX_UPLOAD_BYTES: int = 25 * 1024 * 1024  # 25 MB per file

    # Export
    EXPORT_FILE_NAME: str = "animation.gif"
    WORKER_THREADS: int = 4

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    model_config = {"env_prefix": "GIFSTAG_"}


settings = Settings()
