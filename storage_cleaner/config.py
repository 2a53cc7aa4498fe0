"""Application settings."""

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 8788
    debug: bool = False
    index_path: Path = Path.home() / ".storage-cleaner" / "index.db"
    storage_roots: list[Path] = [Path.home()]
    downloads_dirs: list[Path] = [Path.home() / "Downloads"]
    cache_dirs: list[Path] = [Path.home() / ".cache"]
    index_on_startup: bool = True

    batch_size: int = 300
    large_file_threshold: int = 50 * 1024 * 1024
    duplicate_min_size: int = 10 * 1024
    verify_duplicate_content: bool = False
    pacing_delay: float = 0.1  # seconds between categories, UI smoothing only
    max_walk_depth: int = 32

    model_config = {"env_prefix": "CLEANER_"}


settings = Settings()
