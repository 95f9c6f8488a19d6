"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """GameVault application settings loaded from environment variables."""

    # Data paths
    data_dir: Path = Path("/data")
    db_path: Path = Path("/data/gamevault.db")
    catalog_path: Path = Path("/data/gamevault-games.json")

    # Catalog storage: sqlite | json | memory
    storage_backend: str = "sqlite"
    # Name of the slot holding the serialized record set
    storage_key: str = "gamevault-games"

    # CORS (comma-separated extra origins, in addition to localhost defaults)
    cors_origins: str = ""

    log_level: str = "INFO"

    model_config = {
        "env_prefix": "GAMEVAULT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton instance
settings = Settings()
