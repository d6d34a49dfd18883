from __future__ import annotations

import logging
import os
from dataclasses import dataclass


@dataclass
class Settings:
    # Corpus store
    movies_file: str = os.getenv("MOVIES_FILE", os.path.join("data", "movies.json"))

    # Vectorizer
    genre_weight: float = float(os.getenv("GENRE_WEIGHT", "1.2"))

    # Ranking
    top_n: int = int(os.getenv("TOP_N", "5"))

    # HTTP server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
