from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    posters_dir: Path = Path(os.getenv("POSTERS_DIR", "public/posters"))
    manifest_file: Path = Path(os.getenv("MANIFEST_FILE", "src/data/posters.json"))
    details_file: Path = Path(
        os.getenv("DETAILS_FILE", "src/data/poster-details.json")
    )

    # Upstream
    api_url: str = os.getenv("WIKI_API_URL", "https://onepiece.fandom.com/api.php")
    category: str = os.getenv("POSTER_CATEGORY", "Category:Bounty_Images")

    # Runtime
    http_timeout: int = int(os.getenv("HTTP_TIMEOUT", "30"))
    download_delay: float = float(os.getenv("DOWNLOAD_DELAY", "0.06"))
    enrich_delay: float = float(os.getenv("ENRICH_DELAY", "0.04"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    downloader_user_agent: str = os.getenv(
        "DOWNLOADER_USER_AGENT", "OnePiecePosterDownloader/1.0 (personal project)"
    )
    enricher_user_agent: str = os.getenv(
        "ENRICHER_USER_AGENT", "OnePiecePosterEnricher/1.1 (personal project)"
    )

    def ensure_dirs(self) -> None:
        self.posters_dir.mkdir(parents=True, exist_ok=True)
        self.manifest_file.parent.mkdir(parents=True, exist_ok=True)
        self.details_file.parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
