from pathlib import Path

from pydantic_settings import BaseSettings

_DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "extra": "ignore",
        "env_prefix": "MOVELIST_",
        "case_sensitive": False,
    }

    # Catalog
    catalog_path: str = str(_DATA_DIR / "catalog.json")
    variants_path: str = str(_DATA_DIR / "variants.json")

    # Catalog matching thresholds
    token_overlap_ratio: float = 0.6
    suggestion_min_score: int = 3
    fuzzy_score_cutoff: float = 60.0
    fuzzy_candidate_limit: int = 5
    max_suggestions: int = 3
    max_results: int = 50

    # Content-extraction backend
    backend_url: str = "http://localhost:3001/api/scrape-item"
    backend_timeout: float = 10.0

    # Encyclopedic summary service
    encyclopedia_url: str = "https://en.wikipedia.org/w/api.php"
    encyclopedia_timeout: float = 8.0
    encyclopedia_max_terms: int = 4
    encyclopedia_min_summary: int = 50
    use_external_lookup: bool = True

    # Resolution
    max_text_length: int = 100
    min_confidence: float = 0.5

    # Lookup cache
    cache_max_entries: int = 1000
    cache_ttl_seconds: float = 0.0  # 0 disables expiry

    # Inventory
    inventory_path: str = ""  # empty keeps the inventory in memory

    # App
    environment: str = "development"
    log_level: str = "INFO"
    log_file: str = ""


settings = Settings()
