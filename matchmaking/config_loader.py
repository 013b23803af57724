import yaml
import os
from typing import Optional
from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """
    Configuration for the MatchEngine.

    Tunable constants for the signal calculators plus the concurrency and
    budget limits used by the all-pairs operations.
    """
    # Signal tuning
    date_decay_days: float = 730.0  # tau in 100 * exp(-days / tau)
    min_text_tokens: int = Field(default=3, ge=1)  # documents below this are treated as absent

    # Explanations: a reason is emitted when a signal's weighted contribution
    # is at least this fraction of the final score
    explanation_threshold: float = 0.10

    # Context multiplier bounds
    min_context_multiplier: float = 0.1
    max_context_multiplier: float = 3.0

    # Per-pair computation budget; None disables the budget
    pair_budget_ms: Optional[float] = 50.0

    # Batching for find_matches / score_all_pairs
    max_workers: int = Field(default=8, ge=1)
    batch_size: int = Field(default=64, ge=1)


class CacheConfig(BaseModel):
    """Configuration for the SimilarityCache and its optional Redis tier."""
    enabled: bool = True
    max_entries: int = 100_000
    redis_url: Optional[str] = None  # None = in-process cache only
    redis_password: Optional[str] = None
    ttl_seconds: int = 7 * 24 * 60 * 60


class TaxonomyConfig(BaseModel):
    """Configuration for the TaxonomyMatrixBuilder graph output."""
    min_edge_score: float = 40.0  # edges below this score are dropped
    default_profile: str = "general"


class AppConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    taxonomy: TaxonomyConfig = Field(default_factory=TaxonomyConfig)

    # YAML file with additional weight profiles (see profiles.store)
    profiles_file: Optional[str] = None


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from root), try the repo root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for Redis URL
    env_redis_url = os.environ.get("MATCHMAKING_REDIS_URL")
    if env_redis_url:
        if 'cache' not in data or data['cache'] is None:
            data['cache'] = {}
        data['cache']['redis_url'] = env_redis_url

    # Allow env var override for worker cap
    env_max_workers = os.environ.get("MATCHMAKING_MAX_WORKERS")
    if env_max_workers:
        if 'engine' not in data or data['engine'] is None:
            data['engine'] = {}
        data['engine']['max_workers'] = int(env_max_workers)

    # Allow env var override for per-pair budget
    env_budget = os.environ.get("MATCHMAKING_PAIR_BUDGET_MS")
    if env_budget:
        if 'engine' not in data or data['engine'] is None:
            data['engine'] = {}
        data['engine']['pair_budget_ms'] = float(env_budget)

    env_profiles_file = os.environ.get("MATCHMAKING_PROFILES_FILE")
    if env_profiles_file:
        data['profiles_file'] = env_profiles_file
    elif data.get('profiles_file') and not os.path.isabs(data['profiles_file']):
        # Relative profile paths in the YAML are relative to the config file
        data['profiles_file'] = os.path.join(
            os.path.dirname(os.path.abspath(config_path)), data['profiles_file']
        )

    return AppConfig(**data)
