from dataclasses import dataclass
from typing import Optional

from matchmaking.cache.redis_tier import RedisScoreStore
from matchmaking.cache.similarity_cache import SimilarityCache
from matchmaking.config_loader import AppConfig
from matchmaking.interfaces import ActorRepository, PersistenceSink
from matchmaking.profiles.store import InMemoryWeightProfileStore, load_weight_profiles
from matchmaking.scorer.engine import MatchEngine
from matchmaking.service import MatchService
from matchmaking.taxonomy.matrix import TaxonomyMatrixBuilder


@dataclass
class MatchContext:
    """Application context container that holds all wired dependencies.

    Storage collaborators (actor repository, persistence sink) are supplied
    by the caller; everything else is built from config.
    """
    config: AppConfig
    engine: MatchEngine
    profile_store: InMemoryWeightProfileStore
    service: MatchService
    cache: Optional[SimilarityCache] = None

    @classmethod
    def build(
        cls,
        config: AppConfig,
        repository: ActorRepository,
        sink: Optional[PersistenceSink] = None
    ) -> "MatchContext":
        """Build a MatchContext from config.

        Args:
            config: Loaded application configuration
            repository: Source of actor profiles
            sink: Optional receiver for computed matches

        Returns:
            Fully wired MatchContext instance
        """
        cache = cls._build_cache(config)
        engine = MatchEngine(config=config.engine, cache=cache)

        if config.profiles_file:
            profile_store = load_weight_profiles(config.profiles_file)
        else:
            profile_store = InMemoryWeightProfileStore()

        taxonomy_builder = TaxonomyMatrixBuilder(
            engine=engine,
            min_edge_score=config.taxonomy.min_edge_score,
            default_profile=profile_store.get(config.taxonomy.default_profile),
        )

        service = MatchService(
            repository=repository,
            profile_store=profile_store,
            engine=engine,
            sink=sink,
            taxonomy_builder=taxonomy_builder,
        )
        return cls(
            config=config,
            engine=engine,
            profile_store=profile_store,
            service=service,
            cache=cache,
        )

    @staticmethod
    def _build_cache(config: AppConfig) -> Optional[SimilarityCache]:
        """Build the similarity cache, with a Redis tier when a URL is configured."""
        if not config.cache.enabled:
            return None
        backend = None
        if config.cache.redis_url:
            backend = RedisScoreStore(
                redis_url=config.cache.redis_url,
                password=config.cache.redis_password,
                ttl_seconds=config.cache.ttl_seconds,
            )
        return SimilarityCache(max_entries=config.cache.max_entries, backend=backend)
