"""Cache Module - Raw signal outcome caching with an optional Redis tier."""
from matchmaking.cache.similarity_cache import SimilarityCache, CacheKey
from matchmaking.cache.redis_tier import RedisScoreStore

__all__ = ['SimilarityCache', 'CacheKey', 'RedisScoreStore']
