"""Context Module - Post-averaging multipliers from platform, market and stage rules."""
from matchmaking.context.rules import ContextRuleEngine, ContextAdjustment

__all__ = ['ContextRuleEngine', 'ContextAdjustment']
