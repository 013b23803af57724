#!/usr/bin/env python3
"""
Weight Profile Store - Loading, validation and persona templates.

Profiles are validated when they are loaded, never at scoring time:
build_profile() merges persona-template defaults into raw profile data and
converts pydantic validation errors into InvalidWeightProfile.

Supports:
- persona templates (general, investor, developer, publisher)
- YAML profile files
- export/import for backup and sharing
- duplication and A/B test variants
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import yaml
from pydantic import ValidationError

from matchmaking.exceptions import InvalidWeightProfile, WeightProfileNotFound
from matchmaking.interfaces import WeightProfileStore
from matchmaking.profiles.defaults import DEFAULT_CONTEXT_RULES, PERSONA_TEMPLATES
from matchmaking.profiles.models import WeightProfile

logger = logging.getLogger(__name__)

EXPORT_FORMAT_VERSION = "1.0"


def get_persona_template(persona: str) -> Dict[str, Any]:
    """Template for a persona, falling back to the general template."""
    for template in PERSONA_TEMPLATES:
        if template['persona'] == persona:
            return template
    return next(t for t in PERSONA_TEMPLATES if t['persona'] == 'general')


def _format_errors(error: ValidationError) -> List[str]:
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get('loc', ()))
        msg = err.get('msg', '')
        messages.append(f"{location}: {msg}" if location else msg)
    return messages


def build_profile(data: Dict[str, Any]) -> WeightProfile:
    """
    Build a validated WeightProfile from raw data.

    Missing weights, thresholds and context rules are filled from the persona
    template; explicitly given values win. Weights and context-rule tables are
    merged per key, so a profile can override one weight or platform boost
    without restating the rest; a weight of 0 drops a template signal.

    Raises:
        InvalidWeightProfile: if the merged profile fails validation
    """
    name = data.get('name')
    if not name:
        raise InvalidWeightProfile(name, ["Name is required"])

    persona = data.get('persona') or 'general'
    template = get_persona_template(persona)

    weights = {**template['weights'], **(data.get('weights') or {})}

    rules = data.get('context_rules') or {}
    context_rules = {
        key: {**copy.deepcopy(DEFAULT_CONTEXT_RULES[key]), **(rules.get(key) or {})}
        for key in DEFAULT_CONTEXT_RULES
    }

    merged = {
        'name': name,
        'persona': persona,
        'description': data.get('description') or template.get('description', ''),
        'weights': weights,
        'context_rules': context_rules,
        'thresholds': {**template.get('thresholds', {}), **(data.get('thresholds') or {})},
        'is_default': bool(data.get('is_default', False)),
    }

    try:
        return WeightProfile.model_validate(merged)
    except ValidationError as e:
        errors = _format_errors(e)
        logger.error(f"Rejected weight profile {name!r}: {errors}")
        raise InvalidWeightProfile(name, errors) from e


def default_profiles() -> List[WeightProfile]:
    """Build the built-in persona profiles."""
    return [build_profile({**template, 'is_default': True}) for template in PERSONA_TEMPLATES]


class InMemoryWeightProfileStore(WeightProfileStore):
    """
    Name-indexed store of validated profiles.

    Profiles are immutable down to their weight tables, so get() hands out
    shared instances.
    """

    def __init__(self, profiles: Optional[Iterable[WeightProfile]] = None, include_defaults: bool = True):
        self._profiles: Dict[str, WeightProfile] = {}
        if include_defaults:
            for profile in default_profiles():
                self._profiles[profile.name] = profile
        for profile in profiles or []:
            self.add(profile)

    def add(self, profile: WeightProfile) -> WeightProfile:
        if profile.name in self._profiles:
            logger.info(f"Replacing weight profile {profile.name!r}")
        self._profiles[profile.name] = profile
        return profile

    def get(self, name: str) -> WeightProfile:
        try:
            return self._profiles[name]
        except KeyError:
            raise WeightProfileNotFound(name) from None

    def list(self) -> List[WeightProfile]:
        # Defaults first, then by name
        return sorted(self._profiles.values(), key=lambda p: (not p.is_default, p.name))

    def remove(self, name: str) -> None:
        profile = self.get(name)
        if profile.is_default:
            raise ValueError(f"Cannot delete default weight profile {name!r}")
        del self._profiles[name]

    def default_for_persona(self, persona: str) -> WeightProfile:
        for profile in self.list():
            if profile.persona == persona and profile.is_default:
                return profile
        raise WeightProfileNotFound(f"default:{persona}")

    def duplicate(self, name: str, new_name: str) -> WeightProfile:
        original = self.get(name)
        copy_profile = original.with_weights(
            new_name, {}, description=f"Copy of {original.name}"
        )
        return self.add(copy_profile)

    def generate_variants(self, base_name: str, variations: List[Dict[str, Any]]) -> List[WeightProfile]:
        """
        Create A/B test variants of a profile.

        Each variation is {"name": str, "adjustments": {signal: weight}}.
        Variants are validated before any of them is stored.
        """
        base = self.get(base_name)
        variants = []
        for variation in variations:
            try:
                variant = base.with_weights(
                    f"{base.name} - {variation['name']}",
                    variation.get('adjustments') or {},
                    description=f"A/B test variant: {variation['name']}",
                )
            except ValidationError as e:
                raise InvalidWeightProfile(variation.get('name'), _format_errors(e)) from e
            variants.append(variant)
        for variant in variants:
            self.add(variant)
        return variants

    def export_profile(self, name: str) -> Dict[str, Any]:
        """Export format for backup/sharing."""
        profile = self.get(name)
        return {
            'version': EXPORT_FORMAT_VERSION,
            'exported_at': datetime.now(timezone.utc).isoformat(),
            'profile': profile.model_dump(exclude={'is_default'}),
        }

    def import_profile(self, import_data: Dict[str, Any]) -> WeightProfile:
        if not isinstance(import_data, dict) or not isinstance(import_data.get('profile'), dict):
            raise InvalidWeightProfile(None, ["Invalid import data format"])
        profile_data = dict(import_data['profile'])
        profile_data['is_default'] = False
        return self.add(build_profile(profile_data))


def load_weight_profiles(path: str, include_defaults: bool = True) -> InMemoryWeightProfileStore:
    """
    Load profiles from a YAML file into a store.

    The file holds a top-level `profiles` list; each entry is passed through
    build_profile(), so one invalid entry fails the whole load.
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    entries = data.get('profiles') or []
    profiles = [build_profile(entry) for entry in entries]
    logger.info(f"Loaded {len(profiles)} weight profiles from {path}")
    return InMemoryWeightProfileStore(profiles, include_defaults=include_defaults)
