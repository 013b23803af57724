#!/usr/bin/env python3
"""
Unit tests for ActorProfile normalization and record parsing.
"""

import unittest
from datetime import date

from matchmaking.models import ActorProfile
from matchmaking.utils import FingerprintGenerator, clamp_score, normalize_labels


class TestActorProfile(unittest.TestCase):
    """Tests for ActorProfile construction."""

    def test_01_sets_are_normalized(self):
        actor = ActorProfile(id="a", industries=[" Gaming", "MOBILE", "", None], platforms="iOS, Android")
        self.assertEqual(actor.industries, frozenset({"gaming", "mobile"}))
        self.assertEqual(actor.platforms, frozenset({"ios", "android"}))

    def test_02_consent_defaults_to_false(self):
        actor = ActorProfile(id="a")
        self.assertFalse(actor.consent)

    def test_03_dates_and_numbers_parsed(self):
        actor = ActorProfile(id="a", founded="2019-03-15", revenue="2500000", employee_count=12)
        self.assertEqual(actor.founded, date(2019, 3, 15))
        self.assertEqual(actor.revenue, 2_500_000.0)
        self.assertEqual(actor.employee_count, 12.0)

    def test_04_unparseable_values_become_unknown(self):
        actor = ActorProfile(id="a", founded="not a date", revenue="lots")
        self.assertIsNone(actor.founded)
        self.assertIsNone(actor.revenue)

    def test_05_equal_content_is_equal(self):
        a = ActorProfile(id="a", industries=["gaming", "mobile"])
        b = ActorProfile(id="a", industries=["Mobile", "gaming"])
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))

    def test_06_text_joins_pitch_and_looking_for(self):
        actor = ActorProfile(id="a", pitch=" cozy games ", looking_for="publishers")
        self.assertEqual(actor.text, "cozy games publishers")
        self.assertEqual(ActorProfile(id="b").text, "")

    def test_07_fingerprint_tracks_only_named_fields(self):
        base = ActorProfile(id="a", industries=["gaming"], pitch="one")
        same_industries = ActorProfile(id="a", industries=["gaming"], pitch="two")
        other_industries = ActorProfile(id="a", industries=["fintech"], pitch="one")

        self.assertEqual(base.fingerprint(("industries",)), same_industries.fingerprint(("industries",)))
        self.assertNotEqual(base.fingerprint(("industries",)), other_industries.fingerprint(("industries",)))
        self.assertNotEqual(base.fingerprint(("pitch",)), same_industries.fingerprint(("pitch",)))
        self.assertEqual(len(base.fingerprint(("industries",))), 32)

    def test_08_consent_requires_explicit_yes(self):
        for value in (True, "true", "TRUE", " yes ", "1", 1):
            self.assertIs(ActorProfile(id="a", consent=value).consent, True, value)
        for value in (False, "false", "False", "0", "no", "", None, 0, 2, "maybe"):
            self.assertIs(ActorProfile(id="a", consent=value).consent, False, value)


class TestActorFromDict(unittest.TestCase):
    """Tests for ActorProfile.from_dict with loose repository records."""

    def test_01_nested_record(self):
        actor = ActorProfile.from_dict({
            'id': 42,
            'name': 'Pixel Forge',
            'type': 'developer',
            'consent': {'matchmaking': True},
            'numeric': {'revenue': 1e6, 'employee_count': '30'},
            'dates': {'founded': 'March 1, 2020'},
            'text': {'pitch': 'Cozy puzzle games', 'looking_for': 'Publishers'},
            'industry': ['Gaming'],
            'funding_stage': 'Seed',
        })
        self.assertEqual(actor.id, "42")
        self.assertEqual(actor.actor_type, "developer")
        self.assertTrue(actor.consent)
        self.assertEqual(actor.revenue, 1e6)
        self.assertEqual(actor.employee_count, 30.0)
        self.assertEqual(actor.founded, date(2020, 3, 1))
        self.assertEqual(actor.pitch, "Cozy puzzle games")
        self.assertEqual(actor.looking_for, "Publishers")
        self.assertEqual(actor.industries, frozenset({"gaming"}))
        self.assertEqual(actor.stage, "seed")

    def test_02_flat_record(self):
        actor = ActorProfile.from_dict({
            'id': 'b', 'consent': True, 'revenue': 500, 'founded': '2018-01-01',
            'capabilities': ['Publishing'], 'needs': ['Games'],
        })
        self.assertTrue(actor.consent)
        self.assertEqual(actor.revenue, 500.0)
        self.assertEqual(actor.capabilities, frozenset({"publishing"}))
        self.assertEqual(actor.needs, frozenset({"games"}))

    def test_03_missing_consent_is_opt_out(self):
        actor = ActorProfile.from_dict({'id': 'c'})
        self.assertFalse(actor.consent)

    def test_04_string_consent_values(self):
        self.assertFalse(ActorProfile.from_dict({'id': 'd', 'consent': "false"}).consent)
        self.assertFalse(ActorProfile.from_dict({'id': 'd', 'consent': "0"}).consent)
        self.assertFalse(ActorProfile.from_dict({'id': 'd', 'consent': {'matchmaking': "no"}}).consent)
        self.assertTrue(ActorProfile.from_dict({'id': 'e', 'consent': "Yes"}).consent)


class TestUtils(unittest.TestCase):
    """Tests for shared helpers."""

    def test_01_clamp_score(self):
        self.assertEqual(clamp_score(120.0), 100.0)
        self.assertEqual(clamp_score(-3.0), 0.0)
        self.assertEqual(clamp_score(float('nan')), 0.0)
        self.assertEqual(clamp_score(42.5), 42.5)

    def test_02_normalize_labels(self):
        self.assertEqual(normalize_labels(None), frozenset())
        self.assertEqual(normalize_labels("a, B ,"), frozenset({"a", "b"}))

    def test_03_fingerprint_stable_for_sets_and_dates(self):
        first = FingerprintGenerator.generate({'tags': {"b", "a"}, 'founded': date(2020, 1, 1)})
        second = FingerprintGenerator.generate({'founded': date(2020, 1, 1), 'tags': frozenset({"a", "b"})})
        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
