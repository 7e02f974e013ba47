"""
Tests for the tone guide heuristics.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from pickup_engine.models import CoverType, InsulationType, MagnetType, PolePieceMaterial
from pickup_engine.tone import eddy_q_factor, soft_clamp, tone_descriptor, tone_ratings


class TestSoftClamp:

    def test_center_unchanged(self):
        assert soft_clamp(5.0, 1, 9) == pytest.approx(5.0)

    def test_never_reaches_bounds(self):
        assert 8.9 < soft_clamp(100.0, 1, 9) < 9.0
        assert 1.0 < soft_clamp(-100.0, 1, 9) < 1.1

    def test_monotonic(self):
        assert soft_clamp(6.0, 1, 9) < soft_clamp(7.0, 1, 9)


class TestRatings:

    def test_within_scale(self):
        ratings = tone_ratings(5000, 3)
        for value in (ratings.bass, ratings.low_mid, ratings.high_mid, ratings.treble):
            assert 1 < value < 9

    def test_brighter_resonance_more_treble(self):
        dark = tone_ratings(2500, 3)
        bright = tone_ratings(8000, 3)
        assert bright.treble > dark.treble
        assert bright.bass < dark.bass

    def test_metal_cover_darkens(self):
        open_coil = tone_ratings(5000, 3, cover=CoverType.NONE)
        chrome = tone_ratings(5000, 3, cover=CoverType.CHROME)
        assert chrome.treble < open_coil.treble

    def test_alnico2_warmer_than_ceramic(self):
        assert tone_ratings(5000, 3, MagnetType.ALNICO2).bass > tone_ratings(5000, 3, MagnetType.FERRITE).bass

    def test_eddy_losses(self):
        assert eddy_q_factor() == 1.0
        assert eddy_q_factor(PolePieceMaterial.STEEL, CoverType.CHROME) == pytest.approx(0.85 * 0.75)


class TestDescriptor:

    def test_magnet_trait_first(self):
        ratings = tone_ratings(4200, 3, MagnetType.ALNICO5)
        descriptor = tone_descriptor(ratings, 4200, 3, MagnetType.ALNICO5, InsulationType.PLAIN_ENAMEL)
        assert descriptor.character.startswith("Punchy")
        assert len(descriptor.character.split(", ")) <= 2

    def test_warm_suggestion(self):
        descriptor = tone_descriptor(tone_ratings(2500, 3), 2500, 3)
        assert descriptor.suggestions == ["Warm voicing - jazz, blues, neck position"]

    def test_at_most_one_suggestion(self):
        descriptor = tone_descriptor(tone_ratings(7000, 8), 7000, 8)
        assert len(descriptor.suggestions) == 1
        assert descriptor.suggestions[0].startswith("Bright")

    def test_no_traits_given(self):
        descriptor = tone_descriptor(tone_ratings(4200, 3), 4200, 3)
        assert descriptor.character[0].isupper()
