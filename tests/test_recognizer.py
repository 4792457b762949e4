"""Tests for the rotation-invariant point-cloud recognizer."""

import math

import numpy as np
import pytest

from symbol_engine.errors import EmptyCandidateError, InvalidCandidateError
from symbol_engine.geometry import Point
from symbol_engine.recognizer import RecognitionResult, Recognizer
from symbol_engine.templates import TemplateStore

TRIANGLE = [(100, 50), (70, 120), (130, 120), (100, 50)]


def make_circle(n=25, radius=40.0, center=(100.0, 100.0)):
    """Closed n-point circle (first point repeated at the end)."""
    angles = np.linspace(0, 2 * math.pi, n)
    return np.column_stack([
        center[0] + radius * np.cos(angles),
        center[1] + radius * np.sin(angles),
    ])


def transform(points, scale=1.0, degrees=0.0):
    """Uniformly scale and rotate points around their centroid."""
    pts = np.asarray(points, dtype=np.float64)
    c = pts.mean(axis=0)
    theta = math.radians(degrees)
    rot = np.array([[math.cos(theta), -math.sin(theta)], [math.sin(theta), math.cos(theta)]])
    return (pts - c) @ rot.T * scale + c


class TestRecognitionResult:
    def test_matched_uses_threshold(self):
        assert RecognitionResult("circle", 0.5).matched(0.5)
        assert not RecognitionResult("circle", 0.49).matched(0.5)

    def test_no_name_never_matches(self):
        assert not RecognitionResult(None, 0.0).matched(0.0)


class TestRecognizer:
    def test_self_match_near_perfect(self):
        store = TemplateStore()
        store.add("triangle", TRIANGLE)
        result = Recognizer(store).recognize(TRIANGLE)
        assert result.name == "triangle"
        assert result.score >= 0.95

    def test_circle_scaled_and_rotated(self):
        store = TemplateStore()
        store.add("circle", make_circle())
        candidate = transform(make_circle(), scale=0.5, degrees=15)
        result = Recognizer(store).recognize(candidate)
        assert result.name == "circle"
        assert result.score >= 0.85

    def test_triangle_scaled_and_rotated_among_defaults(self):
        store = TemplateStore.with_defaults()
        candidate = transform(TRIANGLE, scale=2.5, degrees=10)
        result = Recognizer(store).recognize(candidate)
        assert result.name == "triangle"
        assert result.score >= 0.85

    def test_multi_stroke_self_match(self):
        store = TemplateStore.with_defaults()
        candidate = [
            Point(70, 70, 1), Point(130, 130, 1),
            Point(130, 70, 2), Point(70, 130, 2),
        ]
        result = Recognizer(store).recognize(candidate)
        assert result.name == "X"
        assert result.score >= 0.95

    def test_score_in_unit_range(self):
        store = TemplateStore.with_defaults()
        recognizer = Recognizer(store)
        rng = np.random.default_rng(5)
        for _ in range(10):
            result = recognizer.recognize(rng.random((15, 2)) * 200)
            assert 0.0 <= result.score <= 1.0

    def test_variants_report_shared_name(self):
        store = TemplateStore()
        store.add("line", [(0, 0), (100, 0)])
        store.add("line", [(100, 0), (0, 0)])
        store.add("vline", [(0, 0), (0, 100)])
        result = Recognizer(store).recognize([(300, 40), (200, 40), (100, 40)])
        assert result.name == "line"
        assert result.score >= 0.95

    def test_ties_resolve_to_first_template(self):
        store = TemplateStore()
        store.add("first", TRIANGLE)
        store.add("second", TRIANGLE)
        result = Recognizer(store).recognize(TRIANGLE)
        assert result.name == "first"

    def test_store_changes_seen_immediately(self):
        store = TemplateStore()
        store.add("triangle", TRIANGLE)
        store.add("circle", make_circle())
        recognizer = Recognizer(store)
        assert recognizer.recognize(TRIANGLE).name == "triangle"
        store.remove("triangle")
        assert recognizer.recognize(TRIANGLE).name == "circle"

    def test_single_point_candidate(self):
        store = TemplateStore.with_defaults()
        result = Recognizer(store).recognize([(50, 50)])
        assert result.name is not None
        assert 0.0 <= result.score <= 1.0

    def test_distance_reported(self):
        store = TemplateStore()
        store.add("triangle", TRIANGLE)
        result = Recognizer(store).recognize(TRIANGLE)
        assert result.distance == pytest.approx(0.0, abs=1e-9)


class TestRecognizerPreconditions:
    def test_empty_store(self):
        result = Recognizer(TemplateStore()).recognize(TRIANGLE)
        assert result.name is None
        assert result.score == 0.0
        assert result.distance == math.inf

    def test_empty_candidate_fails_fast(self):
        with pytest.raises(EmptyCandidateError):
            Recognizer(TemplateStore.with_defaults()).recognize([])

    def test_empty_candidate_is_value_error(self):
        with pytest.raises(ValueError):
            Recognizer(TemplateStore.with_defaults()).recognize([])

    def test_stroke_id_below_one(self):
        with pytest.raises(InvalidCandidateError):
            Recognizer(TemplateStore.with_defaults()).recognize([Point(0, 0, 0), Point(10, 10, 0)])

    def test_invalid_search_parameters(self):
        with pytest.raises(ValueError):
            Recognizer(TemplateStore(), angle_range=-1)
        with pytest.raises(ValueError):
            Recognizer(TemplateStore(), angle_precision=0)
