"""
Tests for Business Activity Classification
"""

from bizintel.context.activity_classifier import (
    ActivityPattern,
    BusinessActivityClassifier,
    SEED_PATTERNS,
    classify_activities,
    derive_patterns,
)
from bizintel.context.content_extractor import extract_signals
from bizintel.context.models import ExtractedSignals


class TestScoring:
    """Test the scoring weights."""

    def test_keyword_occurrences(self):
        pattern = ActivityPattern(category="Test", keywords=["divorce"])
        signals = ExtractedSignals(content_text="divorce divorce divorced divorce")

        activity = BusinessActivityClassifier().score(pattern, signals)

        # "divorced" is not a word-bounded match
        assert activity.confidence == 6 / 20
        assert activity.evidence == ['Found "divorce" 3 times in content']
        assert activity.keywords == ["divorce"]

    def test_navigation_term(self):
        pattern = ActivityPattern(category="Test", navigation_terms=["practice areas"])
        signals = ExtractedSignals(navigation_items=("Our Practice Areas",))

        activity = BusinessActivityClassifier().score(pattern, signals)

        assert activity.confidence == 10 / 20
        assert activity.evidence == ['Found "practice areas" in navigation']

    def test_headline_term(self):
        pattern = ActivityPattern(category="Test", headline_terms=["law"])
        signals = ExtractedSignals(headlines=("Family Law Experts",))

        activity = BusinessActivityClassifier().score(pattern, signals)

        assert activity.confidence == 8 / 20
        assert activity.evidence == ['Found "law" in headlines']

    def test_confidence_capped(self):
        pattern = ActivityPattern(category="Test", keywords=["gym"])
        signals = ExtractedSignals(content_text=" ".join(["gym"] * 50))

        assert BusinessActivityClassifier().score(pattern, signals).confidence == 1.0

    def test_zero_score_not_emitted(self):
        pattern = ActivityPattern(category="Test", keywords=["gym"])
        assert BusinessActivityClassifier().score(pattern, ExtractedSignals()) is None


class TestClassify:
    """Test full classification."""

    def test_family_law_page(self, family_law_signals, store):
        activities = BusinessActivityClassifier(store).classify(family_law_signals)

        top = activities[0]
        assert top.activity == "Legal Services"
        assert top.confidence >= 0.7
        assert 'Found "divorce" 6 times in content' in top.evidence
        assert 'Found "law" in headlines' in top.evidence

    def test_gym_page(self, gym_html, store):
        activities = classify_activities(extract_signals(gym_html), store)
        assert activities[0].activity == "Fitness & Sports"
        assert activities[0].confidence == 1.0

    def test_empty_signals(self, store):
        assert BusinessActivityClassifier(store).classify(ExtractedSignals()) == []

    def test_top_three_sorted(self):
        patterns = [
            ActivityPattern(category="A", keywords=["alpha"]),
            ActivityPattern(category="B", keywords=["beta"]),
            ActivityPattern(category="C", keywords=["gamma"]),
            ActivityPattern(category="D", keywords=["delta"]),
        ]
        signals = ExtractedSignals(content_text="alpha beta beta gamma gamma gamma delta delta")

        activities = BusinessActivityClassifier(seed_patterns=patterns).classify(signals)

        assert [a.activity for a in activities] == ["C", "B", "D"]
        assert all(
            activities[i].confidence >= activities[i + 1].confidence
            for i in range(len(activities) - 1)
        )

    def test_ties_keep_pattern_order(self):
        patterns = [
            ActivityPattern(category="First", keywords=["shared"]),
            ActivityPattern(category="Second", keywords=["shared"]),
        ]
        signals = ExtractedSignals(content_text="shared")

        activities = BusinessActivityClassifier(seed_patterns=patterns).classify(signals)

        assert [a.activity for a in activities] == ["First", "Second"]

    def test_confidence_bounds(self, family_law_signals, store):
        for activity in BusinessActivityClassifier(store).classify(family_law_signals):
            assert 0.0 <= activity.confidence <= 1.0


class TestDerivedPatterns:
    """Test patterns learned from the taxonomy store."""

    def test_seed_categories_excluded(self, store):
        derived = derive_patterns(store, [p.category for p in SEED_PATTERNS])
        categories = [p.category for p in derived]

        assert "Legal Services" not in categories
        assert "Automotive" in categories

    def test_derived_pattern_contents(self, store):
        derived = {p.category: p for p in derive_patterns(store, [])}
        automotive = derived["Automotive"]

        assert "car repair" in automotive.keywords
        assert "mot testing" in automotive.navigation_terms
        assert automotive.headline_terms == ["automotive"]

    def test_store_category_is_classifiable(self, store):
        html = """
        <nav><a href="/mot">MOT Testing</a><a href="/repairs">Car Repair</a></nav>
        <h1>Automotive specialists</h1>
        <p>Our garage offers car repair by a qualified mechanic.</p>
        """
        activities = BusinessActivityClassifier(store).classify(extract_signals(html))
        assert activities[0].activity == "Automotive"

    def test_without_store_only_seeds(self):
        classifier = BusinessActivityClassifier()
        assert [p.category for p in classifier.patterns()] == [p.category for p in SEED_PATTERNS]
