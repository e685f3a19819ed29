import json

from dataset_curator.analytics import analyze_dataset, generate_insights, generate_recommendations
from dataset_curator.core import AnalyticsSettings, Pair
from dataset_curator.core.schemas import DiversityReport, Grade, Overview, QualityReport, QualityScores


def _overview(**overrides):
    values = dict(
        total_pairs=200,
        valid_pairs=200,
        incomplete_pairs=0,
        total_words=10000,
        avg_prompt_length=40.0,
        avg_completion_length=200.0,
        total_characters=48000,
        estimated_tokens=12000,
        unique_tags=5,
    )
    values.update(overrides)
    return Overview(**values)


def _quality(overall=95.0, uniqueness=100.0):
    return QualityReport(
        scores=QualityScores(completeness=100.0, consistency=80.0, uniqueness=uniqueness, length_quality=100.0),
        overall_score=overall,
        grade=Grade(letter="A+", label="Excellent!"),
    )


def _diversity(lexical=55.0):
    return DiversityReport(
        vocabulary_size=900,
        unique_prompt_words=300,
        unique_completion_words=700,
        lexical_diversity=lexical,
    )


class TestInsights:
    def test_healthy_dataset_gets_single_success(self):
        insights = generate_insights(_overview(), _quality(), _diversity())
        assert [insight.type for insight in insights] == ["success"]

    def test_small_dataset_warning(self):
        insights = generate_insights(_overview(total_pairs=10), _quality(), _diversity())
        assert insights[0].type == "warning"
        assert "only 10 pairs" in insights[0].message

    def test_duplicates_and_low_diversity(self):
        insights = generate_insights(_overview(), _quality(uniqueness=90.0), _diversity(lexical=12.5))
        assert [insight.type for insight in insights] == ["info", "warning"]
        assert "12.50%" in insights[1].message

    def test_short_completions(self):
        insights = generate_insights(_overview(avg_completion_length=20.0), _quality(), _diversity())
        assert "completion length" in insights[0].message

    def test_thresholds_come_from_settings(self):
        settings = AnalyticsSettings(min_dataset_size=500)
        insights = generate_insights(_overview(), _quality(), _diversity(), settings)
        assert insights[0].type == "warning"


class TestRecommendations:
    def test_healthy_dataset_has_none(self):
        assert generate_recommendations(_overview(), _quality()) == []

    def test_each_rule(self):
        recommendations = generate_recommendations(_overview(total_pairs=40, unique_tags=1), _quality(overall=55.0))
        assert [(r.priority, r.title) for r in recommendations] == [
            ("high", "Increase Dataset Size"),
            ("high", "Improve Data Quality"),
            ("medium", "Add More Tags"),
        ]
        assert "Add 60 more" in recommendations[0].description
        assert "55%" in recommendations[1].description


class TestAnalyzeDataset:
    def test_empty_dataset_has_no_report(self):
        assert analyze_dataset([]) is None

    def test_full_report(self):
        pairs = [
            Pair(prompt="What is the capital of France?", completion="Paris is the capital of France.", tags=["geo"]),
            Pair(prompt="What is the capital of Spain?", completion="Madrid is the capital of Spain.", tags=["geo"]),
        ]
        report = analyze_dataset(pairs)
        assert report.overview.total_pairs == 2
        assert report.quality.scores.uniqueness == 100.0
        assert sum(bucket.count for bucket in report.distribution.histogram) == 2
        assert report.insights[0].type == "warning"
        assert any(r.title == "Increase Dataset Size" for r in report.recommendations)
        payload = json.loads(report.model_dump_json())
        assert set(payload) >= {"overview", "quality", "diversity", "readability", "balance", "trends"}

    def test_settings_control_histogram(self):
        pairs = [Pair(prompt="prompt text", completion="c" * length) for length in (10, 40, 90)]
        report = analyze_dataset(pairs, AnalyticsSettings(histogram_bins=3))
        assert len(report.distribution.histogram) == 3
