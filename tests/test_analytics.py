import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.analytics.calculator import (
    calculate_resume_analytics,
    calculate_score_change,
    default_resume_analytics,
    summarize_job_stats,
)
from app.analytics.display import analytics_card, format_time_ago, get_trend_color, get_trend_icon
from app.normalize.feedback import generate_fallback_feedback
from app.schemas.resume import JobMatch, JobMatchScore, Resume

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _match(overall: int, days_ago: float = 0, job_id: str = "1") -> JobMatch:
    return JobMatch(
        job_id=job_id,
        resume_id="r1",
        score=JobMatchScore(
            overall=overall,
            skills_match=overall,
            experience_match=overall,
            keyword_match=overall,
        ),
        analyzed_at=NOW - timedelta(days=days_ago),
    )


def _resume(**overrides) -> Resume:
    fields = {
        "id": "r1",
        "resume_path": "resumes/r1.pdf",
        "feedback": generate_fallback_feedback(),
        "uploaded_at": NOW - timedelta(days=40),
    }
    fields.update(overrides)
    return Resume(**fields)


class ResumeAnalyticsTests(unittest.TestCase):
    def test_no_matches(self):
        analytics = calculate_resume_analytics(_resume(), [], now=NOW)
        self.assertEqual(analytics.total_job_matches, 0)
        self.assertEqual(analytics.average_match_score, 0)
        self.assertEqual(analytics.best_match_score, 0)
        self.assertEqual(analytics.improvement_trend, "stable")
        self.assertIsNone(analytics.recent_activity.last_analyzed)
        self.assertEqual(analytics.recent_activity.matches_last_30_days, 0)

    def test_matches_all_from_today_are_stable(self):
        matches = [_match(score, days_ago=0.1 * i) for i, score in enumerate([50, 60, 70, 80, 90])]
        analytics = calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(analytics.total_job_matches, 5)
        self.assertEqual(analytics.average_match_score, 70)
        self.assertEqual(analytics.best_match_score, 90)
        self.assertEqual(analytics.improvement_trend, "stable")
        self.assertEqual(analytics.recent_activity.matches_last_7_days, 5)

    def test_average_rounds_half_up(self):
        analytics = calculate_resume_analytics(_resume(), [_match(70), _match(71)], now=NOW)
        self.assertEqual(analytics.average_match_score, 71)

    def test_difference_of_exactly_five_is_stable(self):
        matches = [_match(70, days_ago=10), _match(75, days_ago=1)]
        analytics = calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(analytics.improvement_trend, "stable")

    def test_difference_above_five_is_up(self):
        matches = [_match(70, days_ago=10), _match(75, days_ago=1), _match(76, days_ago=2)]
        analytics = calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(analytics.improvement_trend, "up")

    def test_difference_of_five_point_one_is_up(self):
        # recent mean 75.1 against an older mean of 70
        matches = [_match(70, days_ago=10)] + [_match(75, days_ago=1)] * 9 + [_match(76, days_ago=1)]
        analytics = calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(analytics.improvement_trend, "up")

    def test_difference_of_four_point_nine_is_stable(self):
        matches = [_match(70, days_ago=10)] + [_match(75, days_ago=1)] * 9 + [_match(74, days_ago=1)]
        analytics = calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(analytics.improvement_trend, "stable")

    def test_falling_scores_are_down(self):
        matches = [_match(85, days_ago=20), _match(80, days_ago=12), _match(70, days_ago=1)]
        analytics = calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(analytics.improvement_trend, "down")

    def test_only_old_matches_are_stable(self):
        matches = [_match(40, days_ago=20), _match(90, days_ago=10)]
        analytics = calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(analytics.improvement_trend, "stable")

    def test_recent_activity_windows(self):
        matches = [
            _match(60, days_ago=1),
            _match(60, days_ago=6.9),
            _match(60, days_ago=8),
            _match(60, days_ago=29),
            _match(60, days_ago=45),
        ]
        analytics = calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(analytics.recent_activity.matches_last_7_days, 2)
        self.assertEqual(analytics.recent_activity.matches_last_30_days, 4)
        self.assertEqual(analytics.recent_activity.last_analyzed, NOW - timedelta(days=1))

    def test_last_analyzed_ignores_list_order(self):
        matches = [_match(60, days_ago=3), _match(60, days_ago=0.5), _match(60, days_ago=2)]
        analytics = calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(analytics.recent_activity.last_analyzed, NOW - timedelta(days=0.5))

    def test_category_scores_copy_feedback(self):
        analytics = calculate_resume_analytics(_resume(), [], now=NOW)
        scores = analytics.category_scores
        self.assertEqual(
            [scores.ats, scores.tone_and_style, scores.content, scores.structure, scores.skills],
            [70, 75, 60, 80, 65],
        )

    def test_missing_feedback_gives_zero_category_scores(self):
        analytics = calculate_resume_analytics(_resume(feedback=None), [], now=NOW)
        self.assertEqual(analytics.category_scores.get("ATS"), 0)
        self.assertEqual(analytics.category_scores.get("skills"), 0)

    def test_uploaded_at_comes_from_resume(self):
        analytics = calculate_resume_analytics(_resume(), [], now=NOW)
        self.assertEqual(analytics.uploaded_at, NOW - timedelta(days=40))
        analytics = calculate_resume_analytics(_resume(uploaded_at=None), [], now=NOW)
        self.assertEqual(analytics.uploaded_at, NOW)

    def test_input_matches_are_not_mutated(self):
        matches = [_match(60, days_ago=3), _match(80, days_ago=1)]
        snapshot = [m.model_copy(deep=True) for m in matches]
        calculate_resume_analytics(_resume(), matches, now=NOW)
        self.assertEqual(matches, snapshot)

    def test_default_analytics(self):
        analytics = default_resume_analytics(_resume(), now=NOW)
        self.assertEqual(analytics.resume_id, "r1")
        self.assertEqual(analytics.total_job_matches, 0)
        self.assertEqual(analytics.improvement_trend, "stable")
        self.assertEqual(analytics.category_scores.structure, 80)

    def test_serializes_with_camel_case_keys(self):
        body = calculate_resume_analytics(_resume(), [_match(70)], now=NOW).to_json_dict()
        self.assertIn("averageMatchScore", body)
        self.assertIn("matchesLast7Days", body["recentActivity"])
        self.assertIn("ATS", body["categoryScores"])


class ScoreChangeTests(unittest.TestCase):
    def test_change_and_percentage(self):
        change = calculate_score_change(80, 70)
        self.assertEqual(change.change, 10)
        self.assertEqual(change.percentage, 14)

    def test_zero_previous_has_zero_percentage(self):
        change = calculate_score_change(80, 0)
        self.assertEqual(change.change, 80)
        self.assertEqual(change.percentage, 0)

    def test_decline(self):
        change = calculate_score_change(60, 80)
        self.assertEqual(change.change, -20)
        self.assertEqual(change.percentage, -25)


class JobStatsTests(unittest.TestCase):
    def test_empty(self):
        stats = summarize_job_stats([], now=NOW)
        self.assertEqual(
            (stats.total_matches, stats.average_score, stats.top_match, stats.recent_matches),
            (0, 0, 0, 0),
        )

    def test_counts_last_day(self):
        matches = [_match(60, days_ago=0.5), _match(81, days_ago=2), _match(70, days_ago=0.1)]
        stats = summarize_job_stats(matches, now=NOW)
        self.assertEqual(stats.total_matches, 3)
        self.assertEqual(stats.average_score, 70)
        self.assertEqual(stats.top_match, 81)
        self.assertEqual(stats.recent_matches, 2)


class DisplayHelperTests(unittest.TestCase):
    def test_trend_icons(self):
        self.assertEqual(get_trend_icon("up"), "↗️")
        self.assertEqual(get_trend_icon("down"), "↘️")
        self.assertEqual(get_trend_icon("stable"), "→")

    def test_trend_colors(self):
        self.assertEqual(get_trend_color("up"), "text-green-600")
        self.assertEqual(get_trend_color("down"), "text-red-600")
        self.assertEqual(get_trend_color("stable"), "text-gray-600")

    def test_format_time_ago(self):
        self.assertEqual(format_time_ago(NOW - timedelta(minutes=30), now=NOW), "30 minutes ago")
        self.assertEqual(format_time_ago(NOW - timedelta(hours=5), now=NOW), "5 hours ago")
        self.assertEqual(format_time_ago(NOW - timedelta(days=3), now=NOW), "3 days ago")
        self.assertEqual(format_time_ago(NOW - timedelta(days=14), now=NOW), "2 weeks ago")
        self.assertEqual(format_time_ago(NOW - timedelta(days=65), now=NOW), "2 months ago")

    def test_format_time_ago_accepts_iso_strings(self):
        self.assertEqual(format_time_ago("2024-06-15T10:00:00Z", now=NOW), "2 hours ago")

    def test_analytics_card(self):
        matches = [_match(70, days_ago=10), _match(85, days_ago=0.25)]
        card = analytics_card(calculate_resume_analytics(_resume(), matches, now=NOW), now=NOW)
        self.assertEqual(card.improvement_trend, "up")
        self.assertEqual(card.trend_icon, "↗️")
        self.assertEqual(card.trend_color, "text-green-600")
        self.assertEqual(card.match_label, "Excellent Match")
        self.assertEqual(card.uploaded_ago, "1 months ago")
        self.assertEqual(card.last_analyzed_ago, "6 hours ago")

    def test_analytics_card_without_matches(self):
        card = analytics_card(calculate_resume_analytics(_resume(), [], now=NOW), now=NOW)
        self.assertEqual(card.trend_icon, "→")
        self.assertIsNone(card.match_label)
        self.assertIsNone(card.last_analyzed_ago)


if __name__ == "__main__":
    unittest.main()
