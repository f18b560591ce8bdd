"""
Tests for Legacy and Conservative analytics.
"""

from judicial_analytics.engine.fallbacks import (
    generate_conservative_analytics,
    generate_legacy_analytics,
    is_home_jurisdiction,
)
from judicial_analytics.utils.data_models import CATEGORIES, Judge, sample_field


class TestIsHomeJurisdiction:
    """Tests for is_home_jurisdiction function."""

    def test_markers(self):
        """Test substring matching on the lowered jurisdiction."""
        markers = ("ca", "california")
        assert is_home_jurisdiction(Judge(id="1", jurisdiction="CA"), markers)
        assert is_home_jurisdiction(Judge(id="1", jurisdiction="State of California"), markers)
        assert not is_home_jurisdiction(Judge(id="1", jurisdiction="NY"), markers)
        assert not is_home_jurisdiction(Judge(id="1", jurisdiction=None), markers)


class TestLegacyAnalytics:
    """Tests for generate_legacy_analytics function."""

    def test_empty_corpus_profile(self, window):
        """Test the profile-based baseline outside the home jurisdiction."""
        analytics = generate_legacy_analytics(Judge(id="1", jurisdiction="NY"), window)

        assert analytics.analysis_quality == "profile_based"
        assert analytics.ai_model == "profile_estimation"
        assert analytics.total_cases_analyzed == 0
        assert analytics.overall_confidence == 65
        assert analytics.civil_plaintiff_favor == 48
        assert analytics.contract_enforcement_rate == 68
        assert analytics.bail_release_rate == 65
        assert all(getattr(analytics, sample_field(c)) == 0 for c in CATEGORIES)

    def test_home_jurisdiction_shift(self, sample_judge, window):
        """Test that the shift moves point estimates but not confidence."""
        analytics = generate_legacy_analytics(sample_judge, window)

        assert analytics.civil_plaintiff_favor == 53
        assert analytics.civil_defendant_favor == 47
        assert analytics.family_custody_mother == 57
        assert analytics.family_custody_father == 43
        assert analytics.family_alimony_favorable == 47
        assert analytics.contract_enforcement_rate == 63
        assert analytics.contract_dismissal_rate == 37
        assert analytics.bail_release_rate == 70
        assert analytics.criminal_sentencing_severity == 50
        assert analytics.overall_confidence == 65
        assert all(v == 65 for k, v in analytics.to_dict().items() if k.startswith("confidence_"))

    def test_custom_markers(self, window):
        """Test configurable home-jurisdiction markers."""
        analytics = generate_legacy_analytics(
            Judge(id="1", jurisdiction="NY"), window, home_jurisdictions=("ny",)
        )
        assert analytics.civil_plaintiff_favor == 53

    def test_window_in_narrative(self, sample_judge, window):
        """Test that the window is named in the patterns."""
        analytics = generate_legacy_analytics(sample_judge, window)
        assert "No case data available within 5-year window (2020-2025)" in analytics.notable_patterns


class TestConservativeAnalytics:
    """Tests for generate_conservative_analytics function."""

    def test_conservative_values(self, sample_judge, window):
        """Test fixed conservative defaults."""
        analytics = generate_conservative_analytics(sample_judge, 37, window)

        assert analytics.analysis_quality == "conservative"
        assert analytics.ai_model == "conservative_fallback"
        assert analytics.total_cases_analyzed == 37
        assert analytics.civil_plaintiff_favor == 50
        assert analytics.family_alimony_favorable == 40
        assert analytics.contract_enforcement_rate == 65
        assert analytics.contract_dismissal_rate == 35
        assert analytics.criminal_plea_acceptance == 70
        assert analytics.overall_confidence == 60
        assert "Window analyzed: 2020-2025" in analytics.data_limitations

    def test_complements_sum_to_100(self, sample_judge, window):
        """Test binary pairs for both fallbacks."""
        for analytics in (
            generate_conservative_analytics(sample_judge, 3, window),
            generate_legacy_analytics(sample_judge, window),
        ):
            assert analytics.civil_plaintiff_favor + analytics.civil_defendant_favor == 100
            assert analytics.family_custody_mother + analytics.family_custody_father == 100
            assert analytics.contract_enforcement_rate + analytics.contract_dismissal_rate == 100
