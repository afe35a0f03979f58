import pytest

from ats_scanner.helpers.lexicons import TECHNOLOGY
from ats_scanner.models.reference import IndustryProfile, LexiconTerm, WeightTable
from ats_scanner.models.settings import AnalysisSettings
from ats_scanner.services.reference_data import ReferenceData, default_reference_data
from ats_scanner.utils.exceptions import ConfigurationError

_TABLES = (
    WeightTable(weights={"skills": 0.5, "keywords": 0.5}),
    WeightTable(role_level="senior", weights={"skills": 0.4, "keywords": 0.6}),
    WeightTable(industry="technology", weights={"skills": 0.7, "keywords": 0.3}),
    WeightTable(industry="technology", role_level="senior", weights={"skills": 0.8, "keywords": 0.2}),
)


class TestWeightTableSelection:
    """Test cases for the weight table fallback order"""

    @pytest.mark.parametrize("industry,level,key", [
        ("technology", "senior", "technology/senior"),
        ("technology", "entry", "technology/default"),
        ("finance", "senior", "default/senior"),
        ("finance", "entry", "default/default"),
        (None, None, "default/default"),
    ])
    def test_fallback_order(self, industry, level, key):
        reference = ReferenceData(weight_tables=_TABLES)

        assert reference.select_weight_table(industry, level).key == key

    def test_missing_global_default(self):
        reference = ReferenceData(weight_tables=_TABLES[1:])

        with pytest.raises(ConfigurationError):
            reference.select_weight_table("finance", "entry")

    def test_built_in_tables_sum_to_one(self, reference):
        for table in reference.weight_tables:
            assert sum(table.weights.values()) == pytest.approx(1.0)
        assert reference.select_weight_table(None, None).key == "default/default"

    def test_configured_tables_replace_built_ins(self):
        settings = AnalysisSettings(weight_tables=list(_TABLES))

        assert default_reference_data(settings).weight_tables == _TABLES


class TestLookups:
    """Test cases for alias, synonym and vocabulary lookups"""

    def test_resolve_industry(self, reference):
        assert reference.resolve_industry("Technology") == "technology"
        assert reference.resolve_industry("information technology") == "technology"
        assert reference.resolve_industry("Banking") == "finance"
        assert reference.resolve_industry("astronomy") is None
        assert reference.resolve_industry(None) is None

    def test_resolve_role_level(self, reference):
        assert reference.resolve_role_level("Senior") == "senior"
        assert reference.resolve_role_level("junior") == "entry"
        assert reference.resolve_role_level("director") == "executive"
        assert reference.resolve_role_level("wizard") is None

    def test_canonical_forms(self, reference):
        assert reference.canonical("k8s") == "kubernetes"
        assert reference.canonical("ehr") == "ehr"
        assert reference.canonical("ehr", "healthcare") == "electronic health records"
        assert "k8s" in reference.variants("kubernetes")

    def test_industry_vocabulary_includes_variants(self, reference):
        vocabulary = reference.industry_vocabulary("technology")

        assert "kubernetes" in vocabulary
        assert "k8s" in vocabulary
        assert reference.industry_vocabulary(None) == frozenset()

    def test_level_signals_merge_industry_phrases(self, reference):
        signals = reference.level_signals("technology")

        assert "senior" in signals["senior"]
        assert "code review" in signals["senior"]


class TestRegistration:
    """Test cases for registering and overriding records"""

    def test_duplicate_industry_ids(self):
        with pytest.raises(ConfigurationError, match="Duplicate industry profile"):
            ReferenceData(industries=(TECHNOLOGY, TECHNOLOGY))

    def test_with_overrides_replaces_and_appends(self, reference):
        trimmed = TECHNOLOGY.model_copy(update={"terms": (LexiconTerm(term="cobol", weight=2.0),)})
        legal = IndustryProfile(industry_id="legal", display_name="Legal",
                                terms=(LexiconTerm(term="litigation", weight=3.0),))

        merged = reference.with_overrides(industries=[trimmed, legal])

        assert [p.industry_id for p in merged.industries][0] == "technology"
        assert merged.industries[-1].industry_id == "legal"
        assert "cobol" in merged.industry_vocabulary("technology")
        assert "python" not in merged.industry_vocabulary("technology")
        assert merged.weight_tables == reference.weight_tables
        # the original instance is untouched
        assert "python" in reference.industry_vocabulary("technology")
