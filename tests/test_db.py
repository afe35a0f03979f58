import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from pymongo.errors import OperationFailure, PyMongoError

from ats_scanner.models.schemas import AnalysisRecord
from ats_scanner.services import db
from ats_scanner.services.scoring import CompositeScoringEngine
from ats_scanner.utils.exceptions import ConfigurationError, ExternalServiceError
from samples import SENIOR_TECH_JOB, SENIOR_TECH_RESUME


def _cursor(docs):
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


class TestAnalysisRecords:
    """Test cases for write-once analysis persistence"""

    @pytest.mark.asyncio
    @patch('ats_scanner.services.db.analyses_coll')
    async def test_save_inserts_json_document(self, mock_coll, reference):
        mock_coll.insert_one = AsyncMock()
        result = await CompositeScoringEngine(reference).comprehensive_analysis(SENIOR_TECH_RESUME, SENIOR_TECH_JOB)
        record = AnalysisRecord.from_result(result)

        analysis_id = await db.save_analysis_record(record)

        assert analysis_id == record.analysis_id
        document = mock_coll.insert_one.call_args.args[0]
        assert document["analysis_id"] == record.analysis_id
        assert isinstance(document["created_at"], str)
        assert document["result"]["overall_score"] == result.overall_score

    @pytest.mark.asyncio
    @patch('ats_scanner.services.db.analyses_coll')
    async def test_save_failure(self, mock_coll, reference):
        mock_coll.insert_one = AsyncMock(side_effect=PyMongoError("write failed"))
        result = await CompositeScoringEngine(reference).comprehensive_analysis(SENIOR_TECH_RESUME, SENIOR_TECH_JOB)

        with pytest.raises(ExternalServiceError):
            await db.save_analysis_record(AnalysisRecord.from_result(result))

    @pytest.mark.asyncio
    @patch('ats_scanner.services.db.analyses_coll')
    async def test_get_record(self, mock_coll):
        mock_coll.find_one = AsyncMock(return_value={"_id": 42, "analysis_id": "abc"})

        record = await db.get_analysis_record("abc")

        assert record == {"_id": "42", "analysis_id": "abc"}
        mock_coll.find_one.assert_awaited_once_with({"analysis_id": "abc"})

    @pytest.mark.asyncio
    @patch('ats_scanner.services.db.analyses_coll')
    async def test_get_missing_record(self, mock_coll):
        mock_coll.find_one = AsyncMock(return_value=None)

        assert await db.get_analysis_record("missing") is None


class TestReferenceOverrides:
    """Test cases for loading stored reference profiles"""

    @pytest.mark.asyncio
    @patch('ats_scanner.services.db.ats_profiles_coll')
    @patch('ats_scanner.services.db.industry_profiles_coll')
    async def test_load_overrides(self, mock_industries, mock_ats):
        mock_industries.find = MagicMock(return_value=_cursor([
            {"_id": "x1", "industry_id": "legal", "display_name": "Legal", "terms": [{"term": "litigation"}]},
        ]))
        mock_ats.find = MagicMock(return_value=_cursor([
            {"_id": "x2", "system_id": "bamboohr", "display_name": "BambooHR"},
        ]))

        industries, ats_profiles = await db.load_reference_overrides()

        assert [p.industry_id for p in industries] == ["legal"]
        assert industries[0].terms[0].term == "litigation"
        assert [p.system_id for p in ats_profiles] == ["bamboohr"]

    @pytest.mark.asyncio
    @patch('ats_scanner.services.db.ats_profiles_coll')
    @patch('ats_scanner.services.db.industry_profiles_coll')
    async def test_invalid_stored_profile(self, mock_industries, mock_ats):
        mock_industries.find = MagicMock(return_value=_cursor([{"_id": "x1", "industry_id": "Legal Services"}]))
        mock_ats.find = MagicMock(return_value=_cursor([]))

        with pytest.raises(ConfigurationError):
            await db.load_reference_overrides()

    @pytest.mark.asyncio
    @patch('ats_scanner.services.db.ats_profiles_coll')
    @patch('ats_scanner.services.db.industry_profiles_coll')
    async def test_database_unavailable(self, mock_industries, mock_ats):
        cursor = MagicMock()
        cursor.to_list = AsyncMock(side_effect=PyMongoError("no primary"))
        mock_industries.find = MagicMock(return_value=cursor)

        with pytest.raises(ExternalServiceError):
            await db.load_reference_overrides()


class TestIndexes:
    """Test cases for index initialization"""

    @pytest.mark.asyncio
    @patch('ats_scanner.services.db.ats_profiles_coll')
    @patch('ats_scanner.services.db.industry_profiles_coll')
    @patch('ats_scanner.services.db.analyses_coll')
    async def test_index_errors_do_not_abort_startup(self, mock_analyses, mock_industries, mock_ats):
        mock_analyses.create_index = AsyncMock(side_effect=OperationFailure("index already exists"))
        mock_industries.create_index = AsyncMock()
        mock_ats.create_index = AsyncMock()

        await db.init_indexes()

        assert mock_analyses.create_index.await_count == 3
        mock_industries.create_index.assert_awaited_once()
        mock_ats.create_index.assert_awaited_once()
