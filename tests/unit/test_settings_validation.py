"""Unit tests for startup configuration checks."""

from po_intake.core.settings import DatabaseSettings, OCRSettings, PipelineSettings
from po_intake.core.validation import collect_settings_problems


class TestCollectSettingsProblems:
    def test_defaults_are_valid(self):
        assert collect_settings_problems(
            PipelineSettings(), OCRSettings(), DatabaseSettings()
        ) == []

    def test_min_size_must_be_below_max(self):
        problems = collect_settings_problems(
            PipelineSettings(MIN_FILE_SIZE=100, MAX_FILE_SIZE=100),
            OCRSettings(),
            DatabaseSettings(),
        )
        assert any("PIPELINE_MIN_FILE_SIZE" in p for p in problems)

    def test_confidence_range(self):
        problems = collect_settings_problems(
            PipelineSettings(MIN_OCR_CONFIDENCE=150), OCRSettings(), DatabaseSettings()
        )
        assert any("MIN_OCR_CONFIDENCE" in p for p in problems)

    def test_http_backend_requires_url(self):
        problems = collect_settings_problems(
            PipelineSettings(),
            OCRSettings(OCR_BACKEND="http", OCR_BASE_URL=""),
            DatabaseSettings(),
        )
        assert problems == ["OCR_BASE_URL is required when OCR_BACKEND=http"]

    def test_pool_sizes_checked_only_with_database(self):
        db = DatabaseSettings(DB_HOST="db", DB_POOL_MIN_SIZE=20, DB_POOL_MAX_SIZE=5)
        problems = collect_settings_problems(PipelineSettings(), OCRSettings(), db)
        assert any("DB_POOL_MIN_SIZE" in p for p in problems)
