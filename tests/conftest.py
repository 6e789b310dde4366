from pathlib import Path

import pytest

from po_intake.core.settings import PipelineSettings
from po_intake.pipeline.models.dto import UploadedDocument
from tests.fakes import CountingRepository, make_document, png_bytes


@pytest.fixture
def png_document() -> UploadedDocument:
    return make_document(png_bytes())


@pytest.fixture
def repository() -> CountingRepository:
    return CountingRepository()


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def settings(work_dir: Path) -> PipelineSettings:
    return PipelineSettings(WORK_DIR=str(work_dir), OCR_TIMEOUT_SECONDS=2.0)
