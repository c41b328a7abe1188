"""Tests for the analysis page helpers."""
import io

import pytest
from unittest.mock import patch
from PIL import Image

from src.application.errors import QUOTA_EXHAUSTED_MESSAGE
from src.application.use_cases import ImageAnalysisUseCase
from src.domain.models import DiagnosticRecord, Presence
from src.domain.rules import FALLBACK_ENTRIES
from src.infrastructure.imaging import NOT_AN_IMAGE_MESSAGE


class MockSessionState(dict):
    """Mock Streamlit session state."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.__dict__ = self


class DummyClassifier:
    def __init__(self, answer="{}", error=None):
        self.answer = answer
        self.error = error

    def classify_image(self, image, prompt):
        if self.error:
            raise self.error
        return self.answer


@pytest.fixture
def mock_streamlit():
    """Mock streamlit module."""
    with patch('src.presentation.streamlit_app.st') as mock_st:
        mock_st.session_state = MockSessionState()
        yield mock_st


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (32, 32), color=(230, 220, 150)).save(buf, format="PNG")
    return buf.getvalue()


def _record(**overrides) -> DiagnosticRecord:
    fields = FALLBACK_ENTRIES["yellow"].model_dump()
    fields.update(overrides)
    return DiagnosticRecord(**fields)


class TestFormatRecordMarkdown:
    def test_found_record_shows_location(self):
        from src.presentation.streamlit_app import format_record_markdown

        text = format_record_markdown(_record(presence=Presence.FOUND, location="左侧鼻翼"))

        assert "已检测到鼻涕" in text
        assert "**位置：** 左侧鼻翼" in text
        assert "**可能症状：** 轻度感染" in text
        assert "**中医辨证：** 风热犯肺，湿浊壅塞" in text

    def test_not_found_record_hides_location(self):
        from src.presentation.streamlit_app import format_record_markdown

        text = format_record_markdown(FALLBACK_ENTRIES["clear"])

        assert "未检测到鼻涕" in text
        assert "位置" not in text
        assert "**颜色特征：** 清澈透明" in text
        for label in ("基本建议", "西医解释", "中医辨证", "物理疗法"):
            assert f"**{label}：**" in text

    def test_model_text_is_escaped(self):
        from src.presentation.streamlit_app import format_record_markdown

        text = format_record_markdown(_record(condition="**感染** [点击](http://x)"))

        assert "\\*\\*感染\\*\\*" in text
        assert "\\[点击\\]" in text
        assert "**感染**" not in text


class TestRunAnalysis:
    def test_successful_analysis_stores_record(self, mock_streamlit):
        from src.presentation.streamlit_app import run_analysis

        usecase = ImageAnalysisUseCase(classifier=DummyClassifier('{"presence": "found", "location": "鼻孔"}'))
        run_analysis(usecase, _png_bytes(), "nose.png")

        record = mock_streamlit.session_state.analysis_result
        assert isinstance(record, DiagnosticRecord)
        assert record.location == "鼻孔"
        assert mock_streamlit.session_state.analysis_error is None

    def test_invalid_upload_sets_error(self, mock_streamlit):
        from src.presentation.streamlit_app import run_analysis

        usecase = ImageAnalysisUseCase(classifier=DummyClassifier())
        run_analysis(usecase, b"not an image", "notes.txt")

        assert mock_streamlit.session_state.analysis_result is None
        assert mock_streamlit.session_state.analysis_error == NOT_AN_IMAGE_MESSAGE

    def test_classifier_failure_sets_error(self, mock_streamlit):
        from src.presentation.streamlit_app import run_analysis

        usecase = ImageAnalysisUseCase(classifier=DummyClassifier(error=RuntimeError("429 RESOURCE_EXHAUSTED")))
        run_analysis(usecase, _png_bytes(), "nose.png")

        assert mock_streamlit.session_state.analysis_result is None
        assert mock_streamlit.session_state.analysis_error == QUOTA_EXHAUSTED_MESSAGE


def test_reset_analysis_clears_state(mock_streamlit):
    from src.presentation.streamlit_app import reset_analysis

    mock_streamlit.session_state.update({
        "analysis_result": FALLBACK_ENTRIES["clear"],
        "analysis_error": "boom",
        "uploader_key": 2,
    })

    reset_analysis()

    assert mock_streamlit.session_state.analysis_result is None
    assert mock_streamlit.session_state.analysis_error is None
    assert mock_streamlit.session_state.uploader_key == 3
