import logging
import re

import streamlit as st

from src.application.errors import user_message_for
from src.application.use_cases import ImageAnalysisUseCase
from src.domain.models import DiagnosticRecord
from src.infrastructure.config import Settings
from src.infrastructure.imaging import prepare_upload
from src.infrastructure.llm.gemini_client import GeminiImageClassifierAdapter
from src.infrastructure.llm.mistral_client import MistralImageClassifierAdapter
from src.infrastructure.llm.mock_classifier import MockImageClassifierAdapter


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "⚕️ **温馨提示：** 本分析结果由AI生成，仅供参考，不能替代医生诊断。"
    "如症状持续或加重，请及时就医。"
)

_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|>~<])")


def _escape(text: str) -> str:
    """Model output is untrusted display text; keep markdown from interpreting it."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def build_classifier(settings: Settings):
    provider = settings.classifier_provider
    if provider == "gemini" and settings.gemini_api_key:
        return GeminiImageClassifierAdapter(settings=settings)
    if provider == "mistral" and settings.mistral_api_key:
        return MistralImageClassifierAdapter(settings=settings)
    if provider != "mock":
        logger.warning("No API key configured for %s; using mock classifier.", provider)
    return MockImageClassifierAdapter()


def format_record_markdown(record: DiagnosticRecord) -> str:
    """Format a diagnostic record as a markdown result card."""
    lines = ["### 鼻涕检测\n"]
    detected = "已检测到鼻涕" if record.found else "未检测到鼻涕"
    lines.append(f"**检测结果：** {detected}")
    if record.found and record.location:
        lines.append(f"**位置：** {_escape(record.location)}")
    lines.append("")

    lines.append(f"**颜色特征：** {_escape(record.color_description)}")
    lines.append(f"**可能症状：** {_escape(record.condition)}")
    lines.append("")

    lines.append("### 护理建议\n")
    lines.append(f"**基本建议：** {_escape(record.primary_recommendation)}")
    lines.append(f"**西医解释：** {_escape(record.pathology_basis)}")
    lines.append(f"**中医辨证：** {_escape(record.traditional_assessment)}")
    lines.append(f"**物理疗法：** {_escape(record.physical_care_note)}")

    # two trailing spaces force markdown line breaks
    return "  \n".join(lines)


def _init_session_state():
    if "analysis_result" not in st.session_state:
        st.session_state.analysis_result = None
    if "analysis_error" not in st.session_state:
        st.session_state.analysis_error = None
    if "uploader_key" not in st.session_state:
        st.session_state.uploader_key = 0


def reset_analysis():
    st.session_state.analysis_result = None
    st.session_state.analysis_error = None
    # a fresh key clears the file uploader widget
    st.session_state.uploader_key = st.session_state.get("uploader_key", 0) + 1


def run_analysis(usecase: ImageAnalysisUseCase, data: bytes, filename: str | None) -> None:
    st.session_state.analysis_error = None
    try:
        image = prepare_upload(data, filename)
        st.session_state.analysis_result = usecase.analyze(image)
    except Exception as e:
        logger.exception("Image analysis failed: %s", e)
        st.session_state.analysis_result = None
        st.session_state.analysis_error = user_message_for(e)


def _render_sidebar(settings: Settings):
    st.sidebar.title("⚙️ 设置")
    st.sidebar.markdown("### 模型")
    provider = settings.classifier_provider
    st.sidebar.caption(f"**服务：** {provider}")
    if provider == "gemini":
        st.sidebar.caption(f"**模型：** {settings.gemini_model}")
        configured = bool(settings.gemini_api_key)
    elif provider == "mistral":
        st.sidebar.caption(f"**模型：** {settings.mistral_vision_model}")
        configured = bool(settings.mistral_api_key)
    else:
        configured = False

    if configured:
        st.sidebar.success("✓ API 已配置")
    else:
        st.sidebar.warning("⚠️ 未配置 API 密钥，使用示例结果")


def main():
    settings = Settings()
    logging.basicConfig(level=settings.log_level)

    st.set_page_config(
        page_title="AI智能诊断",
        page_icon="⚕️",
        layout="centered",
        initial_sidebar_state="expanded",
    )

    _init_session_state()
    _render_sidebar(settings)

    st.markdown("# AI智能诊断")
    st.caption("上传照片，获取专业分析和个性化护理建议")
    st.info(DISCLAIMER)

    uploaded = st.file_uploader(
        "上传图片",
        type=["png", "jpg", "jpeg"],
        help="PNG, JPG 格式",
        key=f"uploader_{st.session_state.uploader_key}",
    )

    if uploaded is not None:
        st.image(uploaded, caption="Preview", width=320)

        if st.session_state.analysis_result is None:
            if st.button("开始分析", type="primary"):
                usecase = ImageAnalysisUseCase(classifier=build_classifier(settings))
                with st.spinner("分析中..."):
                    run_analysis(usecase, uploaded.getvalue(), uploaded.name)
                st.rerun()

    if st.session_state.analysis_error:
        st.error(f"❌ {st.session_state.analysis_error}")

    record = st.session_state.analysis_result
    if record is not None:
        st.success("✅ 分析完成")
        st.markdown(format_record_markdown(record))
        if st.button("重新上传", use_container_width=True):
            reset_analysis()
            st.rerun()


if __name__ == "__main__":
    main()
