"""
Pytest 测试配置
提供测试数据库、Mock LLM、Mock 分析提供方等测试基础设施
"""

import io
import sys
from pathlib import Path
from typing import Generator, List

import pytest
from docx import Document
from sqlmodel import Session
from unittest.mock import Mock

# 添加项目根目录到 sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from resume_analyzer.agent.analysis_provider import AnalysisProvider
from resume_analyzer.agent.models import AnalysisResult
from resume_analyzer.db.init_db import create_tables, get_engine
from resume_analyzer.models.resume import FileMeta, ResumeRecord
from resume_analyzer.repositories.resume_repository import ResumeRepository
from resume_analyzer.services.file_storage import FileStorage
from resume_analyzer.services.resume_service import ResumeService

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

RESUME_TEXT = (
    "Senior backend engineer with 6 years of Python and Django experience. "
    "Built REST APIs on AWS with Docker and PostgreSQL. Led a team of 5 using Agile."
)


def make_docx_bytes(paragraphs: List[str]) -> bytes:
    """生成内存中的 docx 文件"""
    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def make_analysis_payload(match_percentage=75, target_job="Software Engineer") -> dict:
    """构造 LLM 返回的分析 JSON"""
    return {
        "strengths": [
            {"skill": "Python", "confidence": 0.9, "description": "6 years of production Python"}
        ],
        "missingSkills": [
            {"skill": "Kubernetes", "importance": "medium", "suggestion": "Deploy a side project on k8s"}
        ],
        "skillMatch": {
            "targetJob": target_job,
            "matchPercentage": match_percentage,
            "matchedSkills": ["Python", "Django"],
            "missingSkills": ["Kubernetes"]
        },
        "suggestions": [
            {
                "category": "content",
                "title": "Quantify impact",
                "description": "Add numbers to achievements",
                "priority": "high"
            }
        ],
        "bulletPoints": [
            {"category": "experience", "points": ["Cut API latency by 40%"]}
        ]
    }


# ==================== 测试数据工具 Fixtures ====================

@pytest.fixture
def docx_factory():
    """返回 docx 生成函数"""
    return make_docx_bytes


@pytest.fixture
def analysis_payload():
    """返回分析 JSON 构造函数"""
    return make_analysis_payload


@pytest.fixture
def resume_text() -> str:
    """一段足够长、包含多个技能的简历文本"""
    return RESUME_TEXT


@pytest.fixture
def docx_mime_type() -> str:
    return DOCX_MIME_TYPE


# ==================== 数据库 Fixtures ====================

@pytest.fixture(scope="function")
def test_db_engine():
    """
    创建测试用的内存数据库引擎
    每个测试函数都会获得一个全新的数据库
    """
    engine = get_engine("sqlite:///:memory:")
    create_tables(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """
    创建测试用的数据库会话
    """
    with Session(test_db_engine) as session:
        yield session


@pytest.fixture(scope="function")
def resume_repository(test_db_session: Session) -> ResumeRepository:
    """
    创建 ResumeRepository 实例
    """
    return ResumeRepository(test_db_session)


# ==================== Mock LLM Fixtures ====================

@pytest.fixture(scope="function")
def mock_llm():
    """
    Mock LLM 实例
    用于测试 AnalysisProvider，避免真实调用 LLM API
    """
    mock = Mock()
    mock.invoke.return_value = Mock(content="[]")
    return mock


@pytest.fixture(scope="function")
def mock_llm_factory(mock_llm):
    """
    Mock LLMFactory
    三类调用共用同一个 mock_llm
    """
    factory = Mock()
    factory.create_llm.return_value = mock_llm
    return factory


@pytest.fixture(scope="function")
def mock_provider():
    """
    Mock AnalysisProvider
    默认返回一份合法的分析结果
    """
    provider = Mock(spec=AnalysisProvider)
    provider.analyze.return_value = AnalysisResult.model_validate(make_analysis_payload())
    provider.generate_bullet_points.return_value = [f"Point {i}" for i in range(1, 8)]
    return provider


# ==================== 服务 Fixtures ====================

@pytest.fixture(scope="function")
def file_storage(tmp_path) -> FileStorage:
    """
    使用临时目录的文件存储
    """
    return FileStorage(str(tmp_path / "uploads"))


@pytest.fixture(scope="function")
def resume_service(test_db_engine, mock_provider, file_storage) -> ResumeService:
    """
    创建 ResumeService 实例
    """
    return ResumeService(
        provider=mock_provider,
        engine=test_db_engine,
        storage=file_storage,
        stale_after_seconds=600
    )


# ==================== 测试数据 Fixtures ====================

@pytest.fixture(scope="function")
def uploaded_resume(resume_service: ResumeService):
    """
    通过服务上传一份 docx 简历，返回 UploadSummary
    """
    data = make_docx_bytes([RESUME_TEXT])
    return resume_service.upload(
        owner_id="user-1",
        data=data,
        mime_type=DOCX_MIME_TYPE,
        original_name="cv.docx",
        file_size=len(data)
    )


@pytest.fixture(scope="function")
def make_record(resume_repository: ResumeRepository):
    """
    直接通过 Repository 创建记录的工厂
    """
    def _make(owner_id: str = "user-1", text: str = RESUME_TEXT, name: str = "cv.pdf") -> ResumeRecord:
        return resume_repository.create(
            owner_id=owner_id,
            file_meta=FileMeta(
                original_name=name,
                file_name=f"stored-{name}",
                file_path=f"/tmp/stored-{name}",
                file_size=1024,
                mime_type="application/pdf"
            ),
            extracted_text=text
        )

    return _make


# ==================== Pytest 配置 ====================

def pytest_configure(config):
    """
    Pytest 初始化配置
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
    config.addinivalue_line(
        "markers", "slow: Slow running tests"
    )
