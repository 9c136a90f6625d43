"""
分析工作流单元测试
测试路由决策、节点依赖注入和完整图执行
"""

from datetime import timedelta

import pytest

from resume_analyzer.agent.graph import analysis_graph, create_analysis_graph
from resume_analyzer.agent.nodes.lifecycle import (
    FAILED_ERROR_CODE,
    route_after_analysis,
    start_processing_node,
)
from resume_analyzer.core.errors import AnalysisInProgress, MalformedProviderResponse, NotFound
from resume_analyzer.models.base import utc_now
from resume_analyzer.models.resume import Processing, ResumeStatus


class TestRouting:
    """测试路由决策"""

    def test_route_to_complete(self):
        """测试：没有错误时走 complete_node"""
        assert route_after_analysis({"analysis": {}, "error": None}) == "complete_node"

    def test_route_to_fail(self):
        """测试：有错误时走 fail_node"""
        assert route_after_analysis({"error": RuntimeError("x")}) == "fail_node"


class TestGraphStructure:
    """测试图结构"""

    def test_nodes(self):
        """测试：图包含四个生命周期节点"""
        nodes = set(create_analysis_graph().get_graph().nodes)
        assert {"start_processing_node", "run_analysis_node", "complete_node", "fail_node"} <= nodes


class TestGraphExecution:
    """测试完整图执行"""

    def _config(self, engine, provider):
        return {"configurable": {"engine": engine, "provider": provider}}

    def test_missing_dependency(self, make_record):
        """测试：未注入 engine 时报错"""
        record = make_record()
        with pytest.raises(ValueError):
            start_processing_node({"record_id": record.id, "owner_id": "user-1"}, {"configurable": {}})

    def test_unknown_record(self, test_db_engine, mock_provider):
        """测试：记录不存在时报 NotFound"""
        with pytest.raises(NotFound):
            analysis_graph.invoke(
                {"record_id": "missing", "owner_id": "user-1", "target_job": "Software Engineer"},
                config=self._config(test_db_engine, mock_provider)
            )

    def test_completed_run(self, test_db_engine, mock_provider, make_record, resume_repository, test_db_session):
        """测试：成功路径返回分析结果和耗时，并持久化 completed"""
        record = make_record()

        final_state = analysis_graph.invoke(
            {"record_id": record.id, "owner_id": "user-1", "target_job": "Software Engineer"},
            config=self._config(test_db_engine, mock_provider)
        )

        assert final_state["error"] is None
        assert final_state["analysis"]["skillMatch"]["matchPercentage"] == 75
        assert final_state["duration_ms"] >= 0

        test_db_session.expire_all()
        stored = resume_repository.get_by_id(record.id)
        assert stored.status == ResumeStatus.COMPLETED
        assert stored.processing_time_ms == final_state["duration_ms"]

    def test_failed_run(self, test_db_engine, mock_provider, make_record, resume_repository, test_db_session):
        """测试：失败路径把错误留在 state 中并持久化 failed"""
        record = make_record()
        mock_provider.analyze.side_effect = MalformedProviderResponse("not json")

        final_state = analysis_graph.invoke(
            {"record_id": record.id, "owner_id": "user-1", "target_job": "Software Engineer"},
            config=self._config(test_db_engine, mock_provider)
        )

        assert isinstance(final_state["error"], MalformedProviderResponse)

        test_db_session.expire_all()
        stored = resume_repository.get_by_id(record.id)
        assert stored.status == ResumeStatus.FAILED
        assert stored.error["code"] == FAILED_ERROR_CODE
        assert stored.error["message"] == "Malformed provider response: not json"

    def test_wrong_owner_is_not_found_without_mutation(
        self, test_db_engine, mock_provider, make_record, resume_repository, test_db_session
    ):
        """测试：非归属用户在入口节点报 NotFound，记录不变"""
        record = make_record(owner_id="user-1")

        with pytest.raises(NotFound):
            analysis_graph.invoke(
                {"record_id": record.id, "owner_id": "intruder", "target_job": "Software Engineer"},
                config=self._config(test_db_engine, mock_provider)
            )

        test_db_session.expire_all()
        assert resume_repository.get_by_id(record.id).status == ResumeStatus.UPLOADED
        mock_provider.analyze.assert_not_called()

    def test_processing_record_rejected(self, test_db_engine, mock_provider, make_record, test_db_session):
        """测试：正在分析中的记录在入口节点报 AnalysisInProgress"""
        record = make_record()
        record.transition_to(Processing())
        test_db_session.add(record)
        test_db_session.commit()

        with pytest.raises(AnalysisInProgress):
            start_processing_node(
                {"record_id": record.id, "owner_id": "user-1"},
                {"configurable": {"engine": test_db_engine, "stale_after": timedelta(minutes=10)}}
            )

    def test_stale_reentry_blocks_next_request(self, test_db_engine, make_record, test_db_session):
        """测试：重新进入崩溃遗留记录后刷新 updated_at，下一个请求被拒绝"""
        record = make_record()
        record.transition_to(Processing())
        record.updated_at = utc_now() - timedelta(hours=1)
        test_db_session.add(record)
        test_db_session.commit()
        config = {"configurable": {"engine": test_db_engine, "stale_after": timedelta(minutes=10)}}
        state = {"record_id": record.id, "owner_id": "user-1"}

        start_processing_node(state, config)

        with pytest.raises(AnalysisInProgress):
            start_processing_node(state, config)
