"""Tests for suggestion generation."""

from portlens.core.rules import RuleCatalogue
from portlens.core.suggestions import (
    generic_suggestions,
    is_system_process,
    suggest,
    translate_action,
)
from portlens.models.catalogue import ProcessRule
from portlens.models.enums import RiskLevel
from portlens.models.runtime import ProcessRecord, ProjectClassification

PROJECT = ProjectClassification(name="React开发服务器", project_type="React", description="")


def _proc(name):
    return ProcessRecord(pid=1, name=name)


def _pairs(suggestions):
    return [(s.action, s.risk_level) for s in suggestions]


class TestTranslateAction:
    def test_known_label(self):
        s = translate_action("停止容器")
        assert s.description == "停止Docker容器释放端口"
        assert s.risk_level is RiskLevel.MEDIUM

    def test_unknown_label_defaults(self):
        s = translate_action("跳舞")
        assert s.action == "跳舞"
        assert s.description == "执行操作"
        assert s.risk_level is RiskLevel.MEDIUM


class TestRuleTier:
    def test_rule_actions_only(self):
        out = suggest(_proc("chrome.exe"), None, RuleCatalogue())
        assert _pairs(out) == [("关闭", RiskLevel.LOW), ("查看任务管理器", RiskLevel.NONE)]

    def test_rule_wins_over_generic(self):
        rules = RuleCatalogue([
            ProcessRule(process_name="node.exe", app_name="Node", description="", actions=("查看日志",)),
        ])
        out = suggest(_proc("node.exe"), PROJECT, rules)
        assert _pairs(out) == [("查看日志", RiskLevel.NONE)]

    def test_rule_with_no_actions(self):
        assert suggest(_proc("System"), None, RuleCatalogue()) == ()

    def test_docker_engine_labels(self):
        out = suggest(_proc("docker.exe"), None, RuleCatalogue())
        assert [s.action for s in out] == ["查看容器", "查看镜像", "重启Docker"]


class TestGenericTier:
    def test_runtime_with_project(self):
        out = generic_suggestions(_proc("node.exe"), PROJECT)
        assert _pairs(out) == [
            ("停止服务", RiskLevel.LOW),
            ("重启服务", RiskLevel.LOW),
            ("打开浏览器", RiskLevel.NONE),
        ]

    def test_runtime_without_project(self):
        out = generic_suggestions(_proc("node"), None)
        assert _pairs(out) == [("停止服务", RiskLevel.LOW)]
        assert "Node.js" in out[0].description

    def test_container_proxy(self):
        out = generic_suggestions(_proc("docker-proxy"), None)
        assert _pairs(out) == [("查看容器", RiskLevel.NONE), ("停止容器", RiskLevel.MEDIUM)]

    def test_system_process(self):
        out = generic_suggestions(_proc("svchost.exe"), None)
        assert _pairs(out) == [("查看详情", RiskLevel.NONE)]

    def test_anything_else(self):
        out = generic_suggestions(_proc("mystery-daemon"), None)
        assert _pairs(out) == [("终止进程", RiskLevel.HIGH)]

    def test_suggest_falls_through_without_rule(self):
        out = suggest(_proc("svchost.exe"), None, RuleCatalogue())
        assert _pairs(out) == [("查看详情", RiskLevel.NONE)]


class TestIsSystemProcess:
    def test_windows_and_posix(self):
        assert is_system_process("lsass.exe")
        assert is_system_process("systemd")
        assert not is_system_process("node")
