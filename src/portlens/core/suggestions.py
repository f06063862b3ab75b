"""Suggested actions for a port's owning process.

Two mutually exclusive tiers: a matching rule's own actions, or the
generic per-process heuristics below.
"""

from __future__ import annotations

from portlens.core.rules import RuleCatalogue
from portlens.models.catalogue import ProcessRule
from portlens.models.enums import RiskLevel
from portlens.models.runtime import ProcessRecord, ProjectClassification, Suggestion

# Rule action label -> (description, risk)
ACTION_MEANINGS: dict[str, tuple[str, RiskLevel]] = {
    "停止服务": ("终止进程释放端口", RiskLevel.LOW),
    "重启": ("重启服务", RiskLevel.LOW),
    "查看日志": ("查看应用日志", RiskLevel.NONE),
    "关闭": ("关闭应用", RiskLevel.LOW),
    "查看容器": ("显示相关Docker容器信息", RiskLevel.NONE),
    "停止容器": ("停止Docker容器释放端口", RiskLevel.MEDIUM),
    "查看镜像": ("显示本地Docker镜像", RiskLevel.NONE),
    "重启Docker": ("重启Docker引擎", RiskLevel.MEDIUM),
    "查看任务管理器": ("查看浏览器任务管理器", RiskLevel.NONE),
    "保存文档": ("保存当前文档后关闭", RiskLevel.LOW),
    "查看服务详情": ("查看系统服务详情", RiskLevel.NONE),
}

UNKNOWN_ACTION: tuple[str, RiskLevel] = ("执行操作", RiskLevel.MEDIUM)

# Development runtime process name -> label used in the stop description
DEV_RUNTIMES: dict[str, str] = {
    "node": "Node.js",
    "node.exe": "Node.js",
    "deno": "Deno",
    "deno.exe": "Deno",
    "bun": "Bun",
    "bun.exe": "Bun",
    "java": "Java",
    "python": "Python",
    "python3": "Python",
    "python3.exe": "Python",
}

CONTAINER_PROXIES = frozenset({"docker-proxy", "docker-proxy.exe"})

SYSTEM_PROCESSES = frozenset({
    # Windows
    "svchost.exe",
    "System",
    "smss.exe",
    "csrss.exe",
    "wininit.exe",
    "services.exe",
    "lsass.exe",
    "winlogon.exe",
    "spoolsv.exe",
    "explorer.exe",
    "dwm.exe",
    "taskhost.exe",
    "taskhostw.exe",
    "RuntimeBroker.exe",
    "ShellExperienceHost.exe",
    "SearchUI.exe",
    "sihost.exe",
    "ctfmon.exe",
    "conhost.exe",
    "dllhost.exe",
    "fontdrvhost.exe",
    "Registry",
    "Idle",
    "Secure System",
    "Memory Compression",
    # POSIX
    "systemd",
    "init",
    "launchd",
    "systemd-resolved",
    "systemd-networkd",
    "rpcbind",
    "cupsd",
    "avahi-daemon",
    "chronyd",
})


def is_system_process(process_name: str) -> bool:
    """True for core OS processes that must not be force-terminated."""
    return process_name in SYSTEM_PROCESSES


def translate_action(action: str) -> Suggestion:
    """Turn a rule action label into a Suggestion."""
    description, risk = ACTION_MEANINGS.get(action, UNKNOWN_ACTION)
    return Suggestion(action=action, description=description, risk_level=risk)


def rule_suggestions(rule: ProcessRule) -> tuple[Suggestion, ...]:
    return tuple(translate_action(a) for a in rule.actions)


def generic_suggestions(
    process: ProcessRecord, project: ProjectClassification | None
) -> tuple[Suggestion, ...]:
    """Heuristics for processes without a catalogue rule."""
    runtime = DEV_RUNTIMES.get(process.name)
    if runtime is not None:
        suggestions = [
            Suggestion("停止服务", f"终止{runtime}进程释放端口", RiskLevel.LOW),
        ]
        if project is not None:
            suggestions.append(Suggestion("重启服务", "重启开发服务器", RiskLevel.LOW))
            suggestions.append(Suggestion("打开浏览器", "在浏览器中查看应用", RiskLevel.NONE))
        return tuple(suggestions)

    if process.name in CONTAINER_PROXIES:
        return (
            Suggestion("查看容器", "显示相关Docker容器信息", RiskLevel.NONE),
            Suggestion("停止容器", "停止Docker容器释放端口", RiskLevel.MEDIUM),
        )

    if is_system_process(process.name):
        return (Suggestion("查看详情", "查看系统进程详细信息", RiskLevel.NONE),)

    return (Suggestion("终止进程", "强制终止进程释放端口", RiskLevel.HIGH),)


def suggest(
    process: ProcessRecord,
    project: ProjectClassification | None,
    rules: RuleCatalogue,
) -> tuple[Suggestion, ...]:
    """Rule actions when the process name is catalogued, else generic advice."""
    rule = rules.by_name(process.name)
    if rule is not None:
        return rule_suggestions(rule)
    return generic_suggestions(process, project)
