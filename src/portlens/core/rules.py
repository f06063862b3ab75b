"""Rule catalogue: curated metadata and actions keyed by exact process name."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from portlens.models.catalogue import ProcessRule
from portlens.models.enums import ProcessCategory as C
from portlens.models.runtime import PortRange, in_ranges

logger = logging.getLogger("portlens.rules")

_SERVICE_ACTIONS = ("停止服务", "重启", "查看日志")
_BROWSER_ACTIONS = ("关闭", "查看任务管理器")
_DOCUMENT_ACTIONS = ("关闭", "保存文档")


def _rule(name, app, desc, category, ranges=None, actions=()) -> ProcessRule:
    return ProcessRule(
        process_name=name,
        app_name=app,
        description=desc,
        category=category,
        port_ranges=tuple(PortRange(a, b) for a, b in ranges) if ranges else None,
        actions=tuple(actions),
    )


# No node or svchost rules: both fall through to the generic suggestions.
DEFAULT_RULES: tuple[ProcessRule, ...] = (
    # Development runtimes
    _rule("java.exe", "Java应用", "Java运行时环境，用于运行Java应用", C.DEVELOPMENT,
          [(8080, 8099), (9000, 9999)], _SERVICE_ACTIONS),
    _rule("python.exe", "Python应用", "Python解释器，用于运行Python应用", C.DEVELOPMENT,
          [(5000, 5999), (8000, 8999)], _SERVICE_ACTIONS),
    # Browsers
    _rule("chrome.exe", "Google Chrome", "Google Chrome浏览器", C.BROWSER, None, _BROWSER_ACTIONS),
    _rule("chrome", "Google Chrome", "Google Chrome浏览器", C.BROWSER, None, _BROWSER_ACTIONS),
    _rule("firefox.exe", "Mozilla Firefox", "Mozilla Firefox浏览器", C.BROWSER, None, _BROWSER_ACTIONS),
    _rule("firefox", "Mozilla Firefox", "Mozilla Firefox浏览器", C.BROWSER, None, _BROWSER_ACTIONS),
    _rule("msedge.exe", "Microsoft Edge", "Microsoft Edge浏览器", C.BROWSER, None, _BROWSER_ACTIONS),
    # Databases
    _rule("mysqld.exe", "MySQL数据库", "MySQL数据库服务器", C.DATABASE, [(3306, 3306)], _SERVICE_ACTIONS),
    _rule("mysqld", "MySQL数据库", "MySQL数据库服务器", C.DATABASE, [(3306, 3306)], _SERVICE_ACTIONS),
    _rule("postgres.exe", "PostgreSQL数据库", "PostgreSQL数据库服务器", C.DATABASE,
          [(5432, 5432)], _SERVICE_ACTIONS),
    _rule("postgres", "PostgreSQL数据库", "PostgreSQL数据库服务器", C.DATABASE,
          [(5432, 5432)], _SERVICE_ACTIONS),
    _rule("mongod.exe", "MongoDB数据库", "MongoDB数据库服务器", C.DATABASE, [(27017, 27017)], _SERVICE_ACTIONS),
    _rule("mongod", "MongoDB数据库", "MongoDB数据库服务器", C.DATABASE, [(27017, 27017)], _SERVICE_ACTIONS),
    _rule("redis-server", "Redis", "Redis内存数据库", C.DATABASE, [(6379, 6379)], _SERVICE_ACTIONS),
    # Container tooling
    _rule("docker.exe", "Docker引擎", "Docker容器化平台", C.DOCKER, None,
          ("查看容器", "查看镜像", "重启Docker")),
    _rule("dockerd", "Docker引擎", "Docker守护进程", C.DOCKER, [(2375, 2376)],
          ("查看容器", "查看镜像", "重启Docker")),
    _rule("docker-proxy.exe", "Docker容器", "Docker容器端口映射代理", C.DOCKER, None,
          ("查看容器", "停止容器", "查看日志")),
    # Core OS
    _rule("System", "Windows系统", "Windows操作系统内核", C.SYSTEM),
    _rule("sshd", "OpenSSH服务", "SSH远程登录服务", C.SYSTEM, [(22, 22)], ("查看服务详情",)),
    # Office
    _rule("WINWORD.EXE", "Microsoft Word", "Microsoft Office Word文档处理软件", C.OFFICE, None, _DOCUMENT_ACTIONS),
    _rule("EXCEL.EXE", "Microsoft Excel", "Microsoft Office Excel电子表格软件", C.OFFICE, None, _DOCUMENT_ACTIONS),
    _rule("POWERPNT.EXE", "Microsoft PowerPoint", "Microsoft Office PowerPoint演示文稿软件", C.OFFICE,
          None, _DOCUMENT_ACTIONS),
    # Media
    _rule("vlc.exe", "VLC媒体播放器", "开源跨平台媒体播放器", C.MEDIA, None, ("关闭",)),
    _rule("vlc", "VLC媒体播放器", "开源跨平台媒体播放器", C.MEDIA, None, ("关闭",)),
)


class RuleCatalogue:
    """Ordered, immutable set of ProcessRules with O(1) name lookup."""

    def __init__(self, rules: Iterable[ProcessRule] = DEFAULT_RULES) -> None:
        self._rules: tuple[ProcessRule, ...] = tuple(rules)
        self._name_map: dict[str, int] = {}
        for i, rule in enumerate(self._rules):
            if rule.process_name in self._name_map:
                logger.debug("Duplicate rule for %s ignored", rule.process_name)
                continue
            self._name_map[rule.process_name] = i

    @classmethod
    def with_overrides(cls, extra: Iterable[ProcessRule]) -> RuleCatalogue:
        """Default catalogue with ``extra`` loaded first so it takes precedence."""
        return cls((*extra, *DEFAULT_RULES))

    def __iter__(self) -> Iterator[ProcessRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def by_name(self, process_name: str) -> ProcessRule | None:
        """Exact-name lookup."""
        index = self._name_map.get(process_name)
        return self._rules[index] if index is not None else None

    def by_port(self, port: int) -> ProcessRule | None:
        """First rule whose port ranges contain ``port``."""
        for rule in self._rules:
            if in_ranges(port, rule.port_ranges):
                return rule
        return None

    def friendly_name(self, process_name: str) -> str:
        """Human name for a process, falling back to the raw name."""
        rule = self.by_name(process_name)
        return rule.app_name if rule else process_name
