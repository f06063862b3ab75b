"""Project detection: ordered signature scan, then per-runtime fallback."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath, PureWindowsPath

from portlens.models.catalogue import ProcessFamily, ProjectSignature
from portlens.models.runtime import (
    PortRange,
    ProcessRecord,
    ProjectClassification,
    in_ranges,
)

logger = logging.getLogger("portlens.signatures")


def _sig(name, project_type, desc, process_names, patterns, ranges=None) -> ProjectSignature:
    return ProjectSignature(
        name=name,
        project_type=project_type,
        description=desc,
        process_names=tuple(process_names),
        command_patterns=tuple(patterns),
        port_ranges=tuple(PortRange(a, b) for a, b in ranges) if ranges else None,
    )


DEFAULT_SIGNATURES: tuple[ProjectSignature, ...] = (
    _sig("React开发服务器", "React", "前端React开发项目，提供热重载和开发服务",
         ["node"], ["react-scripts", "webpack"], [(3000, 3999)]),
    _sig("Vue开发服务器", "Vue", "前端Vue开发项目",
         ["node"], ["vue-cli", "vite"], [(5173, 5173), (8080, 8080)]),
    _sig("Next.js开发服务器", "Next.js", "React框架Next.js开发项目",
         ["node"], ["next"], [(3000, 3000)]),
    _sig("Spring Boot应用", "Spring", "Java Spring Boot后端服务",
         ["java"], ["spring-boot"], [(8080, 8080)]),
    _sig("Flask应用", "Flask", "Python Flask Web应用",
         ["python"], ["flask"], [(5000, 5000)]),
    _sig("Django应用", "Django", "Python Django Web应用",
         ["python"], ["django", "runserver"], [(8000, 8000)]),
)

# Markers name a project type above; the signature's text is reused.
DEFAULT_FAMILIES: tuple[ProcessFamily, ...] = (
    ProcessFamily(
        process_names=frozenset({"node", "node.exe"}),
        name="Node.js应用",
        project_type="Node.js",
        description="Node.js后端服务或工具",
        markers=(("react-scripts", "React"), ("vue-cli", "Vue"), ("next", "Next.js")),
    ),
    ProcessFamily(
        process_names=frozenset({"java", "java.exe"}),
        name="Java应用",
        project_type="Java",
        description="Java应用程序",
        markers=(("spring", "Spring"),),
    ),
    ProcessFamily(
        process_names=frozenset({"python", "python.exe", "python3", "python3.exe"}),
        name="Python应用",
        project_type="Python",
        description="Python应用程序",
        markers=(("flask", "Flask"), ("django", "Django")),
    ),
    ProcessFamily(
        process_names=frozenset({"docker-proxy", "docker-proxy.exe"}),
        name="Docker容器",
        project_type="Docker",
        description="Docker容器端口映射",
        derive_path=False,
    ),
)


def extract_project_path(cmd: Sequence[str]) -> str | None:
    """Parent directory of the first command token that looks like a path."""
    for arg in cmd:
        if "\\" in arg:
            path = PureWindowsPath(arg)
        elif "/" in arg:
            path = PurePosixPath(arg)
        else:
            continue
        parent = path.parent
        if parent == path:
            return None
        return str(parent)
    return None


def _any_token_contains(cmd: Sequence[str], pattern: str) -> bool:
    return any(pattern in token for token in cmd)


def signature_matches(sig: ProjectSignature, process: ProcessRecord, port: int) -> bool:
    """Name substring AND command substring AND (if given) port range."""
    if not any(name in process.name for name in sig.process_names):
        return False
    if not any(_any_token_contains(process.cmd, p) for p in sig.command_patterns):
        return False
    if sig.port_ranges is not None and not in_ranges(port, sig.port_ranges):
        return False
    return True


class SignatureCatalogue:
    """Classifies processes into projects.

    Signatures are tried in order and the first full match wins. If none
    match, the exact-name runtime families provide a coarser default.
    """

    def __init__(
        self,
        signatures: Iterable[ProjectSignature] = DEFAULT_SIGNATURES,
        families: Iterable[ProcessFamily] = DEFAULT_FAMILIES,
    ) -> None:
        self._signatures = tuple(signatures)
        self._families = tuple(families)
        self._by_type: dict[str, ProjectSignature] = {}
        for sig in self._signatures:
            self._by_type.setdefault(sig.project_type, sig)

    @classmethod
    def with_overrides(cls, extra: Iterable[ProjectSignature]) -> SignatureCatalogue:
        """Default signatures with ``extra`` scanned first."""
        return cls((*extra, *DEFAULT_SIGNATURES))

    @property
    def signatures(self) -> tuple[ProjectSignature, ...]:
        return self._signatures

    def detect(self, process: ProcessRecord, port: int) -> ProjectClassification | None:
        for sig in self._signatures:
            if signature_matches(sig, process, port):
                logger.debug("pid %d matched signature %s", process.pid, sig.project_type)
                return ProjectClassification(
                    name=sig.name,
                    project_type=sig.project_type,
                    description=sig.description,
                    path=extract_project_path(process.cmd),
                )
        return self._detect_generic(process)

    def _detect_generic(self, process: ProcessRecord) -> ProjectClassification | None:
        family = next(
            (f for f in self._families if process.name in f.process_names), None
        )
        if family is None:
            return None

        path = extract_project_path(process.cmd) if family.derive_path else None
        for marker, project_type in family.markers:
            sig = self._by_type.get(project_type)
            if sig is not None and _any_token_contains(process.cmd, marker):
                return ProjectClassification(
                    name=sig.name,
                    project_type=sig.project_type,
                    description=sig.description,
                    path=path,
                )

        return ProjectClassification(
            name=family.name,
            project_type=family.project_type,
            description=family.description,
            path=path,
        )
