"""Core entities without I/O for the code agents."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Any, Mapping


class Severity(Enum):
    """Closed severity scale shared by every scanner."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def weight(self) -> int:
        """Risk weight used by the security score."""

        return _SEVERITY_WEIGHTS[self]

    @property
    def is_blocking(self) -> bool:
        return self in (Severity.CRITICAL, Severity.HIGH)


_SEVERITY_WEIGHTS = {
    Severity.CRITICAL: 10,
    Severity.HIGH: 7,
    Severity.MEDIUM: 4,
    Severity.LOW: 1,
    Severity.INFO: 0,
}


class Framework(Enum):
    """Application frameworks the convention checks understand."""

    RAILS = "rails"
    REACT_NATIVE = "react-native"
    GRAPHQL = "graphql"


class TestFramework(Enum):
    """Test runners the scaffolding generator can target."""

    __test__ = False

    RSPEC = "rspec"
    JEST = "jest"


class TestType(Enum):
    __test__ = False

    UNIT = "unit"
    INTEGRATION = "integration"
    E2E = "e2e"
    COMPONENT = "component"


class ComponentType(Enum):
    MODEL = "model"
    CONTROLLER = "controller"
    SERVICE = "service"
    COMPONENT = "component"
    HOOK = "hook"
    SCHEMA = "schema"
    RESOLVER = "resolver"


class SmellType(Enum):
    """Code smell kinds reported by the clean-code scanner."""

    LONG_METHOD = "long-method"
    LARGE_CLASS = "large-class"
    DUPLICATION = "duplication"
    COMPLEXITY = "complexity"
    MAGIC_NUMBERS = "magic-numbers"
    DEAD_CODE = "dead-code"


REFACTORING_SMELLS = (
    SmellType.LONG_METHOD,
    SmellType.LARGE_CLASS,
    SmellType.DUPLICATION,
    SmellType.COMPLEXITY,
)
"""Smell kinds that ``suggest-refactoring`` accepts as a filter."""


class DocFormat(Enum):
    MARKDOWN = "markdown"
    JSON = "json"
    HTML = "html"


class Language(Enum):
    """Source languages recognised from file extensions."""

    RUBY = "ruby"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    GRAPHQL = "graphql"
    PYTHON = "python"
    UNKNOWN = "unknown"

    @property
    def is_javascript_family(self) -> bool:
        return self in (Language.JAVASCRIPT, Language.TYPESCRIPT)


_EXTENSION_LANGUAGES = {
    "rb": Language.RUBY,
    "js": Language.JAVASCRIPT,
    "jsx": Language.JAVASCRIPT,
    "ts": Language.TYPESCRIPT,
    "tsx": Language.TYPESCRIPT,
    "graphql": Language.GRAPHQL,
    "gql": Language.GRAPHQL,
    "py": Language.PYTHON,
}


def detect_language(file_path: str | None) -> Language:
    """Map a file path to its language using only the extension."""

    if not file_path:
        return Language.UNKNOWN
    suffix = PurePath(file_path).suffix.lstrip(".").lower()
    return _EXTENSION_LANGUAGES.get(suffix, Language.UNKNOWN)


def enum_values(enum_type: type[Enum]) -> list[str]:
    """Return the wire spellings of an enum, in declaration order."""

    return [member.value for member in enum_type]


@dataclass(frozen=True)
class Finding:
    """Single heuristic result produced fresh for one invocation."""

    kind: str
    severity: Severity
    message: str
    recommendation: str | None = None
    line: int | None = None
    position: int | None = None
    details: tuple[Mapping[str, Any], ...] = field(default=())

    def to_mapping(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.kind,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.recommendation is not None:
            payload["recommendation"] = self.recommendation
        if self.line is not None:
            payload["line"] = self.line
        if self.position is not None:
            payload["position"] = self.position
        if self.details:
            payload["details"] = [dict(detail) for detail in self.details]
        return payload


@dataclass(frozen=True)
class ToolDescriptor:
    """Immutable description of a tool exposed by an agent."""

    name: str
    description: str
    input_schema: Mapping[str, Any]

    def to_mapping(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": dict(self.input_schema),
        }
