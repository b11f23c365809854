"""Documentation agent: API docs, inline doc stubs and README skeletons."""

from __future__ import annotations

from typing import Any, Mapping

from ..domain.models import DocFormat, Language, detect_language
from ..services import docs
from .base import (
    CODE_PROPERTY,
    FILE_PATH_PROPERTY,
    BaseAgent,
    enum_property,
    object_schema,
    string_array_property,
    string_property,
)

RENDERERS = {
    DocFormat.MARKDOWN: docs.render_markdown,
    DocFormat.HTML: docs.render_html,
    DocFormat.JSON: docs.render_json,
}


def _language(arguments: Mapping[str, Any]) -> Language:
    explicit = arguments.get("language")
    if explicit:
        return Language(explicit)
    return detect_language(arguments.get("filePath"))


class DocumentationAgent(BaseAgent):
    name = "documentation-agent"
    description = "API documentation, inline doc stubs and README generation"

    def register_tools(self) -> None:
        self.tool(
            "generate-api-docs",
            "Generate API documentation from code",
            object_schema(
                {
                    "code": CODE_PROPERTY,
                    "filePath": FILE_PATH_PROPERTY,
                    "language": enum_property(
                        Language, "Overrides the language detected from filePath"
                    ),
                    "format": enum_property(
                        DocFormat, "Output format", default=DocFormat.MARKDOWN
                    ),
                },
                required=("code",),
            ),
        )(self.generate_api_docs)
        self.tool(
            "update-inline-docs",
            "Add or update inline documentation",
            object_schema(
                {
                    "code": CODE_PROPERTY,
                    "language": enum_property(Language, "Programming language"),
                },
                required=("code",),
            ),
        )(self.update_inline_docs)
        self.tool(
            "generate-readme",
            "Generate README documentation",
            object_schema(
                {
                    "projectName": string_property("Project name"),
                    "description": string_property("Project description"),
                    "techStack": string_array_property("Technologies used"),
                },
                required=("projectName",),
            ),
        )(self.generate_readme)

    def generate_api_docs(self, arguments: Mapping[str, Any]) -> str:
        language = _language(arguments)
        doc_format = DocFormat(arguments.get("format") or DocFormat.MARKDOWN.value)
        units = docs.extract_units(arguments["code"], language)
        document = docs.build_document(
            units, arguments.get("filePath"), language, doc_format.value
        )
        return RENDERERS[doc_format](document)

    def update_inline_docs(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        language = Language(arguments.get("language") or Language.UNKNOWN.value)
        return {
            "updatedCode": docs.add_inline_docs(arguments["code"], language),
            "language": language.value,
        }

    def generate_readme(self, arguments: Mapping[str, Any]) -> str:
        return docs.render_readme(
            arguments["projectName"],
            arguments.get("description"),
            list(arguments.get("techStack") or []),
        )
