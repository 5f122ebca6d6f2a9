"""Records produced by the extraction engine."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class Heading(BaseModel):
    """A heading found in the content region, in document order."""

    level: int = Field(..., ge=1, le=6)
    text: str
    id: Optional[str] = None


class CodeBlock(BaseModel):
    """A fenced code block with its (possibly empty) language hint."""

    language: str = ""
    code: str


class PageLink(BaseModel):
    """A sibling documentation page discovered in navigation."""

    title: str = Field(..., min_length=2)
    url: str
    is_current_page: bool = Field(False, alias="isCurrentPage")

    model_config = {"populate_by_name": True}


class RenderResult(BaseModel):
    """Markdown rendering of a content region plus its side collections."""

    content: str
    headings: list[Heading] = Field(default_factory=list)
    code_blocks: list[CodeBlock] = Field(default_factory=list, alias="codeBlocks")

    model_config = {"populate_by_name": True}


class ExtractedDocument(BaseModel):
    """
    The single output record for one extracted page.

    Serialized with camelCase keys to match the wire format:

        {
            "title": "...",
            "url": "...",
            "extractedAt": "2024-01-01T00:00:00Z",
            "content": "...",
            "headings": [{"level": 1, "text": "...", "id": "..."}],
            "codeBlocks": [{"language": "python", "code": "..."}]
        }
    """

    title: str
    url: str
    extracted_at: datetime = Field(..., alias="extractedAt")
    content: str
    headings: list[Heading] = Field(default_factory=list)
    code_blocks: list[CodeBlock] = Field(default_factory=list, alias="codeBlocks")

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict using the wire field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
