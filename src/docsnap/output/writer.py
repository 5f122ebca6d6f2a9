"""Writing extracted documents to disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..models.config import ExportFormat
from ..models.document import ExtractedDocument
from .formatters import extract_domain_name, format_as_json, format_as_markdown, sanitize_filename

logger = logging.getLogger(__name__)


class DocumentWriter:
    """
    Saves extracted documents as Markdown and/or JSON files.

    Files go to ``{directory}/{folder}/{title_stem}.md|.json``, where the
    folder defaults to a short name derived from the page's domain. Stems
    that repeat within one writer get a numeric suffix instead of
    overwriting an earlier page.

    Example:
        writer = DocumentWriter(Path("./docs"), ExportFormat.BOTH)
        paths = await writer.write(doc)
    """

    def __init__(self, directory: Path, export_format: ExportFormat = ExportFormat.MARKDOWN) -> None:
        """
        Initialize the writer.

        Args:
            directory: Base output directory
            export_format: Which file types to write
        """
        self._base_dir = directory
        self._format = export_format
        self._used_stems: dict[str, int] = {}

    def _validate_output_path(self, output_path: Path) -> Path:
        """
        Validate that output path is inside the base directory.

        Raises:
            ValueError: If path is outside base directory
        """
        resolved = output_path.resolve()
        base_resolved = self._base_dir.resolve()
        try:
            resolved.relative_to(base_resolved)
        except ValueError as err:
            raise ValueError(f"Output path {resolved} is outside base directory {base_resolved}") from err
        return resolved

    def _unique_stem(self, folder: str, title: str) -> str:
        stem = sanitize_filename(title)
        key = f"{folder}/{stem}"
        count = self._used_stems.get(key, 0) + 1
        self._used_stems[key] = count
        return stem if count == 1 else f"{stem}_{count}"

    def render(self, doc: ExtractedDocument) -> dict[str, str]:
        """
        Render a document in the configured formats.

        Args:
            doc: The extracted document

        Returns:
            Mapping of file suffix (".md", ".json") to file content
        """
        outputs: dict[str, str] = {}
        if self._format in (ExportFormat.MARKDOWN, ExportFormat.BOTH):
            outputs[".md"] = format_as_markdown(doc)
        if self._format in (ExportFormat.JSON, ExportFormat.BOTH):
            outputs[".json"] = format_as_json(doc)
        return outputs

    async def write(self, doc: ExtractedDocument, folder: str | None = None) -> list[Path]:
        """
        Write a document to disk.

        Args:
            doc: The extracted document
            folder: Sub-folder name (derived from the document URL if None)

        Returns:
            Paths of the written files

        Raises:
            ValueError: If the target path escapes the base directory
            OSError: On file system errors
        """
        folder = folder or extract_domain_name(doc.url)
        stem = self._unique_stem(folder, doc.title)

        written = []
        for suffix, content in self.render(doc).items():
            path = self._validate_output_path(self._base_dir / folder / f"{stem}{suffix}")
            path.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_text, content, encoding="utf-8")
            logger.info(f"Saved: {path}")
            written.append(path)

        return written
