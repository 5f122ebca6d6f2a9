"""Pydantic configuration models for docsnap."""

from enum import Enum
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, NonNegativeFloat


class ExportFormat(str, Enum):
    """Output formats for extracted documents."""

    MARKDOWN = "markdown"
    JSON = "json"
    BOTH = "both"


# Elements that typically contain main content, in priority order
DEFAULT_CONTENT_SELECTORS = [
    "main",
    "article",
    '[role="main"]',
    ".main-content",
    ".content",
    "#content",
    ".post-content",
    ".article-content",
    ".documentation",
    ".docs-content",
    ".markdown-body",  # GitHub
    ".prose",  # Tailwind typography
    ".theme-doc-markdown",  # Docusaurus
    ".vp-doc",  # VitePress
    ".md-content",  # Material for MkDocs
    ".document",  # ReadTheDocs
]

# Elements dropped from the rendered copy before conversion
DEFAULT_REMOVE_SELECTORS = [
    "nav",
    "script",
    "style",
    "noscript",
    "svg",
    "iframe",
    ".ad",
    ".advertisement",
    ".cookie-banner",
]

# Sidebar / table-of-contents idioms of common documentation generators
DEFAULT_SIDEBAR_SELECTORS = [
    ".sidebar nav a",
    ".docs-sidebar a",
    ".toc a",
    ".table-of-contents a",
    "nav.docs a",
    '[class*="sidebar"] nav a',
    '[class*="sidebar"] ul a',
    "aside nav a",
    ".documentation-nav a",
    ".doc-nav a",
    ".docs-menu a",
    # Docusaurus
    ".theme-doc-sidebar-menu a",
    ".menu__link",
    # VitePress
    ".VPSidebar a",
    ".VPSidebarItem a",
    ".vp-sidebar a",
    # GitBook
    ".gitbook-navigation a",
    '[data-testid="toc"] a',
    # Material for MkDocs
    ".md-nav a",
    ".md-sidebar a",
    # ReadTheDocs
    ".rst-content .toctree a",
    ".wy-menu a",
    # Nextra
    "[data-nextra-toc] a",
    # General patterns
    "[data-docs-sidebar] a",
    ".nav-link",
]

DEFAULT_EXCLUDED_EXTENSIONS = [".pdf", ".zip", ".tar", ".gz", ".exe", ".dmg", ".pkg"]


class ExtractionConfig(BaseModel):
    """Tuning knobs for content region selection and Markdown rendering."""

    min_content_words: int = Field(
        50,
        ge=0,
        description="Word count a selector match must exceed to count as main content",
    )
    paragraph_weight: int = Field(10, ge=0, description="Density score added per <p>")
    heading_weight: int = Field(20, ge=0, description="Density score added per <h1>-<h6>")
    content_selectors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTENT_SELECTORS),
        description="CSS selectors tried in order to find the main content",
    )
    remove_selectors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REMOVE_SELECTORS),
        description="CSS selectors removed from the rendered copy",
    )

    model_config = {"extra": "forbid"}


class NavigationConfig(BaseModel):
    """Tuning knobs for sibling-page discovery."""

    sidebar_min_links: int = Field(
        2,
        ge=0,
        description="A sidebar selector must match more than this many links",
    )
    enough_links: int = Field(
        3,
        ge=0,
        description="Stop widening the search once more than this many links are found",
    )
    landmark_min_links: int = Field(
        5,
        ge=0,
        description="A nav/aside landmark must contain more than this many links",
    )
    list_min_internal_links: int = Field(
        5,
        ge=0,
        description="A list must contain more than this many same-origin links",
    )
    internal_link_ratio: float = Field(
        0.8,
        ge=0,
        le=1,
        description="Share of same-origin links a list must exceed",
    )
    sidebar_selectors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SIDEBAR_SELECTORS),
        description="CSS selectors for sidebar links, tried in order",
    )
    excluded_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_EXTENSIONS),
        description="File extensions never treated as documentation pages",
    )

    model_config = {"extra": "forbid"}


class OutputConfig(BaseModel):
    """Configuration for output formatting and file saving."""

    directory: Path = Field(Path("./docs"), description="Output directory")
    format: ExportFormat = Field(ExportFormat.MARKDOWN, description="Output format")

    model_config = {"extra": "forbid"}


class NetworkConfig(BaseModel):
    """Configuration for HTTP client and network behavior."""

    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")
    max_retries: int = Field(3, ge=0, description="Maximum retry attempts for failed requests")
    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds")
    rate_limit: float = Field(0.5, ge=0, description="Minimum seconds between requests to same host")
    host_rate_limits: dict[str, NonNegativeFloat] = Field(
        default_factory=dict,
        description="Per-host overrides of rate_limit, keyed by host name",
    )
    max_page_bytes: int = Field(20 * 1024 * 1024, gt=0, description="Largest page body accepted")

    model_config = {"extra": "forbid"}


class DocsnapConfig(BaseModel):
    """
    Root configuration model for docsnap.

    Example:
        config = DocsnapConfig(
            url="https://docs.example.com/intro",
            output=OutputConfig(directory=Path("./snapped"), format=ExportFormat.BOTH),
        )

    YAML format:
        url: https://docs.example.com/intro
        navigation:
          enough_links: 5
        output:
          format: json
    """

    url: Optional[str] = Field(None, description="Target URL to extract")

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    navigation: NavigationConfig = Field(default_factory=NavigationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "DocsnapConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "DocsnapConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
