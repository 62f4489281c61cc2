"""
Configuration - Heuristic tables and timings for page inspection.

Every keyword list, selector and threshold used by the classifiers lives here
as data so it can be tuned per site from a YAML file instead of in code.

Example:
    >>> config = load_config("pagescout.yaml")
    >>> config.reveal.tab_settle_ms
    1500
"""

from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError


# Minimum settle intervals (ms). Pages update asynchronously after a click,
# so configuration may lengthen these waits but never shorten them.
MIN_TAB_SETTLE_MS = 1500
MIN_ACCORDION_SETTLE_MS = 300
MIN_CAROUSEL_SETTLE_MS = 500
MIN_FINAL_SETTLE_MS = 500
MAX_CAROUSEL_CLICKS = 20


class LinkRules(BaseModel):
    """Patterns used by the URL classifier"""
    file_extensions: List[str] = Field(
        default_factory=lambda: [
            "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "zip", "txt", "csv",
        ],
        description="Extensions treated as downloadable files",
    )
    content_suffixes: List[str] = Field(
        default_factory=lambda: [".html"],
        description="URL endings that mark a content page",
    )
    content_path_markers: List[str] = Field(
        default_factory=lambda: ["/content/", "/help/"],
        description="Path fragments that mark a documentation page",
    )

    @field_validator("file_extensions")
    @classmethod
    def _strip_dots(cls, value: List[str]) -> List[str]:
        return [ext.lstrip(".").lower() for ext in value if ext.strip(".")]


class ImageRules(BaseModel):
    """Patterns and thresholds used by the content image selector"""
    min_width: float = 50
    min_height: float = 50
    decorative_keywords: List[str] = Field(
        default_factory=lambda: [
            "logo", "icon", "nav", "arrow", "button", "menu", "social", "decorative",
        ]
    )
    # Ancestors that mark page chrome (tags, then class names)
    chrome_tags: List[str] = Field(default_factory=lambda: ["nav", "header", "footer"])
    chrome_classes: List[str] = Field(default_factory=lambda: ["nav", "header", "footer", "menu"])
    # Ancestors that mark the main content region
    content_tags: List[str] = Field(default_factory=lambda: ["main", "article"])
    content_classes: List[str] = Field(
        default_factory=lambda: ["content", "main-content", "article"]
    )
    vector_marker: str = ".svg"
    vector_max_size: float = 100
    likely_content_size: float = 100
    likely_content_alt_length: int = 20
    block_tags: List[str] = Field(
        default_factory=lambda: ["p", "div", "section", "article", "li"]
    )
    context_chars: int = 50
    slug_max_length: int = 30


class RevealRules(BaseModel):
    """Selectors, text filters and timings for the dynamic content revealer"""
    tab_selectors: List[str] = Field(
        default_factory=lambda: [
            '[role="tab"]',
            'button[role="tab"]',
            '.tab',
            '.tab-button',
            '[class*="tab"]',
            'button[class*="tab"]',
            '[data-tab]',
            'button[data-tab]',
        ]
    )
    panel_strip_selectors: List[str] = Field(
        default_factory=lambda: [
            "nav", "header", "footer", ".nav", ".header", ".footer", ".navigation",
            '[role="navigation"]', '[role="banner"]', '[role="complementary"]',
            "script", "style",
        ]
    )
    boilerplate_patterns: List[str] = Field(
        default_factory=lambda: [
            r"User Guide\s*Cancel",
            r"(?m)^[ \t]*Search[ \t]*(?:\n|$)",
            r"Get help faster.*?Create an account",
            r"On this page:.*",
        ],
        description="Regexes removed (case-insensitive) from extracted tab text",
    )
    main_selectors: List[str] = Field(
        default_factory=lambda: ["main", '[role="main"]', "body"]
    )
    accordion_selector: str = 'button[aria-expanded="false"]'
    accordion_chrome_selector: str = "nav, header, footer"
    carousel_next_selector: str = '[aria-label*="next" i]'

    min_tab_content_length: int = 100
    duplicate_prefix_length: int = 200

    tab_settle_ms: int = Field(default=MIN_TAB_SETTLE_MS, ge=MIN_TAB_SETTLE_MS)
    accordion_settle_ms: int = Field(default=MIN_ACCORDION_SETTLE_MS, ge=MIN_ACCORDION_SETTLE_MS)
    carousel_settle_ms: int = Field(default=MIN_CAROUSEL_SETTLE_MS, ge=MIN_CAROUSEL_SETTLE_MS)
    final_settle_ms: int = Field(default=MIN_FINAL_SETTLE_MS, ge=MIN_FINAL_SETTLE_MS)
    carousel_max_clicks: int = Field(default=MAX_CAROUSEL_CLICKS, ge=1, le=MAX_CAROUSEL_CLICKS)


class BrowserSettings(BaseModel):
    """Settings for the Playwright-backed inspector"""
    headless: bool = True
    navigation_timeout_ms: int = Field(default=30000, gt=0)
    wait_after_load_ms: int = Field(default=1000, ge=0)
    reveal_timeout_s: Optional[float] = Field(default=120.0, gt=0)
    viewport_width: int = 1920
    viewport_height: int = 1080
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class InspectorConfig(BaseModel):
    """Complete PageScout configuration"""
    links: LinkRules = Field(default_factory=LinkRules)
    images: ImageRules = Field(default_factory=ImageRules)
    reveal: RevealRules = Field(default_factory=RevealRules)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)


def load_config(path: Optional[Union[str, Path]] = None) -> InspectorConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: YAML file to read. None returns the defaults.

    Returns:
        Validated InspectorConfig

    Raises:
        ConfigError: If the file is missing, is not valid YAML or fails validation
    """
    if path is None:
        return InspectorConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")

    try:
        return InspectorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e
