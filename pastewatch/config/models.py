"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class KeywordRule(BaseModel):
    """A watched keyword and the substrings that suppress its hits."""

    keyword: str = Field(..., description="Literal text to look for in paste lines")
    exceptions: List[str] = Field(
        default_factory=list,
        description="A matched line containing any of these is ignored",
    )

    @field_validator("keyword")
    @classmethod
    def keyword_not_blank(cls, v: str) -> str:
        """Reject empty keywords; they would match every line."""
        if not v.strip():
            raise ValueError("keyword cannot be empty or whitespace-only")
        return v

    @field_validator("exceptions")
    @classmethod
    def drop_empty_exceptions(cls, v: List[str]) -> List[str]:
        """Drop empty exceptions; an empty substring would suppress every hit."""
        return [x for x in v if x]


class ScraperConfig(BaseModel):
    """Upstream endpoints and poll timing."""

    list_url: str = Field(
        "https://scrape.pastebin.com/api_scraping.php",
        description="Endpoint returning the most recent pastes as a JSON array",
    )
    item_url: str = Field(
        "https://scrape.pastebin.com/api_scrape_item.php",
        description="Endpoint returning the raw body of one paste (?i=<key>)",
    )
    list_limit: int = Field(100, ge=1, le=250, description="Pastes requested per list call")
    poll_interval: str = Field("1m", description="Time between the starts of two poll cycles")
    item_delay: str = Field("1s", description="Pause after every paste fetch")
    retention: str = Field("10m", description="How long a processed paste key is remembered")
    http_request_timeout: int = Field(
        10, ge=1, le=120, description="Total time allowed per HTTP call (seconds)"
    )
    user_agent: str = Field("pastewatch/1.0", min_length=1)

    @field_validator("poll_interval")
    @classmethod
    def validate_poll_interval(cls, v: str) -> str:
        try:
            validate_duration_range(parse_duration(v), 30, 3600, label="poll_interval")
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @field_validator("item_delay")
    @classmethod
    def validate_item_delay(cls, v: str) -> str:
        try:
            validate_duration_range(parse_duration(v), 1, 60, label="item_delay")
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @field_validator("retention")
    @classmethod
    def validate_retention(cls, v: str) -> str:
        try:
            validate_duration_range(parse_duration(v), 60, 86400, label="retention")
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def retention_covers_interval(self):
        """A key must survive at least until the next listing sees it again."""
        if parse_duration(self.retention) < parse_duration(self.poll_interval):
            raise ValueError("retention must be at least as long as poll_interval")
        return self

    @property
    def poll_interval_seconds(self) -> int:
        return parse_duration(self.poll_interval)

    @property
    def item_delay_seconds(self) -> int:
        return parse_duration(self.item_delay)

    @property
    def retention_seconds(self) -> int:
        return parse_duration(self.retention)


class EmailConfig(BaseModel):
    """Email notification settings."""

    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    subject_prefix: str = Field("[pastewatch]", description="Prepended to every subject")
    max_body_chars: int = Field(
        4000, ge=200, le=100000, description="Paste excerpt length in alert mails"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = ConfigDict(use_enum_values=True)


class AppConfig(BaseModel):
    """Root configuration object for pastewatch."""

    keywords: List[KeywordRule] = Field(..., min_length=1, description="Watched keywords")
    mail_on_error: bool = Field(
        False,
        alias="mailOnError",
        description="Also mail operational errors, not only log them",
    )
    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(populate_by_name=True)

    def distinct_keywords(self) -> List[str]:
        """Configured keywords in first-seen order, without repeats."""
        seen = []
        for rule in self.keywords:
            if rule.keyword not in seen:
                seen.append(rule.keyword)
        return seen
