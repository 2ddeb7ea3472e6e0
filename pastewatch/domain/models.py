"""Core domain models shared by the poll loop, matcher and delivery workers."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pastewatch.utils.timestamps import parse_epoch, utc_now

PASTEBIN_URL = "https://pastebin.com/"


@dataclass(frozen=True)
class PasteItem:
    """One paste discovered in the upstream list.

    Only ``key`` is interpreted by the pipeline. ``metadata`` is the list
    record as delivered upstream (title, date, user, syntax, ...) and is used
    solely to enrich notifications.

    Attributes:
        key: Opaque unique identifier of the paste
        metadata: Raw list record for the paste
    """

    key: str
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if not self.key:
            raise ValueError("PasteItem key cannot be empty")

    @property
    def title(self) -> str:
        return self.metadata.get("title") or "Untitled"

    @property
    def user(self) -> Optional[str]:
        return self.metadata.get("user") or None

    @property
    def syntax(self) -> Optional[str]:
        return self.metadata.get("syntax") or None

    @property
    def url(self) -> str:
        return self.metadata.get("full_url") or f"{PASTEBIN_URL}{self.key}"

    @property
    def published_at(self) -> Optional[datetime]:
        return parse_epoch(self.metadata.get("date"))


@dataclass
class MatchedPaste:
    """A paste whose body produced at least one keyword hit.

    Attributes:
        item: The paste the body belongs to
        body: Full fetched body
        hits: Keyword -> trimmed matching line
        detected_at: When the match was made (UTC)
    """

    item: PasteItem
    body: str
    hits: Dict[str, str]
    detected_at: datetime = field(default_factory=utc_now)

    @property
    def key(self) -> str:
        return self.item.key

    @property
    def keywords(self) -> list:
        return sorted(self.hits)

    def __str__(self) -> str:
        lines = [f"{self.item.title} ({self.item.url})"]
        for keyword in self.keywords:
            lines.append(f"  {keyword}: {self.hits[keyword]}")
        return "\n".join(lines)


class ErrorStage(str, Enum):
    """Pipeline stage an operational error originated from."""

    LIST_FETCH = "list-fetch"
    ITEM_FETCH = "item-fetch"
    DELIVERY = "delivery"


@dataclass
class OperationalError:
    """A non-fatal failure routed to the error worker.

    Attributes:
        stage: Where the failure happened
        message: Human-readable description
        paste_key: Key of the affected paste, when there is one
        error_type: Class name of the underlying exception
        occurred_at: When the failure was recorded (UTC)
    """

    stage: ErrorStage
    message: str
    paste_key: Optional[str] = None
    error_type: Optional[str] = None
    occurred_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_exception(
        cls, stage: ErrorStage, exc: BaseException, paste_key: Optional[str] = None
    ) -> "OperationalError":
        return cls(
            stage=stage,
            message=str(exc) or type(exc).__name__,
            paste_key=paste_key,
            error_type=type(exc).__name__,
        )

    def __str__(self) -> str:
        where = f" [{self.paste_key}]" if self.paste_key else ""
        return f"{self.stage.value}{where}: {self.message}"
