"""Template contexts for paste alerts and error escalations."""

from typing import Dict

from pastewatch.domain.models import MatchedPaste, OperationalError


def truncate_body(body: str, max_chars: int) -> str:
    """Cut ``body`` to ``max_chars`` characters, marking the cut."""
    if len(body) <= max_chars:
        return body
    return body[:max_chars].rstrip() + "\n[... truncated]"


def build_paste_context(matched: MatchedPaste, subject_prefix: str, max_body_chars: int) -> Dict:
    """
    Build the template context for a paste alert.

    Returns:
        Dict with keys: subject_prefix, key, title, url, user, syntax,
        published_at, detected_at, keywords, hits (list of keyword/line
        pairs, sorted by keyword), body_excerpt, body_truncated, body_length
    """
    item = matched.item
    excerpt = truncate_body(matched.body, max_body_chars)
    published_at = item.published_at

    return {
        "subject_prefix": subject_prefix,
        "key": item.key,
        "title": item.title,
        "url": item.url,
        "user": item.user,
        "syntax": item.syntax,
        "published_at": published_at.isoformat() if published_at else None,
        "detected_at": matched.detected_at.isoformat(),
        "keywords": matched.keywords,
        "hits": [{"keyword": k, "line": matched.hits[k]} for k in matched.keywords],
        "body_excerpt": excerpt,
        "body_truncated": excerpt != matched.body,
        "body_length": len(matched.body),
    }


def build_error_context(error: OperationalError, subject_prefix: str) -> Dict:
    """Build the template context for an error escalation mail."""
    return {
        "subject_prefix": subject_prefix,
        "stage": error.stage.value,
        "message": error.message,
        "paste_key": error.paste_key,
        "error_type": error.error_type,
        "occurred_at": error.occurred_at.isoformat(),
    }
