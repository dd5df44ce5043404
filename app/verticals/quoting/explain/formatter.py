from __future__ import annotations

from typing import Any, Dict, Iterable, List


def _clean_step(s: Any) -> str:
    # Breakdown weigert al newlines en tabs; payload dicts kunnen van buiten komen
    return str(s).replace("\r", "").replace("\n", " ").replace("\t", " ").strip()


def format_steps_newlines(steps: Iterable[str]) -> str:
    """
    Excel export: 1 cel met newline joins.
    """
    items = [_clean_step(s) for s in steps if str(s).strip()]
    return "\n".join(items)


def format_steps_bullets(steps: Iterable[str], bullet: str = "•") -> List[str]:
    items = [_clean_step(s) for s in steps if str(s).strip()]
    return [f"{bullet} {s}" for s in items]


def format_steps_bullets_text(steps: Iterable[str], bullet: str = "•") -> str:
    return "\n".join(format_steps_bullets(steps, bullet=bullet))


def format_notices_header(
    title: str, notices: Iterable[Dict[str, Any]], bullet: str = "•"
) -> str:
    """
    Voor warnings/blocking in mail of bovenaan exports.
    Title + bullet list; empty string when there is nothing to report.
    """
    lines = [title]
    for n in notices:
        msg = _clean_step(n.get("message") or "")
        code = _clean_step(n.get("code") or "")
        line_id = _clean_step((n.get("meta") or {}).get("lineId") or "")
        where = f" (line {line_id})" if line_id else ""
        if code and msg:
            lines.append(f"{bullet} [{code}] {msg}{where}")
        elif msg:
            lines.append(f"{bullet} {msg}{where}")
        elif code:
            lines.append(f"{bullet} [{code}]{where}")
    if len(lines) == 1:
        return ""
    return "\n".join(lines)
