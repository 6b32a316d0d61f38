from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

_COMMAND_RE = re.compile(r"^/?\s*(chart|h)(?:\s+(help|\d{1,10}))?\s*$")
_INVISIBLE = ("\u200b", "\u200c", "\u200d", "\ufeff")


@dataclass(slots=True)
class ChartCommand:
    command: str
    action: str
    assignment_id: int | None = None


def normalize_command_text(raw_text: str) -> str:
    # Full-width forms and zero-width characters come from some mobile clients.
    normalized = unicodedata.normalize("NFKC", raw_text)
    for ch in _INVISIBLE:
        normalized = normalized.replace(ch, "")
    return normalized.strip().lower()


def parse_bot_command(raw_text: str) -> ChartCommand | None:
    m = _COMMAND_RE.match(normalize_command_text(raw_text))
    if not m:
        return None

    command, token = m.group(1), m.group(2)
    if command == "h":
        if token is not None:
            return None
        return ChartCommand(command="h", action="help")
    if token is None or token == "help":
        return ChartCommand(command="chart", action="help")
    return ChartCommand(command="chart", action="run", assignment_id=int(token))
