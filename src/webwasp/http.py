"""Request header fields inspected and edited from the console."""

from __future__ import annotations

from dataclasses import dataclass, fields

# Console field name -> label shown by ``show``
FIELD_LABELS: dict[str, str] = {
    "host": "HOST",
    "auth": "AUTH",
    "maxforward": "MAX-FORWARDS",
    "referer": "REFERER",
    "useragent": "USER-AGENT",
}

# Console field name -> HTTP header name
HEADER_NAMES: dict[str, str] = {
    "host": "Host",
    "auth": "Authorization",
    "maxforward": "Max-Forwards",
    "referer": "Referer",
    "useragent": "User-Agent",
}


@dataclass
class HttpFields:
    """Header values for the request being built. ``None`` means unset."""

    host: str | None = None
    auth: str | None = None
    maxforward: str | None = None
    referer: str | None = None
    useragent: str | None = None

    @classmethod
    def is_field(cls, name: str) -> bool:
        return name in FIELD_LABELS

    def _check(self, name: str) -> None:
        if name not in FIELD_LABELS:
            raise KeyError(name)

    def get_field(self, name: str) -> str | None:
        self._check(name)
        return getattr(self, name)

    def set_field(self, name: str, value: str) -> None:
        self._check(name)
        setattr(self, name, value)

    def clear_field(self, name: str) -> None:
        self._check(name)
        setattr(self, name, None)

    def show(self, name: str | None = None) -> list[str]:
        """Format one field, or every field when *name* is None."""
        names = tuple(FIELD_LABELS) if name is None else (name,)
        lines: list[str] = []
        for n in names:
            value = self.get_field(n)
            lines.append(f"[+] {FIELD_LABELS[n]}: '{value or ''}'")
        return lines

    def to_headers(self) -> dict[str, str]:
        """Headers for the fields that are set."""
        return {
            HEADER_NAMES[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
