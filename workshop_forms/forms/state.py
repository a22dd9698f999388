from __future__ import annotations

from typing import Iterable


class FormState:
    """Current text of every field in one in-progress submission.

    Values are kept verbatim: no trimming, coercion or validation.
    """

    def __init__(self, field_names: Iterable[str] = ()) -> None:
        self._values: dict[str, str] = {name: "" for name in field_names}

    def get(self, name: str) -> str:
        return self._values.get(name, "")

    def set(self, name: str, value: str) -> None:
        self._values[name] = value

    def values(self) -> dict[str, str]:
        return dict(self._values)

    def snapshot(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._values.items())

    def clear(self) -> None:
        self._values = {name: "" for name in self._values}

    def __contains__(self, name: object) -> bool:
        return name in self._values
