from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Success:
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: Exception

    @property
    def ok(self) -> bool:
        return False
