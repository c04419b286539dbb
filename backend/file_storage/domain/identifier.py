"""Per-file identifier: `<yyyyMMddHHmmss>-<8 lowercase alnum>`, e.g. 20240921143022-a8b9c1d2."""
from __future__ import annotations

import random
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from file_storage.domain.errors import InvalidFormatError

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
RANDOM_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789"
RANDOM_LENGTH = 8

_PATTERN = re.compile(r"^[0-9]{14}-[a-z0-9]{8}$")
# SystemRandom draws from os.urandom, so one shared instance is safe across threads.
_default_rng = random.SystemRandom()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Identifier:
    """Immutable. Build with `generate()` or `parse()`; the constructor also validates."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise InvalidFormatError("Identifier must not be blank")
        if not _PATTERN.fullmatch(self.value):
            raise InvalidFormatError(
                f"Invalid identifier format: {self.value!r} (expected yyyyMMddHHmmss-xxxxxxxx)"
            )

    @classmethod
    def generate(
        cls,
        clock: Callable[[], datetime] = _utc_now,
        rng: random.Random | None = None,
    ) -> Identifier:
        """New identifier from `clock()` (truncated to seconds) and 8 chars drawn from `rng`.

        No uniqueness check happens here; the metadata store's unique index is
        the only guard against collisions.
        """
        rng = rng or _default_rng
        timestamp = clock().strftime(TIMESTAMP_FORMAT)
        suffix = "".join(rng.choice(RANDOM_CHARS) for _ in range(RANDOM_LENGTH))
        return cls(f"{timestamp}-{suffix}")

    @classmethod
    def parse(cls, value: str | None) -> Identifier:
        if value is None:
            raise InvalidFormatError("Identifier must not be blank")
        return cls(value)

    @property
    def timestamp(self) -> datetime:
        """Embedded timestamp (UTC, second precision).

        The grammar accepts any 14 digits, so a parsed identifier can carry an
        impossible date; that only surfaces here.
        """
        try:
            parsed = datetime.strptime(self.value[:14], TIMESTAMP_FORMAT)
        except ValueError as e:
            raise InvalidFormatError(f"Identifier timestamp is not a valid date: {self.value}") from e
        return parsed.replace(tzinfo=timezone.utc)

    @property
    def random_part(self) -> str:
        return self.value[15:]

    def __str__(self) -> str:
        return self.value
