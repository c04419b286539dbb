"""Identifier: grammar, generation from injected clock/rng, timestamp accessor."""
import random
import re
from datetime import datetime, timezone

import pytest

from file_storage.domain.errors import InvalidFormatError, ValidationError
from file_storage.domain.identifier import Identifier

from conftest import fixed_clock

GRAMMAR = re.compile(r"^[0-9]{14}-[a-z0-9]{8}$")


def test_generate_uses_clock_and_rng():
    ident = Identifier.generate(clock=fixed_clock(), rng=random.Random(7))
    assert ident.value.startswith("20240921143022-")
    assert GRAMMAR.match(ident.value)
    assert ident.random_part == ident.value[15:]
    assert len(ident.random_part) == 8


def test_generate_is_deterministic_for_seeded_rng():
    a = Identifier.generate(clock=fixed_clock(), rng=random.Random(42))
    b = Identifier.generate(clock=fixed_clock(), rng=random.Random(42))
    assert a == b


def test_generate_default_rng_matches_grammar():
    for _ in range(50):
        assert GRAMMAR.match(Identifier.generate().value)


def test_parse_roundtrip_and_str():
    ident = Identifier.parse("20240921143022-a8b9c1d2")
    assert str(ident) == "20240921143022-a8b9c1d2"
    assert ident.random_part == "a8b9c1d2"
    assert ident.timestamp == datetime(2024, 9, 21, 14, 30, 22, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value",
    [
        "",
        "   ",
        "2024092114302-a8b9c1d2",  # 13 digits
        "20240921143022-A8B9C1D2",  # uppercase
        "20240921143022_a8b9c1d2",
        "20240921143022-a8b9c1d",
        "20240921143022-a8b9c1d2x",
        "not-an-identifier",
        "\u0662\u0660\u0662\u0664\u0660\u0669\u0662\u0661\u0661\u0664\u0663\u0660\u0662\u0662-a8b9c1d2",  # Arabic-Indic digits
        "\uff12\uff10\uff12\uff14\uff10\uff19\uff12\uff11\uff11\uff14\uff13\uff10\uff12\uff12-a8b9c1d2",  # fullwidth digits
    ],
)
def test_parse_rejects_bad_format(value):
    with pytest.raises(InvalidFormatError):
        Identifier.parse(value)


def test_parse_none_rejected():
    with pytest.raises(InvalidFormatError, match="blank"):
        Identifier.parse(None)


def test_invalid_format_is_a_validation_error():
    with pytest.raises(ValidationError):
        Identifier.parse("bad")


def test_impossible_date_parses_but_timestamp_fails():
    ident = Identifier.parse("20241399250000-abcdefgh")
    with pytest.raises(InvalidFormatError, match="not a valid date"):
        _ = ident.timestamp


def test_identifier_is_immutable_and_hashable():
    ident = Identifier.parse("20240921143022-a8b9c1d2")
    with pytest.raises(Exception):
        ident.value = "20240921143022-zzzzzzzz"
    assert {ident, Identifier.parse("20240921143022-a8b9c1d2")} == {ident}
