from __future__ import annotations

import pytest

from lib_log_window.domain import ConsoleColor
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_palette_has_sixteen_contiguous_ordinals() -> None:
    assert [member.value for member in ConsoleColor] == list(range(16))


@pytest.mark.parametrize("name", ["DarkRed", "dark-red", "dark_red", " DARK_RED "])
def test_from_name_tolerates_spelling_variants(name: str) -> None:
    assert ConsoleColor.from_name(name) is ConsoleColor.DARK_RED


def test_from_name_rejects_unknown_colour() -> None:
    with pytest.raises(ValueError, match="Unknown console color"):
        ConsoleColor.from_name("chartreuse")


@pytest.mark.parametrize("value", [-1, 16, 99])
def test_from_ordinal_rejects_out_of_range(value: int) -> None:
    with pytest.raises(ValueError, match="out of range"):
        ConsoleColor.from_ordinal(value)


def test_every_member_maps_to_a_rich_colour() -> None:
    from rich.color import Color

    for member in ConsoleColor:
        assert Color.parse(member.rich_name).name == member.rich_name
