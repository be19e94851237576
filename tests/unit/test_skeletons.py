"""Tests for the loading skeleton markup."""

import pytest

from bytescart.ui.skeletons import SKELETONS, render_skeleton


@pytest.mark.parametrize("section", sorted(SKELETONS))
def test_every_section_renders(section):
    markup = render_skeleton(section)

    assert markup is not None
    assert markup.startswith("<div")
    assert "animate-pulse" in markup
    assert markup.count("<div") == markup.count("</div>")


def test_unknown_section():
    assert render_skeleton("checkout") is None


def test_dashboard_has_three_stat_cards():
    markup = render_skeleton("dashboard")

    assert markup.count("h-14 w-14 bg-gray-200 rounded-2xl") == 3
