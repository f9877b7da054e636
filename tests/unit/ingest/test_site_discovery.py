"""Unit tests for association site discovery."""

from __future__ import annotations

from ingest.site_discovery import discover_sites

_ASSOC_HEADER = "species1,site1,species2,site2,bondvol"


def test_discover_sites_sorts_sites_per_component(write_parameter_file) -> None:
    """Sites should be collected from both members and sorted."""
    path = write_parameter_file(
        "assoc.csv",
        "Assoc parameters",
        _ASSOC_HEADER,
        ["water,H,water,e,0.03", "methanol,H,water,e,0.02", "methanol,e,methanol,H,0.01"],
    )

    registry = discover_sites([path], ["water", "methanol"])

    assert registry.sites == (("H", "e"), ("H", "e"))


def test_discover_sites_is_independent_of_file_order(write_parameter_file) -> None:
    """The registry should not depend on the order files are given in."""
    first = write_parameter_file(
        "a.csv", "Assoc parameters", _ASSOC_HEADER, ["water,e,water,H,0.03"]
    )
    second = write_parameter_file(
        "b.csv", "Assoc parameters", _ASSOC_HEADER, ["water,a1,water,H,0.01"]
    )

    forward = discover_sites([first, second], ["water"])
    backward = discover_sites([second, first], ["water"])

    assert forward == backward


def test_discover_sites_ignores_other_shapes(write_parameter_file) -> None:
    """Components without assoc rows should get no sites."""
    like = write_parameter_file("like.csv", "Like parameters", "species,sigma", ["water,3.0"])
    assoc = write_parameter_file(
        "assoc.csv",
        "Assoc parameters",
        _ASSOC_HEADER,
        ["water,H,water,e,0.03", "ethanol,H,ethanol,e,0.02"],
    )

    registry = discover_sites([like, assoc], ["methane", "water"])

    assert registry.site_counts() == (0, 2)
