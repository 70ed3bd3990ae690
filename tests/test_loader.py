"""Tests for YAML placement loading."""

import pytest

from ergogen_router.config import RouterConfig
from ergogen_router.exceptions import (
    ConfigurationError,
    FileFormatError,
    FileNotFoundError,
    UnsupportedFeatureError,
)
from ergogen_router.geometry import Anchor
from ergogen_router.loader import load_placements, parse_anchor, parse_placements
from ergogen_router.nets import Net
from ergogen_router.primitives import RecordFormat
from ergogen_router.router import collect_records


class TestParseAnchor:
    """Tests for the accepted 'at' forms."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, Anchor()),
            ({"x": 1, "y": 2, "r": 90}, Anchor(1, 2, 90)),
            ({"x": 1, "y": 2, "rotation": -45}, Anchor(1, 2, -45)),
            ({"x": 1.5, "y": 2, "angle": 10}, Anchor(1.5, 2, 10)),
            ({"x": 3}, Anchor(3, 0, 0)),
            ([4, 5], Anchor(4, 5, 0)),
            ([4, 5, 180], Anchor(4, 5, 180)),
            ("(at 7 8 270)", Anchor(7, 8, 270)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_anchor(value) == expected

    @pytest.mark.parametrize(
        "value", ["here", [1], [1, 2, 3, 4], ["a", 2], {"x": "a"}, {"x": True}, 5]
    )
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError):
            parse_anchor(value, "sw1")


class TestLoadPlacements:
    """Tests for loading placement files."""

    def test_loads_instances_in_order(self, placement_file):
        placement = load_placements(placement_file)

        assert [i.name for i in placement.instances] == ["row_route", "col_route", "bare_via"]
        assert placement.nets.names == ["GND", "ROW0", "COL0"]
        assert placement.source == placement_file

        row, col, bare = placement.instances
        assert row.anchor == Anchor(100, 50, 0)
        assert row.params.net == Net(2, "ROW0")
        assert col.anchor == Anchor(10, 20, 90)
        assert col.params.locked is True
        assert col.params.routes == ["b(0,0)(1,0)v", "f(0,2)<GND>(0,3)"]
        assert bare.anchor == Anchor(1, 2, 0)

    def test_router_defaults_from_config(self, placement_file):
        config = RouterConfig(width=0.2, format="legacy")
        placement = load_placements(placement_file, config)
        params = placement.instances[0].params
        assert params.width == 0.2
        assert params.record_format is RecordFormat.LEGACY

    def test_records_use_anchor_and_nets(self, placement_file):
        placement = load_placements(placement_file)
        col = placement.instances[1]

        segment, via, front = collect_records(col.params, col.anchor, placement.nets)
        assert segment.start == pytest.approx((10, 20))
        assert segment.end == pytest.approx((10, 19))
        assert via.at == pytest.approx((10, 19))
        assert via.net == Net(3, "COL0")
        assert front.start == pytest.approx((12, 20))
        assert front.end == pytest.approx((13, 20))
        assert front.net == Net(1, "GND")

    def test_render(self, placement_file):
        text = load_placements(placement_file).render()
        assert "(start 91.725 55.1)" in text
        assert "(end 91.725 57.26)" in text
        assert text.count("(segment") == 3
        assert text.count("(via") == 2
        assert text.count("(locked yes)") == 3

    def test_render_without_global_nets(self, placement_file):
        placement = load_placements(placement_file)
        with pytest.raises(UnsupportedFeatureError):
            placement.render(resolve_nets=False)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_placements(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("footprints: [unclosed\n")
        with pytest.raises(FileFormatError) as exc_info:
            load_placements(path)
        assert str(path) in str(exc_info.value)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        placement = load_placements(path)
        assert placement.instances == []
        assert placement.render() == ""


class TestParsePlacements:
    """Tests for placement document validation."""

    @pytest.mark.parametrize(
        "data",
        [
            ["not", "a", "mapping"],
            {"nets": "GND"},
            {"nets": [1, 2]},
            {"footprints": ["a"]},
            {"footprints": {"sw1": "f(0,0)"}},
        ],
    )
    def test_invalid_structure(self, data):
        with pytest.raises(FileFormatError):
            parse_placements(data)

    def test_invalid_params_name_footprint(self):
        data = {"footprints": {"sw1": {"params": {"width": "wide"}}}}
        with pytest.raises(ConfigurationError) as exc_info:
            parse_placements(data)
        assert exc_info.value.context["footprint"] == "sw1"
        assert "sw1" in str(exc_info.value)

    def test_footprint_without_params(self):
        placement = parse_placements({"footprints": {"empty": None}})
        assert placement.instances[0].params.all_routes == []

    def test_undeclared_net_is_allocated(self):
        data = {"nets": ["GND"], "footprints": {"sw1": {"params": {"net": "ROW5"}}}}
        placement = parse_placements(data)
        assert placement.instances[0].params.net == Net(2, "ROW5")
