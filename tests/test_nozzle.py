#!/usr/bin/env python3
"""
Tests for nozzle weld estimates.

Tests cover:
- Default nozzle scenario
- Volume, pass and time bookkeeping (sums, integrality)
- Inside zones per process layer
- Single-bevel joints
- Monotonicity in shell thickness and repeatability
- Rejected geometry and process plans
- Activity codes
- NozzleItem cache handling and validation
"""

import math

import numpy as np
import pytest

from weldest.engine.errors import ArithmeticDegenerate, InvalidConfiguration, InvalidGeometry
from weldest.engine.processes import ProcessLayer, WeldProcess
from weldest.engine.settings import DEFAULT_SETTINGS
from weldest.engine.zones import zone_volume
from weldest.welds.nozzle import (
    NOZZLE_ACTIVITY_CODES,
    NozzleActivityTimes,
    NozzleGeometry,
    NozzleItem,
    NozzleJointType,
    calculate_nozzle,
    nozzle_activity_codes,
    resolve_nozzle_geometry,
)

DEFAULT_ACTIVITY_HOURS = 6.0


@pytest.fixture
def results():
    return calculate_nozzle(NozzleGeometry())


# =============================================================================
# DEFAULT SCENARIO TESTS
# =============================================================================


class TestDefaultScenario:
    """300 mm nozzle in a 25 mm shell, double bevel, GTAW/SMAW/FCAW inside."""

    def test_circumference(self, results):
        assert results.circumference == pytest.approx(942.48, abs=0.01)

    def test_bands(self, results):
        assert results.speed_band == "medium"
        assert results.factor_band == "range4"

    def test_total_covers_fixed_activities(self, results):
        assert results.times.activities == pytest.approx(DEFAULT_ACTIVITY_HOURS)
        assert results.times.total >= DEFAULT_ACTIVITY_HOURS
        assert results.times.weld > 0

    def test_three_inside_zones(self, results):
        assert [zone.process for zone in results.zones] == [WeldProcess.GTAW, WeldProcess.SMAW, WeldProcess.FCAW]
        assert results.passes.zone1 > 0
        assert results.passes.zone2 > 0
        assert results.passes.zone3 > 0

    def test_zone_widths_follow_layers(self, results):
        gtaw, smaw, fcaw = results.zones
        assert gtaw.start_width == pytest.approx(3.0)
        assert gtaw.end_width == pytest.approx(6.0)
        assert smaw.end_width == pytest.approx(20.0)
        assert fcaw.start_width == pytest.approx(20.0)

    def test_fillet(self, results):
        circ = results.circumference
        assert results.volumes.fillet == pytest.approx(36.0 * circ)
        # FCAW bead 35 mm^2: 36 / 35 rounds up to 2 passes
        assert results.passes.fillet == 2
        assert results.fillet.hours == pytest.approx(2 * circ / 180.0 / 60.0 * 1.6)

    def test_outside_uses_outside_factor(self, results):
        assert results.outside.operator_factor == DEFAULT_SETTINGS.factors_for(25.0).outside
        assert results.outside.process is WeldProcess.FCAW


# =============================================================================
# BOOKKEEPING TESTS
# =============================================================================


class TestBookkeeping:
    """Test that the parts add up."""

    def test_volume_sum(self, results):
        volumes = results.volumes
        assert volumes.total == pytest.approx(volumes.inside + volumes.outside + volumes.fillet)

    def test_zone_volumes_sum_to_inside(self, results):
        assert zone_volume(results.zones) == pytest.approx(results.volumes.inside, rel=1e-9)

    def test_groove_volume_matches_closed_form(self, results):
        # Bevel depth 23 mm: 16.1 inside at 35 deg, 6.9 outside at 15 deg, 3 mm gap, 2 mm face
        circ = results.circumference
        inside = 3.0 * 16.1 + math.tan(math.radians(35)) * 16.1**2 + 3.0 * 1.0
        outside = 3.0 * 6.9 + math.tan(math.radians(15)) * 6.9**2 + 3.0 * 1.0
        assert results.volumes.inside == pytest.approx(inside * circ)
        assert results.volumes.outside == pytest.approx(outside * circ)

    def test_pass_sums(self, results):
        passes = results.passes
        assert passes.inside == sum(passes.zone_passes)
        assert passes.total == passes.inside + passes.outside + passes.fillet
        assert all(isinstance(p, int) for p in (*passes.zone_passes, passes.outside, passes.fillet))

    def test_time_sums(self, results):
        times = results.times
        assert times.inside == pytest.approx(sum(zone.hours for zone in results.zones))
        assert times.total == pytest.approx(times.inside + times.outside + times.fillet + times.activities)

    def test_repeatable(self):
        geometry = NozzleGeometry(shell_thickness=32.0, nozzle_od=450.0)
        assert calculate_nozzle(geometry) == calculate_nozzle(geometry)

    def test_passes_non_decreasing_with_thickness(self):
        thicknesses = [6.0, 10.0, 15.0, 20.0, 25.0, 30.0, 40.0, 60.0, 90.0]
        runs = [calculate_nozzle(NozzleGeometry(shell_thickness=t)).passes for t in thicknesses]
        for attr in ("zone1", "zone2", "zone3", "inside", "outside"):
            counts = np.array([getattr(p, attr) for p in runs])
            assert np.all(np.diff(counts) >= 0), attr

    def test_layer_order_does_not_matter(self):
        shuffled = [ProcessLayer(WeldProcess.FCAW, 20), ProcessLayer(WeldProcess.GTAW, 0), ("SMAW", 6)]
        assert calculate_nozzle(NozzleGeometry(), shuffled) == calculate_nozzle(NozzleGeometry())

    def test_single_layer_plan(self):
        results = calculate_nozzle(NozzleGeometry(), [("FCAW", 0)])
        assert len(results.zones) == 1
        assert results.zones[0].process is WeldProcess.FCAW
        assert results.passes.zone2 == 0

    def test_sliver_zone_gets_a_pass(self):
        # FCAW takes over just below the top of the inside groove
        top = resolve_nozzle_geometry(NozzleGeometry()).inside.top_width
        results = calculate_nozzle(NozzleGeometry(), [("GTAW", 0), ("FCAW", top - 1e-9)])
        for zone in results.zones:
            if zone.volume > 0:
                assert zone.passes >= 1
                assert zone.hours > 0


# =============================================================================
# SINGLE BEVEL TESTS
# =============================================================================


class TestSingleBevel:
    """Test single-bevel joints."""

    @pytest.fixture
    def single(self):
        return calculate_nozzle(NozzleGeometry(joint_type=NozzleJointType.SINGLE_BEVEL))

    def test_no_outside_weld(self, single):
        assert single.volumes.outside == 0.0
        assert single.passes.outside == 0
        assert single.times.outside == 0.0

    def test_whole_depth_inside(self, single):
        grooves = resolve_nozzle_geometry(NozzleGeometry(joint_type="singlebevel"))
        assert grooves.outside is None
        assert grooves.inside.depth == pytest.approx(23.0)
        assert grooves.inside.root_face == pytest.approx(2.0)
        assert single.volumes.inside == pytest.approx(grooves.inside.area * single.circumference)

    def test_split_ratio_ignored(self):
        a = calculate_nozzle(NozzleGeometry(joint_type="singlebevel", split_ratio=20))
        b = calculate_nozzle(NozzleGeometry(joint_type="singlebevel", split_ratio=90))
        assert a == b


# =============================================================================
# REJECTION TESTS
# =============================================================================


class TestRejections:
    """Test that impossible inputs are rejected before any computation."""

    @pytest.mark.parametrize("thickness", [1.0, 2.0, 2.05])
    def test_thickness_not_above_root_face(self, thickness: float):
        with pytest.raises(InvalidGeometry) as exc_info:
            calculate_nozzle(NozzleGeometry(shell_thickness=thickness, root_face=2.0))
        assert exc_info.value.field == "shell_thickness"

    def test_zero_od(self):
        with pytest.raises(ArithmeticDegenerate):
            calculate_nozzle(NozzleGeometry(nozzle_od=0))

    @pytest.mark.parametrize(
        "changes,field",
        [
            ({"root_gap": -1}, "root_gap"),
            ({"root_gap": True}, "root_gap"),
            ({"shell_thickness": True}, "shell_thickness"),
            ({"root_face": -0.5}, "root_face"),
            ({"fillet_throat": -2}, "fillet_throat"),
            ({"nozzle_od": -300}, "nozzle_od"),
            ({"inside_bevel_angle": 90}, "inside_bevel_angle"),
            ({"outside_bevel_angle": 0}, "outside_bevel_angle"),
            ({"split_ratio": 120}, "split_ratio"),
            ({"joint_type": "singlebevel", "single_bevel_angle": 95}, "single_bevel_angle"),
        ],
    )
    def test_bad_dimensions(self, changes: dict, field: str):
        with pytest.raises(InvalidGeometry) as exc_info:
            calculate_nozzle(NozzleGeometry(**changes))
        assert exc_info.value.field == field

    def test_unused_angle_not_checked(self):
        """A single bevel ignores the double-bevel angles."""
        calculate_nozzle(NozzleGeometry(joint_type="singlebevel", outside_bevel_angle=0))

    def test_skip_layer_rejected(self):
        with pytest.raises(InvalidConfiguration):
            calculate_nozzle(NozzleGeometry(), [("GTAW", 0), ("Skip", 6)])

    def test_skip_outside_process_rejected(self):
        with pytest.raises(InvalidConfiguration) as exc_info:
            calculate_nozzle(NozzleGeometry(), outside_process="Skip")
        assert exc_info.value.field == "outside_process"

    def test_narrow_root_warns(self):
        with pytest.warns(UserWarning):
            results = calculate_nozzle(NozzleGeometry(), [("SMAW", 5), ("FCAW", 20)])
        assert results.zones[0].process is WeldProcess.SMAW


# =============================================================================
# ACTIVITY CODE TESTS
# =============================================================================


class TestActivityCodes:
    """Test the nozzle activity code breakdown."""

    def test_seven_codes(self, results):
        codes = nozzle_activity_codes(NozzleActivityTimes(), results)
        assert list(codes) == ["CUTNOZZ", "FNOZZ", "PREHEAT", "WNOZZ", "BACGRI", "MATCUT", "NDE"]
        assert NOZZLE_ACTIVITY_CODES.codes == tuple(codes)

    def test_codes_sum_to_total(self, results):
        codes = nozzle_activity_codes(NozzleActivityTimes(), results)
        assert codes.total == pytest.approx(results.times.total, rel=1e-9)

    def test_fixed_codes(self, results):
        codes = nozzle_activity_codes(NozzleActivityTimes(), results)
        assert codes["CUTNOZZ"] == pytest.approx(1.75)
        assert codes["FNOZZ"] == pytest.approx(1.0)
        assert codes["PREHEAT"] == pytest.approx(0.75)
        assert codes["BACGRI"] == pytest.approx(0.5)
        assert codes["MATCUT"] == pytest.approx(1.0)
        assert codes["NDE"] == pytest.approx(1.0)

    def test_weld_code_collects_arc_time(self, results):
        times = NozzleActivityTimes(fillet_weld=0.5)
        codes = nozzle_activity_codes(times, results)
        assert codes["WNOZZ"] == pytest.approx(results.times.weld + 0.5)


# =============================================================================
# NOZZLE ITEM TESTS
# =============================================================================


class TestNozzleItem:
    """Test cached results and validation on NozzleItem."""

    def test_defaults(self):
        item = NozzleItem(tag="N1")
        assert item.quantity == 1
        assert item.results.circumference == pytest.approx(942.48, abs=0.01)
        assert item.total_hours == pytest.approx(item.results.times.total)

    def test_from_dict(self):
        item = NozzleItem.from_dict(
            {
                "tag": "N2",
                "quantity": 2,
                "geometry": {"nozzle_od": 450, "shell_thickness": 32, "joint_type": "singlebevel"},
                "inside_layers": [{"process": "GTAW", "min_width": 0}, {"process": "FCAW", "min_width": 10}],
                "outside_process": "gmaw",
                "activity_times": {"nde": 2.0},
            }
        )
        assert item.geometry.joint_type is NozzleJointType.SINGLE_BEVEL
        assert item.outside_process is WeldProcess.GMAW
        assert item.inside_layers[1] == ProcessLayer(WeldProcess.FCAW, 10.0)
        assert item.activity_codes["NDE"] == pytest.approx(2.0)

    def test_unknown_field_rejected(self):
        with pytest.raises(InvalidConfiguration, match="colour"):
            NozzleItem.from_dict({"colour": "red"})

    def test_ids_are_unique(self):
        assert NozzleItem().id != NozzleItem().id

    def test_assignment_recomputes(self):
        item = NozzleItem()
        before = item.total_hours
        item.geometry = item.geometry.replace(shell_thickness=40.0)
        assert item.results.speed_band == "medium"
        assert item.results.volumes.inside > 0
        assert item.total_hours > before
        assert item.activity_codes.total == pytest.approx(item.results.times.total)

    def test_rejected_assignment_rolls_back(self):
        item = NozzleItem()
        geometry, results, codes = item.geometry, item.results, item.activity_codes
        with pytest.raises(InvalidGeometry):
            item.geometry = geometry.replace(shell_thickness=1.0)
        assert item.geometry is geometry
        assert item.results is results
        assert item.activity_codes is codes

    def test_rejected_process_rolls_back(self):
        item = NozzleItem()
        with pytest.raises(InvalidConfiguration):
            item.fillet_process = "Skip"
        assert item.fillet_process is WeldProcess.FCAW

    @pytest.mark.parametrize("quantity", [0, -1, 2.5, "2", True, None])
    def test_bad_quantity_rejected(self, quantity):
        with pytest.raises(InvalidConfiguration) as exc_info:
            NozzleItem(quantity=quantity)
        assert exc_info.value.field == "quantity"

    def test_bad_quantity_assignment_rolls_back(self):
        item = NozzleItem(quantity=3)
        with pytest.raises(InvalidConfiguration):
            item.quantity = 0
        assert item.quantity == 3

    def test_quantity_does_not_scale_results(self):
        assert NozzleItem(quantity=5).total_hours == pytest.approx(NozzleItem(quantity=1).total_hours)

    def test_results_are_read_only(self):
        item = NozzleItem()
        with pytest.raises(AttributeError):
            item.results = None
