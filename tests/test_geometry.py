#!/usr/bin/env python3
"""
Tests for groove geometry.

Tests cover:
- Input validation and the field named by each error
- Closed-form helpers (circumference, fillet)
- Groove section widths, areas and width bands
- Joint geometry records built from dicts
"""

import math

import numpy as np
import pytest

from weldest.engine.errors import ArithmeticDegenerate, InvalidConfiguration, InvalidGeometry
from weldest.engine.geometry import (
    GrooveSection,
    bevel_width,
    circumference,
    fillet_area,
    fillet_leg,
    require_bevel_angle,
    require_groove_depth,
    require_length,
    require_non_negative,
    require_split_ratio,
    trapezoid_area,
)
from weldest.engine.processes import DEFAULT_NOZZLE_LAYERS, ProcessLayer, WeldProcess
from weldest.welds.nozzle import NozzleGeometry, NozzleJointType


# =============================================================================
# VALIDATION TESTS
# =============================================================================


class TestValidation:
    """Test input validators."""

    def test_non_negative_accepts_zero(self):
        assert require_non_negative(0, "root_gap") == 0.0

    def test_negative_dimension_rejected(self):
        with pytest.raises(InvalidGeometry) as exc_info:
            require_non_negative(-1.0, "root_gap")
        assert exc_info.value.field == "root_gap"
        assert str(exc_info.value).startswith("root_gap:")

    @pytest.mark.parametrize("value", ["abc", None, float("nan"), float("inf"), True, False])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(InvalidGeometry):
            require_non_negative(value, "root_face")

    def test_zero_length_is_degenerate(self):
        with pytest.raises(ArithmeticDegenerate) as exc_info:
            require_length(0, "nozzle_od")
        assert exc_info.value.field == "nozzle_od"

    def test_negative_length_is_invalid_geometry(self):
        with pytest.raises(InvalidGeometry):
            require_length(-10, "nozzle_od")

    @pytest.mark.parametrize("angle", [0, 90, -5, 120])
    def test_bevel_angle_out_of_range(self, angle: float):
        with pytest.raises(InvalidGeometry, match="Bevel angle"):
            require_bevel_angle(angle, "inside_bevel_angle")

    @pytest.mark.parametrize("angle", [0.5, 30, 45, 89.5])
    def test_bevel_angle_in_range(self, angle: float):
        assert require_bevel_angle(angle, "inside_bevel_angle") == angle

    @pytest.mark.parametrize("ratio,valid", [(0, True), (50, True), (100, True), (-1, False), (100.5, False)])
    def test_split_ratio_range(self, ratio: float, valid: bool):
        if valid:
            assert require_split_ratio(ratio) == ratio
        else:
            with pytest.raises(InvalidGeometry):
                require_split_ratio(ratio)

    def test_groove_depth(self):
        assert require_groove_depth(25.0, 2.0) == pytest.approx(23.0)

    @pytest.mark.parametrize("thickness", [1.0, 2.0, 2.05])
    def test_thickness_at_or_below_root_face_rejected(self, thickness: float):
        with pytest.raises(InvalidGeometry) as exc_info:
            require_groove_depth(thickness, 2.0)
        assert exc_info.value.field == "shell_thickness"

    def test_errors_are_value_errors(self):
        """Callers catching ValueError keep working."""
        with pytest.raises(ValueError):
            require_groove_depth(1.0, 2.0)


# =============================================================================
# CLOSED-FORM HELPER TESTS
# =============================================================================


class TestHelpers:
    """Test closed-form geometry helpers."""

    def test_circumference(self):
        assert circumference(300) == pytest.approx(942.4778, abs=1e-3)

    def test_fillet_leg(self):
        assert fillet_leg(6.0) == pytest.approx(6.0 * math.sqrt(2))

    def test_fillet_area_is_half_leg_squared(self):
        leg = fillet_leg(6.0)
        assert fillet_area(6.0) == pytest.approx(0.5 * leg**2)
        assert fillet_area(6.0) == pytest.approx(36.0)

    def test_bevel_width(self):
        assert bevel_width(10.0, 45.0) == pytest.approx(10.0)

    def test_trapezoid_area(self):
        assert trapezoid_area(22.0, 2.0, 10.0) == pytest.approx(120.0)


# =============================================================================
# GROOVE SECTION TESTS
# =============================================================================


class TestGrooveSection:
    """Test a symmetric V section: 10 mm deep, 45 deg, 2 mm gap."""

    @pytest.fixture
    def section(self) -> GrooveSection:
        return GrooveSection(depth=10.0, angle=45.0, root_gap=2.0, root_face=1.0)

    def test_widths(self, section: GrooveSection):
        assert section.widening == pytest.approx(2.0)
        assert section.width_at(0) == pytest.approx(2.0)
        assert section.top_width == pytest.approx(22.0)

    def test_bevel_area_matches_trapezoid(self, section: GrooveSection):
        assert section.bevel_area == pytest.approx(trapezoid_area(22.0, 2.0, 10.0))

    def test_area_includes_root_face_land(self, section: GrooveSection):
        assert section.root_face_area == pytest.approx(2.0)
        assert section.area == pytest.approx(122.0)

    def test_single_bevel_face(self):
        section = GrooveSection(depth=10.0, angle=45.0, root_gap=2.0, bevel_faces=1)
        assert section.top_width == pytest.approx(12.0)
        assert section.bevel_area == pytest.approx(70.0)

    def test_depth_outside_section_rejected(self, section: GrooveSection):
        with pytest.raises(InvalidGeometry):
            section.width_at(10.5)

    @pytest.mark.parametrize("width,depth", [(1.0, 0.0), (2.0, 0.0), (12.0, 5.0), (100.0, 10.0)])
    def test_depth_at_width(self, section: GrooveSection, width: float, depth: float):
        assert section.depth_at_width(width) == pytest.approx(depth)

    def test_layer_bands(self, section: GrooveSection):
        bands = section.layer_bands(DEFAULT_NOZZLE_LAYERS)
        depths = [(start, end) for _, start, end in bands]
        assert depths == [pytest.approx((0.0, 2.0)), pytest.approx((2.0, 9.0)), pytest.approx((9.0, 10.0))]
        assert [layer.process for layer, _, _ in bands] == [WeldProcess.GTAW, WeldProcess.SMAW, WeldProcess.FCAW]

    def test_band_areas_sum_to_bevel_area(self, section: GrooveSection):
        areas = [section.band_area(start, end) for _, start, end in section.layer_bands(DEFAULT_NOZZLE_LAYERS)]
        assert areas == [pytest.approx(8.0), pytest.approx(91.0), pytest.approx(21.0)]
        assert np.sum(areas) == pytest.approx(section.bevel_area)

    def test_unreached_bands_are_empty(self):
        section = GrooveSection(depth=2.0, angle=45.0, root_gap=2.0)
        bands = section.layer_bands(DEFAULT_NOZZLE_LAYERS)
        assert bands[0][1:] == pytest.approx((0.0, 2.0))
        assert bands[1][1] == bands[1][2]
        assert bands[2][1] == bands[2][2]

    def test_gap_wider_than_first_layer(self):
        """The root band starts at the gap when the gap already exceeds a layer width."""
        layers = (ProcessLayer(WeldProcess.GTAW, 0.0), ProcessLayer(WeldProcess.SMAW, 1.0))
        section = GrooveSection(depth=5.0, angle=30.0, root_gap=3.0)
        bands = section.layer_bands(layers)
        assert bands[0][1:] == pytest.approx((0.0, 0.0))
        assert bands[1][1:] == pytest.approx((0.0, 5.0))


# =============================================================================
# JOINT GEOMETRY RECORD TESTS
# =============================================================================


class TestJointGeometry:
    """Test geometry records built from YAML-shaped data."""

    def test_from_dict_keeps_defaults(self):
        geometry = NozzleGeometry.from_dict({"shell_thickness": 30})
        assert geometry.shell_thickness == 30
        assert geometry.nozzle_od == 300.0
        assert geometry.joint_type is NozzleJointType.DOUBLE_BEVEL

    def test_joint_type_from_string(self):
        geometry = NozzleGeometry.from_dict({"joint_type": "SingleBevel"})
        assert geometry.joint_type is NozzleJointType.SINGLE_BEVEL

    def test_unknown_joint_type(self):
        with pytest.raises(InvalidConfiguration) as exc_info:
            NozzleGeometry(joint_type="tbevel")
        assert exc_info.value.field == "joint_type"

    def test_unknown_field_rejected(self):
        with pytest.raises(InvalidConfiguration, match="wall"):
            NozzleGeometry.from_dict({"wall": 10})

    def test_to_dict_uses_enum_values(self):
        data = NozzleGeometry().to_dict()
        assert data["joint_type"] == "doublebevel"
        assert NozzleGeometry.from_dict(data) == NozzleGeometry()

    def test_replace(self):
        geometry = NozzleGeometry().replace(root_gap=4.0)
        assert geometry.root_gap == 4.0
        assert geometry.shell_thickness == 25.0
