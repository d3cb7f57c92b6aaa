#!/usr/bin/env python3
"""
Tests for shared welding settings.

Tests cover:
- Thickness band boundaries
- Default table lookups
- Validation of bead sizes, speeds and factors
- Immutability of the shared tables
- YAML save/load
"""

import dataclasses

import pytest
import yaml

from weldest.engine.errors import InvalidConfiguration
from weldest.engine.processes import WeldProcess
from weldest.engine.settings import (
    DEFAULT_SETTINGS,
    OPERATOR_FACTOR_BANDS,
    BeadSize,
    OperatorFactors,
    WeldSettings,
    operator_factor_band,
    speed_band,
)


# =============================================================================
# THICKNESS BAND TESTS
# =============================================================================


class TestThicknessBands:
    """Test band boundaries."""

    @pytest.mark.parametrize(
        "thickness,band",
        [(5.0, "thin"), (19.9, "thin"), (20.0, "medium"), (40.0, "medium"), (40.1, "thick"), (120.0, "thick")],
    )
    def test_speed_band(self, thickness: float, band: str):
        assert speed_band(thickness) == band

    @pytest.mark.parametrize(
        "thickness,band",
        [
            (6.0, "range1"),
            (11.9, "range1"),
            (12.0, "range2"),
            (18.0, "range3"),
            (25.0, "range4"),
            (34.9, "range4"),
            (35.0, "range5"),
            (49.9, "range5"),
            (50.0, "range6"),
            (200.0, "range6"),
        ],
    )
    def test_operator_factor_band(self, thickness: float, band: str):
        assert operator_factor_band(thickness) == band

    def test_six_factor_bands(self):
        assert OPERATOR_FACTOR_BANDS == ("range1", "range2", "range3", "range4", "range5", "range6")


# =============================================================================
# DEFAULT TABLE TESTS
# =============================================================================


class TestDefaultSettings:
    """Test lookups in the default tables."""

    def test_every_process_has_a_bead(self):
        for process in (WeldProcess.GTAW, WeldProcess.SMAW, WeldProcess.FCAW, WeldProcess.GMAW, WeldProcess.SAW):
            assert DEFAULT_SETTINGS.bead_size(process).area > 0

    def test_bead_area(self):
        assert DEFAULT_SETTINGS.bead_size(WeldProcess.SMAW).area == pytest.approx(24.0)

    @pytest.mark.parametrize(
        "process,thickness,speed",
        [
            (WeldProcess.SAW, 10.0, 400.0),
            (WeldProcess.FCAW, 25.0, 180.0),
            (WeldProcess.GTAW, 60.0, 60.0),
        ],
    )
    def test_travel_speed(self, process: WeldProcess, thickness: float, speed: float):
        assert DEFAULT_SETTINGS.travel_speed(process, thickness) == speed

    def test_speeds_for(self):
        assert DEFAULT_SETTINGS.speeds_for(25.0)[WeldProcess.SMAW] == 100.0

    def test_factors_for(self):
        factors = DEFAULT_SETTINGS.factors_for(30.0)
        assert factors == OperatorFactors(inside=1.6, outside=1.5)

    def test_skip_has_no_bead(self):
        with pytest.raises(InvalidConfiguration):
            DEFAULT_SETTINGS.bead_size(WeldProcess.SKIP)


# =============================================================================
# VALIDATION AND IMMUTABILITY TESTS
# =============================================================================


class TestValidation:
    """Test rejected settings and read-only tables."""

    def _data(self) -> dict:
        return DEFAULT_SETTINGS.to_dict()

    def test_missing_process_rejected(self):
        data = self._data()
        del data["bead_sizes"]["SAW"]
        with pytest.raises(InvalidConfiguration, match="SAW") as exc_info:
            WeldSettings.from_dict(data)
        assert exc_info.value.field == "bead_sizes"

    def test_missing_band_rejected(self):
        data = self._data()
        del data["operator_factors"]["range6"]
        with pytest.raises(InvalidConfiguration, match="range6"):
            WeldSettings.from_dict(data)

    def test_missing_section_rejected(self):
        data = self._data()
        del data["travel_speeds"]
        with pytest.raises(InvalidConfiguration, match="travel_speeds"):
            WeldSettings.from_dict(data)

    def test_zero_speed_rejected(self):
        data = self._data()
        data["travel_speeds"]["thin"]["SMAW"] = 0
        with pytest.raises(InvalidConfiguration) as exc_info:
            WeldSettings.from_dict(data)
        assert exc_info.value.field == "travel_speeds.thin.SMAW"

    @pytest.mark.parametrize("height,width", [(0, 8), (3, -1), ("tall", 8)])
    def test_bad_bead_rejected(self, height, width):
        with pytest.raises(InvalidConfiguration):
            BeadSize(height, width)

    def test_bad_factor_rejected(self):
        with pytest.raises(InvalidConfiguration):
            OperatorFactors(inside=-1.0, outside=1.2)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_SETTINGS.bead_sizes[WeldProcess.GTAW] = BeadSize(1.0, 1.0)
        with pytest.raises(TypeError):
            DEFAULT_SETTINGS.travel_speeds["thin"][WeldProcess.GTAW] = 1.0

    def test_settings_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_SETTINGS.bead_sizes = {}


# =============================================================================
# YAML TESTS
# =============================================================================


class TestYaml:
    """Test saving and loading settings."""

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "settings.yaml"
        DEFAULT_SETTINGS.to_yaml(path)

        with open(path) as f:
            raw = yaml.safe_load(f)
        assert set(raw) == {"settings"}

        loaded = WeldSettings.from_yaml(path)
        assert loaded.to_dict() == DEFAULT_SETTINGS.to_dict()

    def test_load_without_wrapper_key(self, tmp_path):
        data = DEFAULT_SETTINGS.to_dict()
        data["bead_sizes"]["SMAW"] = {"height": 4, "width": 10}
        path = tmp_path / "shop.yaml"
        path.write_text(yaml.dump(data))

        loaded = WeldSettings.from_yaml(path)
        assert loaded.bead_size(WeldProcess.SMAW).area == pytest.approx(40.0)

    @pytest.mark.parametrize(
        "text",
        [
            "- 1\n- 2\n",  # list, not a mapping
            "settings: [1, 2]\n",
            "bead_sizes: [unclosed\n",  # YAML syntax error
        ],
    )
    def test_unreadable_file_rejected(self, tmp_path, text: str):
        path = tmp_path / "settings.yaml"
        path.write_text(text)
        with pytest.raises(InvalidConfiguration) as exc_info:
            WeldSettings.from_yaml(path)
        assert exc_info.value.field == "settings"
