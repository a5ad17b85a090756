"""Unit tests for rack topology models."""

import pytest

from packages.drive_catalog.records import DriveRecord
from packages.tco_engine.rack import (
    HDDRackConfiguration,
    RackType,
    SSDRackConfiguration,
    copy_rack,
    default_rack,
    rack_from_dict,
    rack_to_dict,
    rack_type_for_drive,
    rack_units_used,
    update_rack,
)


class TestRackFamilies:
    """Tests for the HDD and SSD rack variants."""

    def test_default_rack_is_hdd(self):
        rack = default_rack()

        assert isinstance(rack, HDDRackConfiguration)
        assert rack.rack_type is RackType.HDD

    def test_default_ssd_rack(self):
        rack = default_rack(RackType.SSD)

        assert isinstance(rack, SSDRackConfiguration)
        assert rack.rack_type is RackType.SSD

    def test_hdd_defaults(self):
        """Test reference defaults for the JBOD rack."""
        rack = HDDRackConfiguration()

        assert rack.rack_cost == 2000
        assert rack.server_cost == 15000
        assert rack.jbod_cost == 5000
        assert rack.switch_cost == 3000
        assert rack.server_power == 800
        assert rack.jbod_power == 200
        assert rack.switch_power == 100
        assert rack.drives_per_server == 24
        assert rack.servers_per_rack == 4
        assert rack.drives_per_jbod == 60
        assert rack.jbods_per_rack == 8
        assert rack.utility_servers_per_rack == 2
        assert rack.rack_units == 42

    def test_variants_only_carry_their_own_enclosure_fields(self):
        """Test JBOD fields exist only on HDD racks and JBOF fields only on SSD racks."""
        assert not hasattr(SSDRackConfiguration(), "jbod_cost")
        assert not hasattr(HDDRackConfiguration(), "jbof_cost")

    def test_enclosure_accessors_hdd(self):
        rack = HDDRackConfiguration(
            jbod_cost=1, jbod_power=2, jbod_ru=3, drives_per_jbod=4, jbods_per_rack=5
        )

        assert rack.enclosure_cost == 1
        assert rack.enclosure_power == 2
        assert rack.enclosure_ru == 3
        assert rack.drives_per_enclosure == 4
        assert rack.enclosures_per_rack == 5

    def test_enclosure_accessors_ssd(self):
        rack = SSDRackConfiguration(
            jbof_cost=1, jbof_power=2, jbof_ru=3, drives_per_jbof=4, jbofs_per_rack=5
        )

        assert rack.enclosure_cost == 1
        assert rack.enclosure_power == 2
        assert rack.enclosure_ru == 3
        assert rack.drives_per_enclosure == 4
        assert rack.enclosures_per_rack == 5


class TestRackTypeForDrive:
    """Tests for picking a rack family from a drive."""

    @pytest.mark.parametrize(
        "interface,expected",
        [
            ("NVMe PCIe 4.0", RackType.SSD),
            ("PCIe 5.0 E3.S", RackType.SSD),
            ("SATA 6Gb/s", RackType.HDD),
            ("SAS 12Gb/s", RackType.HDD),
            ("", RackType.HDD),
        ],
    )
    def test_rack_type_for_drive(self, interface, expected):
        drive = DriveRecord(
            model="Drive",
            capacity_tb=10,
            price=100,
            power_active_w=5,
            power_idle_w=3,
            interface=interface,
            afr=0.5,
        )

        assert rack_type_for_drive(drive) is expected


def test_rack_units_used_default_hdd():
    # 2*4 + 4*8 + 1*2
    assert rack_units_used(HDDRackConfiguration()) == 42


def test_rack_units_used_default_ssd():
    # 2*4 + 2*8 + 1*2
    assert rack_units_used(SSDRackConfiguration()) == 26


def test_copy_rack_is_independent():
    rack = HDDRackConfiguration()
    copied = copy_rack(rack)

    copied.jbods_per_rack = 1

    assert rack.jbods_per_rack == 8
    assert copied is not rack


class TestRackSerialization:
    """Tests for rack dict conversion."""

    def test_rack_to_dict_tags_family(self):
        data = rack_to_dict(SSDRackConfiguration())

        assert data["rack_type"] == "SSD"
        assert data["jbof_cost"] == 8000
        assert "jbod_cost" not in data

    def test_rack_from_dict_restores_rack(self):
        rack = HDDRackConfiguration(jbods_per_rack=6, server_cost=12000)

        assert rack_from_dict(rack_to_dict(rack)) == rack

    def test_rack_from_dict_missing_fields_take_defaults(self):
        rack = rack_from_dict({"rack_type": "SSD", "jbofs_per_rack": 4})

        assert isinstance(rack, SSDRackConfiguration)
        assert rack.jbofs_per_rack == 4
        assert rack.jbof_cost == 8000

    def test_rack_from_dict_rack_type_case_insensitive(self):
        assert isinstance(rack_from_dict({"rack_type": "hdd"}), HDDRackConfiguration)

    def test_rack_from_dict_missing_rack_type(self):
        with pytest.raises(ValueError, match="rack_type must be one of: HDD, SSD"):
            rack_from_dict({"jbods_per_rack": 4})

    def test_rack_from_dict_unknown_rack_type(self):
        with pytest.raises(ValueError, match="rack_type"):
            rack_from_dict({"rack_type": "TAPE"})

    def test_rack_from_dict_rejects_other_family_fields(self):
        """Test an SSD rack cannot be given JBOD fields."""
        with pytest.raises(ValueError, match="Unknown fields for SSD rack: jbod_cost"):
            rack_from_dict({"rack_type": "SSD", "jbod_cost": 100})

    def test_rack_from_dict_rejects_non_numeric(self):
        with pytest.raises(TypeError, match="server_cost must be a number"):
            rack_from_dict({"rack_type": "HDD", "server_cost": "cheap"})

    def test_rack_from_dict_rejects_bool(self):
        with pytest.raises(TypeError):
            rack_from_dict({"rack_type": "HDD", "jbods_per_rack": True})

    @pytest.mark.parametrize("data", [None, [1], "HDD", 42])
    def test_rack_from_dict_requires_dict(self, data):
        with pytest.raises(TypeError, match="rack must be an object"):
            rack_from_dict(data)

    def test_rack_from_dict_integer_too_large(self):
        with pytest.raises(ValueError, match="servers_per_rack is too large"):
            rack_from_dict({"rack_type": "HDD", "servers_per_rack": 10**400})

    def test_rack_from_dict_stores_floats(self):
        rack = rack_from_dict({"rack_type": "HDD", "jbods_per_rack": 6})

        assert isinstance(rack.jbods_per_rack, float)
        assert rack.jbods_per_rack == 6


class TestUpdateRack:
    """Tests for partial rack updates."""

    def test_update_rack_changes_fields(self):
        rack = HDDRackConfiguration()
        updated = update_rack(rack, {"jbods_per_rack": 4})

        assert updated.jbods_per_rack == 4
        assert rack.jbods_per_rack == 8

    def test_update_rack_switches_family(self):
        """Test switching family keeps shared fields and defaults the new enclosure."""
        rack = HDDRackConfiguration(server_cost=9000, jbod_cost=1234)
        updated = update_rack(rack, {"rack_type": "SSD"})

        assert isinstance(updated, SSDRackConfiguration)
        assert updated.server_cost == 9000
        assert updated.jbof_cost == 8000

    def test_update_rack_switch_family_with_new_fields(self):
        rack = HDDRackConfiguration()
        updated = update_rack(rack, {"rack_type": "SSD", "jbofs_per_rack": 12})

        assert updated.jbofs_per_rack == 12

    def test_update_rack_same_family_keeps_enclosure_edits(self):
        """Test naming the current family leaves JBOD fields as edited."""
        rack = update_rack(HDDRackConfiguration(), {"jbods_per_rack": 10, "jbod_cost": 7000})

        updated = update_rack(rack, {"rack_type": "hdd", "rack_cost": 2500})

        assert isinstance(updated, HDDRackConfiguration)
        assert updated.jbods_per_rack == 10
        assert updated.jbod_cost == 7000
        assert updated.rack_cost == 2500

    def test_update_rack_same_ssd_family_keeps_jbof_edits(self):
        rack = SSDRackConfiguration(jbofs_per_rack=3)

        updated = update_rack(rack, {"rack_type": "SSD"})

        assert updated == rack

    def test_update_rack_invalid_rack_type(self):
        with pytest.raises(ValueError, match="rack_type must be one of"):
            update_rack(HDDRackConfiguration(), {"rack_type": "TAPE"})

    def test_update_rack_rejects_unknown_field(self):
        with pytest.raises(ValueError):
            update_rack(HDDRackConfiguration(), {"jbof_cost": 1})
