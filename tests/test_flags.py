"""Tests for compile-time flag generation."""

import pytest

from meshflash.catalog import FLAGS, get_board, get_variant
from meshflash.flags import compile_flags, format_flag, parse_custom_flags


@pytest.fixture
def heltec():
    return get_board("heltec_v3")


@pytest.fixture
def repeater():
    return get_variant("repeater")


def _names(flags):
    return [f.split("=", 1)[0] for f in flags]


class TestFormatFlag:
    def test_none_is_omitted(self):
        assert format_flag(FLAGS["ADVERT_NAME"], None) is None

    def test_empty_string_is_omitted(self):
        assert format_flag(FLAGS["WIFI_SSID"], "") is None

    def test_zero_is_kept(self):
        assert format_flag(FLAGS["ADVERT_LAT"], 0) == "ADVERT_LAT=0"


class TestParseCustomFlags:
    def test_strips_define_prefix(self):
        assert parse_custom_flags("-DFOO=1 -DBAR=2") == ["FOO=1", "BAR=2"]

    def test_any_whitespace_separates(self):
        assert parse_custom_flags("  FOO=1\t\n-DBAR  ") == ["FOO=1", "BAR"]

    def test_empty(self):
        assert parse_custom_flags("") == []
        assert parse_custom_flags("   ") == []
        assert parse_custom_flags(None) == []

    def test_bare_prefix_is_dropped(self):
        assert parse_custom_flags("-D FOO=1") == ["FOO=1"]


class TestCompileFlags:
    def test_repeater_scenario(self, heltec, repeater):
        flags = compile_flags(heltec, repeater, {
            "ADVERT_NAME": "Node1",
            "ADVERT_LAT": 1.0,
            "ADVERT_LON": 2.0,
            "ADMIN_PASSWORD": "secret",
        })
        assert flags == [
            "ADVERT_NAME='\"Node1\"'",
            "ADVERT_LAT=1.0",
            "ADVERT_LON=2.0",
            "ADMIN_PASSWORD='\"secret\"'",
            "MAX_NEIGHBOURS=8",
        ]

    def test_required_flags_fall_back_to_defaults(self, heltec, repeater):
        flags = compile_flags(heltec, repeater)
        assert flags[0] == "ADVERT_NAME='\"MeshCore Node\"'"
        assert "ADMIN_PASSWORD='\"password\"'" in flags

    def test_required_empty_value_is_skipped(self, heltec):
        variant = get_variant("companion_ble")
        flags = compile_flags(heltec, variant, {"BLE_PIN_CODE": ""})
        assert "BLE_PIN_CODE" not in _names(flags)
        assert "MAX_CONTACTS=100" in flags

    def test_required_none_uses_default(self, heltec, repeater):
        flags = compile_flags(heltec, repeater, {"ADVERT_NAME": None})
        assert flags[0] == "ADVERT_NAME='\"MeshCore Node\"'"

    def test_common_flags_follow_required(self, heltec, repeater):
        flags = compile_flags(heltec, repeater, {"MESH_DEBUG": True, "MESH_PACKET_LOGGING": True})
        assert flags[5:] == ["MESH_DEBUG=1", "MESH_PACKET_LOGGING=1"]

    def test_common_flags_off_by_default(self, heltec, repeater):
        flags = compile_flags(heltec, repeater)
        assert "MESH_DEBUG" not in _names(flags)
        assert "MESH_PACKET_LOGGING" not in _names(flags)

    def test_optional_only_when_set(self, heltec, repeater):
        flags = compile_flags(heltec, repeater)
        assert "GUEST_PASSWORD" not in _names(flags)
        flags = compile_flags(heltec, repeater, {"GUEST_PASSWORD": "guest"})
        assert flags[-1] == "GUEST_PASSWORD='\"guest\"'"

    def test_optional_boolean_false_is_omitted(self, heltec, repeater):
        flags = compile_flags(heltec, repeater, {"PERSISTANT_GPS": False, "FORCE_GPS_ALIVE": True})
        assert "PERSISTANT_GPS" not in _names(flags)
        assert "FORCE_GPS_ALIVE=1" in flags

    def test_unknown_user_flags_are_ignored(self, heltec, repeater):
        flags = compile_flags(heltec, repeater, {"NOT_A_FLAG": 1})
        assert "NOT_A_FLAG" not in _names(flags)

    def test_custom_flags_appended(self, heltec, repeater):
        flags = compile_flags(heltec, repeater, custom_flags="-DFOO=1 -DBAR")
        assert flags[-2:] == ["FOO=1", "BAR"]

    def test_custom_cannot_override_variant_flag(self, heltec, repeater):
        flags = compile_flags(heltec, repeater, custom_flags="-DMAX_NEIGHBOURS=99")
        assert "MAX_NEIGHBOURS=8" in flags
        assert "MAX_NEIGHBOURS=99" not in flags

    def test_duplicate_custom_tokens_keep_first(self, heltec, repeater):
        flags = compile_flags(heltec, repeater, custom_flags="FOO=1 FOO=2")
        assert "FOO=1" in flags
        assert "FOO=2" not in flags

    def test_custom_dedup_is_case_sensitive(self, heltec, repeater):
        flags = compile_flags(heltec, repeater, custom_flags="foo=1 FOO=2")
        assert flags[-2:] == ["foo=1", "FOO=2"]

    def test_names_are_unique(self, heltec):
        for variant_id in heltec.variants:
            variant = get_variant(variant_id)
            flags = compile_flags(heltec, variant, {"MESH_DEBUG": True}, "-DMESH_DEBUG=0 -DX=1 -DX=2")
            names = _names(flags)
            assert len(names) == len(set(names)), variant_id

    def test_idempotent(self, heltec, repeater):
        args = (heltec, repeater, {"ADVERT_NAME": "A", "MESH_DEBUG": "1"}, "-DFOO=1")
        assert compile_flags(*args) == compile_flags(*args)

    def test_terminal_chat_has_no_optional(self, heltec):
        flags = compile_flags(heltec, get_variant("terminal_chat"))
        assert flags == ["MAX_CONTACTS=100", "MAX_GROUP_CHANNELS=8"]
