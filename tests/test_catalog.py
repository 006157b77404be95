"""Tests for the board/variant/flag catalog."""

import pytest

from meshflash.catalog import (
    BOARDS,
    ENVIRONMENT_MAP,
    FLAGS,
    OPTIONAL_GROUP,
    REQUIRED_GROUP,
    VARIANTS,
    FlagDefinition,
    FlagKind,
    Variant,
    boards_for_variant,
    environment_name,
    get_board,
    get_flag,
    get_preset,
    get_variant,
    list_boards,
    list_presets,
    list_variants,
    preset_flags,
    to_bool,
    ui_field_groups,
    variants_for_board,
)
from meshflash.errors import (
    BoardNotFoundError,
    ConfigurationMissingError,
    InvalidConfigurationError,
    VariantNotFoundError,
)


class TestBoards:
    def test_list_boards(self):
        boards = list_boards()
        assert len(boards) == 33
        assert boards[0].id == "heltec_v3"

    def test_get_board(self):
        board = get_board("rak4631")
        assert board.name == "RAK4631"
        assert board.platform == "nordicnrf52"
        assert board.framework == "arduino"

    def test_unknown_board_raises(self):
        with pytest.raises(BoardNotFoundError) as exc_info:
            get_board("nonexistent")
        assert "Unknown board" in exc_info.value.message
        assert exc_info.value.exit_code == 2

    def test_board_not_found_is_invalid_configuration(self):
        with pytest.raises(InvalidConfigurationError):
            get_board("nonexistent")

    def test_nrf52_boards_convert_to_uf2(self):
        for board in list_boards():
            if board.platform == "nordicnrf52":
                assert board.post_process == "hex_to_uf2", board.id
            else:
                assert board.post_process is None, board.id

    def test_every_board_variant_is_registered(self):
        for board in list_boards():
            for variant_id in board.variants:
                assert variant_id in VARIANTS, f"{board.id}: {variant_id}"


class TestVariants:
    def test_list_variants(self):
        ids = [v.id for v in list_variants()]
        assert ids == ["companion_ble", "companion_wifi", "companion_usb", "repeater", "room_server", "terminal_chat"]

    def test_get_variant(self):
        variant = get_variant("repeater")
        assert variant.name == "Repeater"
        assert variant.required_flags == (
            "ADVERT_NAME", "ADVERT_LAT", "ADVERT_LON", "ADMIN_PASSWORD", "MAX_NEIGHBOURS",
        )

    def test_unknown_variant_raises(self):
        with pytest.raises(VariantNotFoundError):
            get_variant("bogus")

    def test_variants_for_board_preserves_board_order(self):
        ids = [v.id for v in variants_for_board("heltec_v3")]
        assert ids == ["companion_ble", "companion_wifi", "companion_usb", "repeater", "room_server", "terminal_chat"]

    def test_variants_for_unknown_board_is_empty(self):
        assert variants_for_board("nonexistent") == []

    def test_boards_for_variant(self):
        ids = {b.id for b in boards_for_variant("companion_wifi")}
        assert ids == {"heltec_v3"}

    def test_every_variant_flag_is_defined(self):
        for variant in list_variants():
            for name in variant.required_flags + variant.optional_flags:
                assert name in FLAGS, f"{variant.id}: {name}"


class TestEnvironmentName:
    def test_known_pair(self):
        assert environment_name("heltec_v3", "repeater") == "Heltec_v3_repeater"
        assert environment_name("rak4631", "repeater") == "RAK_4631_Repeater"

    def test_every_advertised_pair_has_an_environment(self):
        for board in list_boards():
            for variant_id in board.variants:
                assert environment_name(board.id, variant_id)

    def test_map_has_no_unadvertised_pairs(self):
        for board_id, envs in ENVIRONMENT_MAP.items():
            assert board_id in BOARDS
            assert set(envs) == set(BOARDS[board_id].variants), board_id

    def test_unmapped_board_raises(self):
        with pytest.raises(ConfigurationMissingError) as exc_info:
            environment_name("nonexistent", "repeater")
        assert "nonexistent" in exc_info.value.message

    def test_unmapped_variant_raises(self):
        with pytest.raises(ConfigurationMissingError) as exc_info:
            environment_name("xiao_c3", "companion_ble")
        assert "companion_ble" in exc_info.value.message


class TestFlagKind:
    def test_boolean_true(self):
        assert FlagKind.BOOLEAN.format("MESH_DEBUG", True) == "MESH_DEBUG=1"

    def test_boolean_false_is_omitted(self):
        assert FlagKind.BOOLEAN.format("MESH_DEBUG", False) is None

    def test_text_is_quoted(self):
        assert FlagKind.TEXT.format("ADVERT_NAME", "Node1") == "ADVERT_NAME='\"Node1\"'"

    def test_secret_is_quoted(self):
        assert FlagKind.SECRET.format("ADMIN_PASSWORD", "pw") == "ADMIN_PASSWORD='\"pw\"'"

    def test_number_is_bare(self):
        assert FlagKind.NUMBER.format("MAX_CONTACTS", 100) == "MAX_CONTACTS=100"

    def test_number_keeps_decimals(self):
        assert FLAGS["ADVERT_LAT"].kind is FlagKind.NUMBER
        assert FlagKind.NUMBER.format("ADVERT_LAT", -33.86) == "ADVERT_LAT=-33.86"

    def test_choice_is_bare(self):
        assert FlagKind.CHOICE.format("LORA_BANDWIDTH", "250") == "LORA_BANDWIDTH=250"


class TestToBool:
    @pytest.mark.parametrize("value", [True, 1, "1", "true", "YES", "on"])
    def test_truthy(self, value):
        assert to_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, 2, "", "0", "false", "off", None])
    def test_falsy(self, value):
        assert to_bool(value) is False


class TestFlagDefinition:
    def test_get_flag(self):
        assert get_flag("TCP_PORT").kind is FlagKind.NUMBER
        assert get_flag("NOPE") is None

    def test_parse_integer(self):
        assert FLAGS["MAX_CONTACTS"].parse("50") == 50
        assert FLAGS["ADVERT_LAT"].parse("-33.86") == -33.86

    def test_parse_bad_integer(self):
        with pytest.raises(InvalidConfigurationError):
            FLAGS["MAX_CONTACTS"].parse("lots")

    def test_parse_boolean(self):
        assert FLAGS["MESH_DEBUG"].parse("yes") is True
        assert FLAGS["MESH_DEBUG"].parse("0") is False

    def test_parse_bad_boolean(self):
        with pytest.raises(InvalidConfigurationError):
            FLAGS["MESH_DEBUG"].parse("maybe")

    def test_validate_bounds(self):
        assert FLAGS["TCP_PORT"].validate("8080") == 8080
        with pytest.raises(InvalidConfigurationError, match="maximum"):
            FLAGS["TCP_PORT"].validate("70000")
        with pytest.raises(InvalidConfigurationError, match="minimum"):
            FLAGS["ADVERT_LAT"].validate("-91")

    def test_validate_options(self):
        assert FLAGS["LORA_BANDWIDTH"].validate("125") == "125"
        with pytest.raises(InvalidConfigurationError):
            FLAGS["LORA_BANDWIDTH"].validate("300")

    def test_text_passes_through(self):
        definition = FlagDefinition("X", "X", FlagKind.TEXT)
        assert definition.validate("hello world") == "hello world"


class TestUiFieldGroups:
    def test_repeater_groups(self):
        groups = ui_field_groups(get_variant("repeater"))
        assert [f.key for f in groups["Device Settings"]] == ["ADVERT_NAME"]
        assert [f.key for f in groups["Location Settings"]] == ["ADVERT_LAT", "ADVERT_LON"]
        assert [f.key for f in groups["Security Settings"]] == ["ADMIN_PASSWORD", "GUEST_PASSWORD"]
        assert [f.key for f in groups["GPS Settings"]] == ["PERSISTANT_GPS", "FORCE_GPS_ALIVE"]

    def test_required_before_optional_within_group(self):
        groups = ui_field_groups(get_variant("room_server"))
        capacity = groups["Capacity Settings"]
        assert [f.key for f in capacity] == ["MAX_CLIENTS", "MAX_UNSYNCED_POSTS"]
        security = groups["Security Settings"]
        assert all(f.required for f in security)

    def test_ungrouped_flags_use_default_groups(self):
        groups = ui_field_groups(get_variant("companion_ble"))
        assert [f.key for f in groups[OPTIONAL_GROUP]] == ["BLE_DEBUG_LOGGING"]
        assert REQUIRED_GROUP not in groups

    def test_unordered_flags_keep_registry_order(self):
        variant = Variant("x", "X", "", optional_flags=("MESH_PACKET_LOGGING", "MESH_DEBUG"))
        groups = ui_field_groups(variant)
        assert [f.key for f in groups[OPTIONAL_GROUP]] == ["MESH_DEBUG", "MESH_PACKET_LOGGING"]

    def test_field_spec_carries_default(self):
        groups = ui_field_groups(get_variant("repeater"))
        name = groups["Device Settings"][0]
        assert name.required is True
        assert name.default == "MeshCore Node"

    def test_every_flag_appears_once(self):
        for variant in list_variants():
            groups = ui_field_groups(variant)
            keys = [f.key for fields in groups.values() for f in fields]
            assert sorted(keys) == sorted(variant.required_flags + variant.optional_flags)


class TestPresets:
    def test_list_presets(self):
        assert [p.id for p in list_presets()] == ["aus_nz", "uk_eu", "can_usa", "custom"]

    def test_preset_flags(self):
        assert preset_flags("uk_eu") == {
            "LORA_FREQUENCY": "869.525",
            "LORA_BANDWIDTH": "250",
            "LORA_SPREADING_FACTOR": "11",
        }

    def test_custom_preset_has_no_flags(self):
        assert preset_flags("custom") == {}

    def test_unknown_preset_raises(self):
        with pytest.raises(InvalidConfigurationError):
            get_preset("mars")
