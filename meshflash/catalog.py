"""Board, variant and flag catalog for meshflash.

Static tables loaded once at import time. Nothing here performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from meshflash.errors import (
    BoardNotFoundError,
    ConfigurationMissingError,
    InvalidConfigurationError,
    VariantNotFoundError,
)

REQUIRED_GROUP = "Required Settings"
OPTIONAL_GROUP = "Optional Settings"

_TRUE_WORDS = {"1", "true", "yes", "on", "y"}
_FALSE_WORDS = {"0", "false", "no", "off", "n", ""}


class FlagKind(Enum):
    """Kinds of compile-time flag. Each kind owns its formatting rule."""

    TEXT = "text"
    SECRET = "password"
    NUMBER = "number"
    BOOLEAN = "checkbox"
    CHOICE = "select"

    @property
    def is_string(self) -> bool:
        return self in (FlagKind.TEXT, FlagKind.SECRET)

    def format(self, name: str, value) -> str | None:
        """Render NAME=value the way PlatformIO expects it in build_flags.

        Returns None when the flag must not be emitted (a false boolean).
        """
        if self is FlagKind.BOOLEAN:
            return f"{name}=1" if to_bool(value) else None
        if self.is_string:
            # pio needs the double quotes wrapped in single quotes to get a C string literal
            return f"{name}='\"{value}\"'"
        if self is FlagKind.NUMBER or self is FlagKind.CHOICE:
            return f"{name}={value}"
        raise AssertionError(f"Unhandled flag kind: {self}")


def to_bool(value) -> bool:
    """Interpret a checkbox value. Only real truthy markers count."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_WORDS
    return False


@dataclass(frozen=True)
class FlagDefinition:
    name: str
    label: str
    kind: FlagKind
    default: object = None
    description: str = ""
    minimum: float | None = None
    maximum: float | None = None
    options: tuple[str, ...] = ()
    group: str | None = None
    order: int | None = None

    def parse(self, raw):
        """Coerce a raw (usually CLI string) value to this flag's Python type."""
        if self.kind is FlagKind.BOOLEAN:
            if isinstance(raw, bool):
                return raw
            text = str(raw).strip().lower()
            if text in _TRUE_WORDS:
                return True
            if text in _FALSE_WORDS:
                return False
            raise InvalidConfigurationError(f"{self.name}: expected a boolean, got {raw!r}")
        if self.kind is FlagKind.NUMBER:
            if isinstance(raw, (int, float)) and not isinstance(raw, bool):
                return raw
            text = str(raw).strip()
            try:
                return int(text)
            except ValueError:
                pass
            try:
                return float(text)
            except ValueError:
                raise InvalidConfigurationError(f"{self.name}: expected a number, got {raw!r}") from None
        return str(raw)

    def validate(self, raw):
        """Parse and check bounds and options. Returns the parsed value."""
        value = self.parse(raw)
        if self.kind is FlagKind.NUMBER:
            if self.minimum is not None and value < self.minimum:
                raise InvalidConfigurationError(f"{self.name}: {value} is below the minimum of {self.minimum}")
            if self.maximum is not None and value > self.maximum:
                raise InvalidConfigurationError(f"{self.name}: {value} is above the maximum of {self.maximum}")
        if self.kind is FlagKind.CHOICE and self.options and value not in self.options:
            raise InvalidConfigurationError(
                f"{self.name}: {value!r} is not one of {', '.join(self.options)}"
            )
        return value


@dataclass(frozen=True)
class Board:
    """A hardware target the MeshCore tree can build for."""
    id: str
    name: str
    platform: str
    framework: str
    variants: tuple[str, ...]
    post_process: str | None = None


@dataclass(frozen=True)
class Variant:
    """A firmware role, e.g. repeater or companion radio."""
    id: str
    name: str
    description: str
    required_flags: tuple[str, ...] = ()
    optional_flags: tuple[str, ...] = ()


@dataclass(frozen=True)
class FieldSpec:
    """One form field for a variant: the definition plus its role in that variant."""
    definition: FlagDefinition
    required: bool
    default: object

    @property
    def key(self) -> str:
        return self.definition.name


@dataclass(frozen=True)
class RegionalPreset:
    id: str
    name: str
    description: str
    frequency: str | None = None
    bandwidth: str | None = None
    spreading_factor: str | None = None


BOARDS: dict[str, Board] = {}
VARIANTS: dict[str, Variant] = {}
FLAGS: dict[str, FlagDefinition] = {}
PRESETS: dict[str, RegionalPreset] = {}


def _register_board(board: Board) -> Board:
    BOARDS[board.id] = board
    return board


def _register_variant(variant: Variant) -> Variant:
    VARIANTS[variant.id] = variant
    return variant


def _register_flag(flag: FlagDefinition) -> FlagDefinition:
    FLAGS[flag.name] = flag
    return flag


def _register_preset(preset: RegionalPreset) -> RegionalPreset:
    PRESETS[preset.id] = preset
    return preset


# --- Lookups ---

def get_board(board_id: str) -> Board:
    """Get a board by id. Raises BoardNotFoundError if not found."""
    if board_id not in BOARDS:
        raise BoardNotFoundError(f"Unknown board: {board_id}. Use 'meshflash boards' to list supported boards.")
    return BOARDS[board_id]


def get_variant(variant_id: str) -> Variant:
    """Get a variant by id. Raises VariantNotFoundError if not found."""
    if variant_id not in VARIANTS:
        raise VariantNotFoundError(f"Unknown variant: {variant_id}. Use 'meshflash variants' to list variants.")
    return VARIANTS[variant_id]


def get_flag(name: str) -> FlagDefinition | None:
    return FLAGS.get(name)


def list_boards() -> list[Board]:
    """Return all supported boards."""
    return list(BOARDS.values())


def list_variants() -> list[Variant]:
    """Return all variants."""
    return list(VARIANTS.values())


def variants_for_board(board_id: str) -> list[Variant]:
    """Variants a board supports, in the board's order. Empty for an unknown board."""
    board = BOARDS.get(board_id)
    if board is None:
        return []
    return [VARIANTS[v] for v in board.variants]


def boards_for_variant(variant_id: str) -> list[Board]:
    """Boards that can run the given variant."""
    return [b for b in BOARDS.values() if variant_id in b.variants]


def environment_name(board_id: str, variant_id: str) -> str:
    """PlatformIO environment for a board/variant pair."""
    board_map = ENVIRONMENT_MAP.get(board_id)
    if board_map is None:
        raise ConfigurationMissingError(f"No environment mapping found for board: {board_id}")
    env = board_map.get(variant_id)
    if env is None:
        raise ConfigurationMissingError(
            f"No environment mapping found for board: {board_id}, variant: {variant_id}"
        )
    return env


def ui_field_groups(variant: Variant) -> dict[str, list[FieldSpec]]:
    """Group a variant's flags for form rendering.

    Flags without a group land in "Required Settings" or "Optional Settings".
    Inside a group, required flags come first, then ascending order; flags
    without an order sort last and keep registry order.
    """
    groups: dict[str, list[FieldSpec]] = {}
    registry_order = {name: i for i, name in enumerate(FLAGS)}

    def add(name: str, required: bool) -> None:
        definition = get_flag(name)
        if definition is None:
            return
        group = definition.group or (REQUIRED_GROUP if required else OPTIONAL_GROUP)
        groups.setdefault(group, []).append(
            FieldSpec(definition=definition, required=required, default=definition.default)
        )

    for name in variant.required_flags:
        add(name, True)
    for name in variant.optional_flags:
        add(name, False)

    for fields in groups.values():
        fields.sort(key=lambda f: (
            not f.required,
            f.definition.order is None,
            f.definition.order if f.definition.order is not None else 0,
            registry_order[f.key],
        ))
    return groups


def list_presets() -> list[RegionalPreset]:
    return list(PRESETS.values())


def get_preset(preset_id: str) -> RegionalPreset:
    if preset_id not in PRESETS:
        raise InvalidConfigurationError(
            f"Unknown preset: {preset_id}. Available: {', '.join(PRESETS)}"
        )
    return PRESETS[preset_id]


def preset_flags(preset_id: str) -> dict[str, str]:
    """LoRa radio flags for a regional preset. Empty for the custom preset."""
    preset = get_preset(preset_id)
    values = {
        "LORA_FREQUENCY": preset.frequency,
        "LORA_BANDWIDTH": preset.bandwidth,
        "LORA_SPREADING_FACTOR": preset.spreading_factor,
    }
    return {k: v for k, v in values.items() if v is not None}


# --- Flags ---

_register_flag(FlagDefinition("LORA_FREQUENCY", "LoRa Frequency", FlagKind.TEXT, "915.0",
                              "LoRa frequency in MHz"))
_register_flag(FlagDefinition("LORA_BANDWIDTH", "LoRa Bandwidth", FlagKind.CHOICE, "250",
                              "LoRa bandwidth in kHz", options=("125", "250", "500")))
_register_flag(FlagDefinition("LORA_SPREADING_FACTOR", "Spreading Factor", FlagKind.CHOICE, "12",
                              "LoRa spreading factor", options=("7", "8", "9", "10", "11", "12")))
_register_flag(FlagDefinition("LORA_TX_POWER", "TX Power", FlagKind.NUMBER, 20,
                              "LoRa transmit power in dBm", minimum=1, maximum=30))

_register_flag(FlagDefinition("DEVICE_NAME", "Device Name", FlagKind.TEXT, "MeshCore",
                              "Custom device name"))

_register_flag(FlagDefinition("WIFI_SSID", "WiFi SSID", FlagKind.TEXT, "",
                              "WiFi network name", group="Network Settings", order=1))
_register_flag(FlagDefinition("WIFI_PWD", "WiFi Password", FlagKind.SECRET, "",
                              "WiFi network password", group="Network Settings", order=2))
_register_flag(FlagDefinition("WIFI_DEBUG_LOGGING", "WiFi Debug", FlagKind.BOOLEAN, False,
                              "Enable WiFi debug"))

_register_flag(FlagDefinition("BLE_PIN_CODE", "BLE PIN Code", FlagKind.NUMBER, 123456,
                              "BLE pairing PIN", group="BLE Settings", order=1))
_register_flag(FlagDefinition("BLE_NAME_PREFIX", "BLE Name Prefix", FlagKind.TEXT, "",
                              "BLE device name prefix", group="BLE Settings", order=2))
_register_flag(FlagDefinition("BLE_DEBUG_LOGGING", "BLE Debug", FlagKind.BOOLEAN, False,
                              "Enable BLE debug"))

_register_flag(FlagDefinition("ADMIN_PASSWORD", "Admin Password", FlagKind.SECRET, "password",
                              "Admin password", group="Security Settings", order=1))
_register_flag(FlagDefinition("ROOM_PASSWORD", "Room Password", FlagKind.SECRET, "hello",
                              "Room password", group="Security Settings", order=2))
_register_flag(FlagDefinition("GUEST_PASSWORD", "Guest Password", FlagKind.SECRET, "",
                              "Guest access password", group="Security Settings", order=3))
_register_flag(FlagDefinition("ADVERT_NAME", "Advertised Name", FlagKind.TEXT, "MeshCore Node",
                              "Advertised device name", group="Device Settings", order=1))
_register_flag(FlagDefinition("ADVERT_LAT", "Latitude", FlagKind.NUMBER, 0.0,
                              "GPS latitude", minimum=-90, maximum=90,
                              group="Location Settings", order=1))
_register_flag(FlagDefinition("ADVERT_LON", "Longitude", FlagKind.NUMBER, 0.0,
                              "GPS longitude", minimum=-180, maximum=180,
                              group="Location Settings", order=2))

_register_flag(FlagDefinition("MAX_CONTACTS", "Max Contacts", FlagKind.NUMBER, 100,
                              "Maximum contacts", group="Capacity Settings", order=1))
_register_flag(FlagDefinition("MAX_GROUP_CHANNELS", "Max Group Channels", FlagKind.NUMBER, 8,
                              "Maximum group channels", group="Capacity Settings", order=2))
_register_flag(FlagDefinition("MAX_NEIGHBOURS", "Max Neighbours", FlagKind.NUMBER, 8,
                              "Maximum neighbours", group="Capacity Settings", order=3))
_register_flag(FlagDefinition("MAX_CLIENTS", "Max Clients", FlagKind.NUMBER, 10,
                              "Maximum clients", group="Capacity Settings", order=4))
_register_flag(FlagDefinition("OFFLINE_QUEUE_SIZE", "Offline Queue Size", FlagKind.NUMBER, 256,
                              "Offline message queue size", group="Capacity Settings", order=5))
_register_flag(FlagDefinition("MAX_UNSYNCED_POSTS", "Max Unsynced Posts", FlagKind.NUMBER, 100,
                              "Maximum unsynced posts", group="Capacity Settings", order=6))
_register_flag(FlagDefinition("TCP_PORT", "TCP Port", FlagKind.NUMBER, 5000,
                              "TCP server port", minimum=1, maximum=65535,
                              group="Network Settings", order=4))
_register_flag(FlagDefinition("SERVER_RESPONSE_DELAY", "Server Response Delay", FlagKind.NUMBER, 100,
                              "Server response delay (ms)", group="Performance Settings", order=1))
_register_flag(FlagDefinition("TXT_ACK_DELAY", "Text Ack Delay", FlagKind.NUMBER, 50,
                              "Text acknowledgment delay (ms)", group="Performance Settings", order=2))

_register_flag(FlagDefinition("SERIAL_RX", "Serial RX Pin", FlagKind.NUMBER, 3,
                              "Serial RX pin number", group="Serial Settings", order=1))
_register_flag(FlagDefinition("SERIAL_TX", "Serial TX Pin", FlagKind.NUMBER, 1,
                              "Serial TX pin number", group="Serial Settings", order=2))

_register_flag(FlagDefinition("PERSISTANT_GPS", "Persistent GPS", FlagKind.BOOLEAN, False,
                              "Keep GPS always on", group="GPS Settings", order=1))
_register_flag(FlagDefinition("FORCE_GPS_ALIVE", "Force GPS Alive", FlagKind.BOOLEAN, False,
                              "Force GPS to stay alive", group="GPS Settings", order=2))

_register_flag(FlagDefinition("MESH_DEBUG", "Mesh Debug", FlagKind.BOOLEAN, False,
                              "Enable mesh debug"))
_register_flag(FlagDefinition("MESH_PACKET_LOGGING", "Packet Logging", FlagKind.BOOLEAN, False,
                              "Enable packet logging"))

# Applied to every variant after its required flags.
COMMON_FLAGS: tuple[str, ...] = ("MESH_DEBUG", "MESH_PACKET_LOGGING")


# --- Variants ---

_register_variant(Variant(
    id="companion_ble",
    name="Companion BLE",
    description="Bluetooth Low Energy companion device for smartphone apps",
    required_flags=("MAX_CONTACTS", "MAX_GROUP_CHANNELS", "BLE_PIN_CODE", "OFFLINE_QUEUE_SIZE"),
    optional_flags=("BLE_DEBUG_LOGGING", "BLE_NAME_PREFIX"),
))

_register_variant(Variant(
    id="companion_wifi",
    name="Companion WiFi",
    description="WiFi companion device for network connectivity",
    required_flags=("MAX_CONTACTS", "MAX_GROUP_CHANNELS", "TCP_PORT"),
    optional_flags=("WIFI_SSID", "WIFI_PWD", "WIFI_DEBUG_LOGGING"),
))

_register_variant(Variant(
    id="companion_usb",
    name="Companion USB",
    description="USB/Serial companion device",
    required_flags=("MAX_CONTACTS", "MAX_GROUP_CHANNELS"),
    optional_flags=("SERIAL_RX", "SERIAL_TX"),
))

_register_variant(Variant(
    id="repeater",
    name="Repeater",
    description="LoRa mesh repeater node",
    required_flags=("ADVERT_NAME", "ADVERT_LAT", "ADVERT_LON", "ADMIN_PASSWORD", "MAX_NEIGHBOURS"),
    optional_flags=("GUEST_PASSWORD", "PERSISTANT_GPS", "FORCE_GPS_ALIVE"),
))

_register_variant(Variant(
    id="room_server",
    name="Room Server",
    description="Room-based chat server node",
    required_flags=("ADVERT_NAME", "ADVERT_LAT", "ADVERT_LON", "ADMIN_PASSWORD", "ROOM_PASSWORD"),
    optional_flags=("MAX_CLIENTS", "MAX_UNSYNCED_POSTS", "SERVER_RESPONSE_DELAY", "TXT_ACK_DELAY"),
))

_register_variant(Variant(
    id="terminal_chat",
    name="Terminal Chat",
    description="Terminal-based secure chat application",
    required_flags=("MAX_CONTACTS", "MAX_GROUP_CHANNELS"),
))


# --- Boards ---

_ESP32 = "espressif32"
_NRF52 = "nordicnrf52"
_RP2040 = "rp2040"
_STM32WL = "stm32wl"
_ALL_ROLES = ("companion_ble", "companion_usb", "repeater", "room_server", "terminal_chat")


def _board(board_id: str, name: str, platform: str, variants: tuple[str, ...]) -> Board:
    post_process = "hex_to_uf2" if platform == _NRF52 else None
    return _register_board(Board(id=board_id, name=name, platform=platform, framework="arduino",
                                 variants=variants, post_process=post_process))


# ESP32
_board("heltec_v3", "Heltec LoRa32 V3", _ESP32,
       ("companion_ble", "companion_wifi", "companion_usb", "repeater", "room_server", "terminal_chat"))
_board("heltec_v2", "Heltec LoRa32 V2", _ESP32, _ALL_ROLES)
_board("lilygo_tbeam_SX1262", "LilyGo T-Beam SX1262", _ESP32, ("companion_ble", "repeater"))
_board("lilygo_tbeam_SX1276", "LilyGo T-Beam SX1276", _ESP32, ("companion_ble", "repeater"))
_board("lilygo_t3s3", "LilyGo T3-S3 SX1262", _ESP32, _ALL_ROLES)
_board("heltec_tracker", "Heltec Wireless Tracker", _ESP32, ("companion_ble", "repeater", "room_server"))

# nRF52
_board("rak4631", "RAK4631", _NRF52, _ALL_ROLES)
_board("techo", "LilyGo T-Echo", _NRF52, ("companion_ble", "repeater", "room_server"))
_board("t114", "Heltec T114", _NRF52, ("companion_ble", "companion_usb", "repeater", "room_server"))

# Development/maker boards
_board("xiao_nrf52", "XIAO NRF52840", _NRF52, ("companion_ble", "companion_usb", "repeater", "room_server"))
_board("xiao_c3", "XIAO ESP32-C3", _ESP32, ("repeater",))
_board("station_g2", "Station G2", _ESP32, ("companion_ble", "companion_usb", "repeater", "room_server"))

# RP2040
_board("picow", "Raspberry Pi Pico W", _RP2040, ("companion_usb", "repeater", "room_server", "terminal_chat"))

# STM32WL
_board("rak3x72", "RAK3x72", _STM32WL, ("companion_usb", "repeater"))
_board("wio_e5_dev", "WIO-E5 Dev Board", _STM32WL, ("companion_usb", "repeater"))
_board("wio_e5_mini", "WIO-E5 Mini", _STM32WL, ("companion_usb", "repeater"))

# More ESP32
_board("generic_e22", "Generic E22", _ESP32, ("repeater",))
_board("generic_espnow", "Generic ESP-NOW", _ESP32, ("companion_usb", "repeater", "room_server", "terminal_chat"))
_board("heltec_ct62", "Heltec HT-CT62", _ESP32, ("companion_ble", "companion_usb", "repeater"))
_board("heltec_wireless_paper", "Heltec Wireless Paper", _ESP32, ("companion_ble", "repeater", "room_server"))
_board("lilygo_t3s3_sx1276", "LilyGo T3-S3 SX1276", _ESP32, _ALL_ROLES)
_board("lilygo_tbeam_supreme_SX1262", "LilyGo T-Beam S3 Supreme", _ESP32, ("companion_ble", "repeater", "room_server"))
_board("lilygo_tlora_c6", "LilyGo T-LoRa C6", _ESP32, ("companion_ble", "repeater", "room_server"))
_board("lilygo_tlora_v2_1", "LilyGo T-LoRa V2.1-1.6", _ESP32, _ALL_ROLES)
_board("meshadventurer", "Meshadventurer", _ESP32, _ALL_ROLES)
_board("tenstar_c3", "Tenstar ESP32-C3", _ESP32, ("repeater",))
_board("xiao_c6", "XIAO ESP32-C6", _ESP32, ("companion_ble", "repeater"))
_board("xiao_s3_wio", "XIAO ESP32-S3 WIO", _ESP32, _ALL_ROLES)

# More nRF52
_board("nano_g2_ultra", "Nano G2 Ultra", _NRF52, ("companion_ble",))
_board("promicro", "Faketec/Pro Micro NRF52840", _NRF52, _ALL_ROLES)
_board("t1000_e", "T1000-E", _NRF52, ("companion_ble",))
_board("thinknode_m1", "ThinkNode M1", _NRF52, ("companion_ble", "repeater", "room_server"))

# More RP2040
_board("waveshare_rp2040_lora", "Waveshare RP2040-LoRa", _RP2040,
       ("companion_usb", "repeater", "room_server", "terminal_chat"))


# --- Environment map: board -> variant -> PlatformIO environment ---

ENVIRONMENT_MAP: dict[str, dict[str, str]] = {
    "heltec_v3": {
        "companion_ble": "Heltec_v3_companion_radio_ble",
        "companion_wifi": "Heltec_v3_companion_radio_wifi",
        "companion_usb": "Heltec_v3_companion_radio_usb",
        "repeater": "Heltec_v3_repeater",
        "room_server": "Heltec_v3_room_server",
        "terminal_chat": "Heltec_v3_terminal_chat",
    },
    "heltec_v2": {
        "companion_ble": "Heltec_v2_companion_radio_ble",
        "companion_usb": "Heltec_v2_companion_radio_usb",
        "repeater": "Heltec_v2_repeater",
        "room_server": "Heltec_v2_room_server",
        "terminal_chat": "Heltec_v2_terminal_chat",
    },
    "lilygo_tbeam_SX1262": {
        "companion_ble": "Tbeam_SX1262_companion_radio_ble",
        "repeater": "Tbeam_SX1262_repeater",
    },
    "lilygo_tbeam_SX1276": {
        "companion_ble": "Tbeam_SX1276_companion_radio_ble",
        "repeater": "Tbeam_SX1276_repeater",
    },
    "lilygo_t3s3": {
        "companion_ble": "LilyGo_T3S3_sx1262_companion_radio_ble",
        "companion_usb": "LilyGo_T3S3_sx1262_companion_radio_usb",
        "repeater": "LilyGo_T3S3_sx1262_Repeater",
        "room_server": "LilyGo_T3S3_sx1262_room_server",
        "terminal_chat": "LilyGo_T3S3_sx1262_terminal_chat",
    },
    "heltec_tracker": {
        "companion_ble": "Heltec_Wireless_Tracker_companion_radio_ble",
        "repeater": "Heltec_Wireless_Tracker_repeater",
        "room_server": "Heltec_Wireless_Tracker_room_server",
    },
    "rak4631": {
        "companion_ble": "RAK_4631_companion_radio_ble",
        "companion_usb": "RAK_4631_companion_radio_usb",
        "repeater": "RAK_4631_Repeater",
        "room_server": "RAK_4631_room_server",
        "terminal_chat": "RAK_4631_terminal_chat",
    },
    "techo": {
        "companion_ble": "LilyGo_T-Echo_companion_radio_ble",
        "repeater": "LilyGo_T-Echo_repeater",
        "room_server": "LilyGo_T-Echo_room_server",
    },
    "t114": {
        "companion_ble": "Heltec_t114_companion_radio_ble",
        "companion_usb": "Heltec_t114_companion_radio_usb",
        "repeater": "Heltec_t114_repeater",
        "room_server": "Heltec_t114_room_server",
    },
    "xiao_nrf52": {
        "companion_ble": "Xiao_nrf52_companion_radio_ble",
        "companion_usb": "Xiao_nrf52_companion_radio_usb",
        "repeater": "Xiao_nrf52_repeater",
        "room_server": "Xiao_nrf52_room_server",
    },
    "xiao_c3": {
        "repeater": "Xiao_C3_Repeater_sx1262",
    },
    "station_g2": {
        "companion_ble": "Station_G2_companion_radio_ble",
        "companion_usb": "Station_G2_companion_radio_usb",
        "repeater": "Station_G2_repeater",
        "room_server": "Station_G2_room_server",
    },
    "picow": {
        "companion_usb": "PicoW_companion_radio_usb",
        "repeater": "PicoW_Repeater",
        "room_server": "PicoW_room_server",
        "terminal_chat": "PicoW_terminal_chat",
    },
    "rak3x72": {
        "companion_usb": "rak3x72_companion_radio_usb",
        "repeater": "rak3x72-repeater",
    },
    "wio_e5_dev": {
        "companion_usb": "wio-e5_companion_radio_usb",
        "repeater": "wio-e5-repeater",
    },
    "wio_e5_mini": {
        "companion_usb": "wio-e5-mini_companion_radio_usb",
        "repeater": "wio-e5-mini-repeater",
    },
    "generic_e22": {
        "repeater": "Generic_E22_sx1262_repeater",
    },
    "generic_espnow": {
        "companion_usb": "Generic_ESPNOW_comp_radio_usb",
        "repeater": "Generic_ESPNOW_repeatr",
        "room_server": "Generic_ESPNOW_room_svr",
        "terminal_chat": "Generic_ESPNOW_terminal_chat",
    },
    "heltec_ct62": {
        "companion_ble": "Heltec_ct62_companion_radio_ble",
        "companion_usb": "Heltec_ct62_companion_radio_usb",
        "repeater": "Heltec_ct62_repeater",
    },
    "heltec_wireless_paper": {
        "companion_ble": "Heltec_Wireless_Paper_companion_radio_ble",
        "repeater": "Heltec_Wireless_Paper_repeater",
        "room_server": "Heltec_Wireless_Paper_room_server",
    },
    "lilygo_t3s3_sx1276": {
        "companion_ble": "LilyGo_T3S3_sx1276_companion_radio_ble",
        "companion_usb": "LilyGo_T3S3_sx1276_companion_radio_usb",
        "repeater": "LilyGo_T3S3_sx1276_Repeater",
        "room_server": "LilyGo_T3S3_sx1276_room_server",
        "terminal_chat": "LilyGo_T3S3_sx1276_terminal_chat",
    },
    "lilygo_tbeam_supreme_SX1262": {
        "companion_ble": "T_Beam_S3_Supreme_SX1262_companion_radio_ble",
        "repeater": "T_Beam_S3_Supreme_SX1262_repeater",
        "room_server": "T_Beam_S3_Supreme_SX1262_room_server",
    },
    "lilygo_tlora_c6": {
        "companion_ble": "LilyGo_Tlora_C6_companion_radio_ble",
        "repeater": "LilyGo_Tlora_C6_repeater",
        "room_server": "LilyGo_Tlora_C6_room_server",
    },
    "lilygo_tlora_v2_1": {
        "companion_ble": "LilyGo_TLora_V2_1_1_6_companion_radio_ble",
        "companion_usb": "LilyGo_TLora_V2_1_1_6_companion_radio_usb",
        "repeater": "LilyGo_TLora_V2_1_1_6_Repeater",
        "room_server": "LilyGo_TLora_V2_1_1_6_room_server",
        "terminal_chat": "LilyGo_TLora_V2_1_1_6_terminal_chat",
    },
    "meshadventurer": {
        "companion_ble": "Meshadventurer_sx1262_companion_radio_ble",
        "companion_usb": "Meshadventurer_sx1262_companion_radio_usb",
        "repeater": "Meshadventurer_sx1262_repeater",
        "room_server": "Meshadventurer_sx1262_room_server",
        "terminal_chat": "Meshadventurer_sx1262_terminal_chat",
    },
    "tenstar_c3": {
        "repeater": "Tenstar_C3_Repeater_sx1262",
    },
    "xiao_c6": {
        "companion_ble": "Xiao_C6_companion_radio_ble",
        "repeater": "Xiao_C6_Repeater",
    },
    "xiao_s3_wio": {
        "companion_ble": "Xiao_S3_WIO_companion_radio_ble",
        "companion_usb": "Xiao_S3_WIO_companion_radio_serial",
        "repeater": "Xiao_S3_WIO_Repeater",
        "room_server": "Xiao_S3_WIO_room_server",
        "terminal_chat": "Xiao_S3_WIO_terminal_chat",
    },
    "nano_g2_ultra": {
        "companion_ble": "Nano_G2_Ultra_companion_radio_ble",
    },
    "promicro": {
        "companion_ble": "Faketec_companion_radio_ble",
        "companion_usb": "Faketec_companion_radio_usb",
        "repeater": "Faketec_Repeater",
        "room_server": "Faketec_room_server",
        "terminal_chat": "Faketec_terminal_chat",
    },
    "t1000_e": {
        "companion_ble": "t1000e_companion_radio_ble",
    },
    "thinknode_m1": {
        "companion_ble": "ThinkNode_M1_companion_radio_ble",
        "repeater": "ThinkNode_M1_repeater",
        "room_server": "ThinkNode_M1_room_server",
    },
    "waveshare_rp2040_lora": {
        "companion_usb": "waveshare_rp2040_lora_companion_radio_usb",
        "repeater": "waveshare_rp2040_lora_Repeater",
        "room_server": "waveshare_rp2040_lora_room_server",
        "terminal_chat": "waveshare_rp2040_lora_terminal_chat",
    },
}


# --- Regional presets ---

_register_preset(RegionalPreset("aus_nz", "Australia & New Zealand", "915.8MHz, SF10, 250kHz BW",
                                frequency="915.8", bandwidth="250", spreading_factor="10"))
_register_preset(RegionalPreset("uk_eu", "UK & Europe", "869.525MHz, SF11, 250kHz BW",
                                frequency="869.525", bandwidth="250", spreading_factor="11"))
_register_preset(RegionalPreset("can_usa", "Canada & USA", "910.525MHz, SF12, 250kHz BW",
                                frequency="910.525", bandwidth="250", spreading_factor="12"))
_register_preset(RegionalPreset("custom", "Custom Settings", "Configure manually"))
