"""Type definitions for Hue Control.

Dataclasses for the bridge identity found by discovery, the light records
returned by the bridge's v1 ``lights`` resource, and the partial state
payload used to change a light.
"""

from dataclasses import dataclass, field, fields
from typing import TypedDict


class AuthCredentials(TypedDict):
    """Credential and trust settings as stored in the user config file."""
    api_token: str
    trust_policy: str | None
    cert_fingerprint: str | None


@dataclass(frozen=True)
class BridgeIdentity:
    """Network identity of a bridge as advertised over mDNS."""
    addresses: tuple[str, ...]
    instance_name: str
    port: int
    txt_records: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.addresses:
            raise ValueError("BridgeIdentity requires at least one address")

    @property
    def host(self) -> str:
        """Address every request is sent to (the first advertised one)."""
        return self.addresses[0]

    @property
    def bridge_id(self) -> str | None:
        """Bridge ID from the 'bridgeid' TXT record, if advertised."""
        for record in self.txt_records:
            key, _, value = record.partition('=')
            if key.lower() == 'bridgeid' and value:
                return value
        return None

    @classmethod
    def manual(cls, ip: str, port: int = 443) -> 'BridgeIdentity':
        """Build an identity for a bridge whose address is already known."""
        return cls(addresses=(ip,), instance_name=ip, port=port)


@dataclass
class LightState:
    """Current state of a light as last reported by the bridge."""
    on: bool | None = None
    bri: int | None = None
    hue: int | None = None
    sat: int | None = None
    xy: tuple[float, float] | None = None
    ct: int | None = None
    effect: str | None = None
    alert: str | None = None
    colormode: str | None = None
    mode: str | None = None
    reachable: bool | None = None

    @classmethod
    def from_dict(cls, data: dict) -> 'LightState':
        xy = data.get('xy')
        return cls(
            on=data.get('on'),
            bri=data.get('bri'),
            hue=data.get('hue'),
            sat=data.get('sat'),
            xy=tuple(xy) if xy is not None else None,
            ct=data.get('ct'),
            effect=data.get('effect'),
            alert=data.get('alert'),
            colormode=data.get('colormode'),
            mode=data.get('mode'),
            reachable=data.get('reachable'),
        )


@dataclass
class SoftwareUpdate:
    state: str | None = None
    last_install: str | None = None


@dataclass
class LightCapabilities:
    """Capabilities block of a light record (control and streaming)."""
    certified: bool = False
    min_dim_level: int | None = None
    max_lumen: int | None = None
    colour_gamut_type: str | None = None
    colour_gamut: list[list[float]] = field(default_factory=list)
    ct_range: dict[str, int] = field(default_factory=dict)
    streaming_renderer: bool = False
    streaming_proxy: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'LightCapabilities':
        control = data.get('control', {})
        streaming = data.get('streaming', {})
        return cls(
            certified=data.get('certified', False),
            min_dim_level=control.get('mindimlevel'),
            max_lumen=control.get('maxlumen'),
            colour_gamut_type=control.get('colorgamuttype'),
            colour_gamut=control.get('colorgamut', []),
            ct_range=control.get('ct', {}),
            streaming_renderer=streaming.get('renderer', False),
            streaming_proxy=streaming.get('proxy', False),
        )


@dataclass
class LightConfig:
    archetype: str | None = None
    function: str | None = None
    direction: str | None = None
    startup_mode: str | None = None
    startup_configured: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'LightConfig':
        startup = data.get('startup', {})
        return cls(
            archetype=data.get('archetype'),
            function=data.get('function'),
            direction=data.get('direction'),
            startup_mode=startup.get('mode'),
            startup_configured=startup.get('configured', False),
        )


@dataclass
class Light:
    """A light as last fetched from the bridge.

    The bridge_id is the key the bridge used for this record. It is kept for
    display only: commands address lights by their position in the inventory.
    """
    name: str
    state: LightState
    bridge_id: str | None = None
    type: str | None = None
    model_id: str | None = None
    manufacturer: str | None = None
    product_name: str | None = None
    unique_id: str | None = None
    sw_version: str | None = None
    sw_config_id: str | None = None
    product_id: str | None = None
    capabilities: LightCapabilities = field(default_factory=LightCapabilities)
    config: LightConfig = field(default_factory=LightConfig)
    sw_update: SoftwareUpdate = field(default_factory=SoftwareUpdate)

    @classmethod
    def from_dict(cls, data: dict, bridge_id: str | None = None) -> 'Light':
        """Decode one light record from the bridge's lights mapping.

        Args:
            data: Light JSON object
            bridge_id: Key of the record in the lights mapping

        Raises:
            ValueError: If the record is not an object
        """
        if not isinstance(data, dict):
            raise ValueError(f"light record must be an object, got {type(data).__name__}")
        swupdate = data.get('swupdate', {})
        return cls(
            name=data.get('name', ''),
            state=LightState.from_dict(data.get('state', {})),
            bridge_id=bridge_id,
            type=data.get('type'),
            model_id=data.get('modelid'),
            manufacturer=data.get('manufacturername'),
            product_name=data.get('productname'),
            unique_id=data.get('uniqueid'),
            sw_version=data.get('swversion'),
            sw_config_id=data.get('swconfigid'),
            product_id=data.get('productid'),
            capabilities=LightCapabilities.from_dict(data.get('capabilities', {})),
            config=LightConfig.from_dict(data.get('config', {})),
            sw_update=SoftwareUpdate(
                state=swupdate.get('state'),
                last_install=swupdate.get('lastinstall'),
            ),
        )


# Inclusive bounds checked when a DesiredState is built
STATE_RANGES = {
    'bri': (0, 255),
    'hue': (0, 65535),
    'sat': (0, 255),
}


@dataclass
class DesiredState:
    """Partial state update for one light.

    Every field defaults to None and only fields that are set end up in the
    payload, so a command can change brightness without touching colour.
    Field names match the bridge's JSON keys.
    """
    on: bool | None = None
    bri: int | None = None
    hue: int | None = None
    sat: int | None = None
    xy: tuple[float, float] | None = None
    ct: int | None = None
    effect: str | None = None
    alert: str | None = None
    colormode: str | None = None
    mode: str | None = None
    reachable: bool | None = None

    def __post_init__(self):
        for name, (low, high) in STATE_RANGES.items():
            value = getattr(self, name)
            if value is not None and not low <= value <= high:
                raise ValueError(f"{name} must be between {low} and {high}, got {value}")
        if self.xy is not None and len(self.xy) != 2:
            raise ValueError(f"xy must be an (x, y) pair, got {self.xy!r}")

    def to_payload(self) -> dict:
        """Return the JSON body for a state PUT, containing only set fields."""
        payload = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            payload[f.name] = list(value) if f.name == 'xy' else value
        return payload

    @classmethod
    def from_state(cls, state: LightState) -> 'DesiredState':
        """Build a DesiredState that re-applies every populated field of a snapshot."""
        return cls(**{f.name: getattr(state, f.name) for f in fields(cls)})
