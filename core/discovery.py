"""mDNS discovery of the Hue bridge.

Browses for ``_hue._tcp`` advertisements with zeroconf and returns the
identity of the first bridge that resolves to an IPv4 address.
"""

import logging
import queue
import threading
import time
from enum import Enum

from zeroconf import ServiceBrowser, ServiceListener, Zeroconf, IPVersion

from core.config import SERVICE_TYPE, SERVICE_DOMAIN, DISCOVERY_TIMEOUT
from core.errors import DiscoveryInitError, DiscoveryNotFoundError
from models.types import BridgeIdentity

logger = logging.getLogger(__name__)

# How often search() wakes up to check the cancel event
POLL_INTERVAL = 0.25


class SelectionPolicy(Enum):
    """How search() picks a bridge when several advertise.

    FIRST_FOUND returns the first record seen without waiting for or
    deduplicating other advertisers. On networks with more than one bridge
    the result is not deterministic.
    """
    FIRST_FOUND = 'first-found'


def _decode_txt(properties: dict) -> tuple[str, ...]:
    """Turn zeroconf's TXT property dict into 'key=value' strings."""
    records = []
    for key, value in properties.items():
        key = key.decode('utf-8', 'replace') if isinstance(key, bytes) else str(key)
        if value is None:
            records.append(key)
            continue
        value = value.decode('utf-8', 'replace') if isinstance(value, bytes) else str(value)
        records.append(f"{key}={value}")
    return tuple(records)


class _BridgeListener(ServiceListener):
    """Resolves added services and hands results to the waiting search()."""

    def __init__(self, results: queue.Queue):
        self.results = results

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        try:
            info = zc.get_service_info(type_, name)
        except Exception as e:
            self.results.put(e)
            return
        if info is None:
            logger.debug("mDNS record %s did not resolve", name)
            return

        addresses = tuple(info.parsed_addresses(IPVersion.V4Only))
        if not addresses:
            logger.debug("mDNS record %s has no IPv4 address", name)
            return

        instance = name[:-len(type_) - 1] if name.endswith('.' + type_) else name
        self.results.put(BridgeIdentity(
            addresses=addresses,
            instance_name=instance,
            port=info.port,
            txt_records=_decode_txt(info.properties or {}),
        ))

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        pass

    def remove_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        pass


class DiscoveryController:
    """Owns one zeroconf resolver and browses it for bridges."""

    def __init__(self, policy: SelectionPolicy = SelectionPolicy.FIRST_FOUND):
        self.policy = policy
        self.zeroconf: Zeroconf | None = None

    def initialize(self):
        """Start the resolver.

        Raises:
            DiscoveryInitError: If the multicast socket cannot be set up
        """
        if self.zeroconf is not None:
            return
        try:
            self.zeroconf = Zeroconf(ip_version=IPVersion.V4Only)
        except Exception as e:
            raise DiscoveryInitError(f"Could not start mDNS resolver: {e}") from e

    def close(self):
        if self.zeroconf is not None:
            self.zeroconf.close()
            self.zeroconf = None

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, *exc_info):
        self.close()

    def search(self, service_type: str = SERVICE_TYPE, domain: str = SERVICE_DOMAIN,
               timeout: float = DISCOVERY_TIMEOUT,
               cancel: threading.Event | None = None) -> BridgeIdentity:
        """Browse for a bridge and return the first one found.

        Blocks until a record resolves, the timeout elapses, or cancel is set.
        The browser and the resolver are released before returning.

        Args:
            service_type: DNS-SD service type
            domain: DNS-SD domain
            timeout: Seconds to wait for an advertisement
            cancel: Optional event that aborts the browse when set

        Returns:
            BridgeIdentity of the first bridge seen

        Raises:
            DiscoveryInitError: If the resolver cannot be started
            DiscoveryNotFoundError: If nothing was found or the resolver failed
        """
        self.initialize()
        full_type = f"{service_type}.{domain}"
        results = queue.Queue()
        browser = None

        logger.info("Browsing for %s (timeout %.1fs)", full_type, timeout)
        try:
            try:
                browser = ServiceBrowser(self.zeroconf, full_type, _BridgeListener(results))
            except Exception as e:
                raise DiscoveryNotFoundError(f"mDNS browse for {full_type} failed: {e}") from e

            result = self._wait_for_result(results, timeout, cancel)
        finally:
            if browser is not None:
                browser.cancel()
            self.close()

        if result is None:
            raise DiscoveryNotFoundError(f"No {full_type} service found")
        if isinstance(result, Exception):
            raise DiscoveryNotFoundError(f"mDNS resolver error: {result}") from result

        logger.info("Found bridge %s at %s:%d", result.instance_name, result.host, result.port)
        return result

    @staticmethod
    def _wait_for_result(results: queue.Queue, timeout: float,
                         cancel: threading.Event | None):
        """Return the first queued item, or None on timeout/cancel."""
        deadline = time.monotonic() + timeout
        while True:
            if cancel is not None and cancel.is_set():
                logger.debug("Discovery cancelled")
                return None
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            try:
                return results.get(timeout=min(remaining, POLL_INTERVAL))
            except queue.Empty:
                continue


def discover_bridge(timeout: float = DISCOVERY_TIMEOUT,
                    cancel: threading.Event | None = None) -> BridgeIdentity:
    """Find the bridge on the local network with a one-off controller."""
    controller = DiscoveryController()
    controller.initialize()
    return controller.search(timeout=timeout, cancel=cancel)
