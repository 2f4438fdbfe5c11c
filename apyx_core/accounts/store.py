"""Account store interface and the bundled in-memory implementation."""

import threading
from collections import deque
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from ..errors import AccountFetchError
from ..logging.config import get_logger, short_address
from ..models.accounts import CurveSnapshot, DuelSnapshot, ProgramConfig
from .decoders import decode_config, decode_curve, decode_duel
from .encoders import encode_config, encode_curve, encode_duel


@dataclass(frozen=True)
class MemcmpFilter:
    """Match accounts whose bytes at offset equal value."""
    offset: int
    value: bytes

    def matches(self, data: bytes) -> bool:
        end = self.offset + len(self.value)
        return len(data) >= end and bytes(data[self.offset:end]) == self.value


class AccountStore(ABC):
    """
    Read access to program accounts.

    Implementations own transport, commitment and timeouts. A transport
    failure is raised as AccountFetchError; an account that does not exist
    is returned as None.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = get_logger(f"accounts.store.{name}")

    @abstractmethod
    def fetch_account(self, address: bytes) -> Optional[bytes]:
        """
        Fetch raw account bytes.

        Args:
            address: 32-byte account address

        Returns:
            Account data, or None when the account does not exist

        Raises:
            AccountFetchError: On transport failure or timeout
        """
        pass

    @abstractmethod
    def scan(self, filters: Sequence[MemcmpFilter]) -> list[tuple[bytes, bytes]]:
        """Return (address, data) for every account matching all filters."""
        pass

    def fetch_multiple(self, addresses: Sequence[bytes]) -> list[Optional[bytes]]:
        """Fetch several accounts; order follows addresses."""
        return [self.fetch_account(address) for address in addresses]

    def fetch_curve(self, address: bytes) -> Optional[CurveSnapshot]:
        data = self.fetch_account(address)
        return decode_curve(data, address) if data is not None else None

    def fetch_duel(self, address: bytes) -> Optional[DuelSnapshot]:
        data = self.fetch_account(address)
        return decode_duel(data, address) if data is not None else None

    def fetch_config(self, address: bytes) -> Optional[ProgramConfig]:
        data = self.fetch_account(address)
        return decode_config(data, address) if data is not None else None


class InMemoryAccountStore(AccountStore):
    """
    Dictionary-backed store for tests, replay and offline simulation.

    Failures can be scripted per address with fail_next; each scripted error
    is raised once, in order, before the stored data is served again.
    fetch_log keeps the addresses of the most recent fetch_log_size fetches.
    """

    def __init__(self, name: str = "memory", fetch_log_size: int = 10_000):
        super().__init__(name)
        self._accounts: dict[bytes, bytes] = {}
        self._failures: dict[bytes, list[Exception]] = {}
        self._lock = threading.Lock()
        self.fetch_log: deque[bytes] = deque(maxlen=fetch_log_size)

    def put(self, address: bytes, data: bytes) -> None:
        with self._lock:
            self._accounts[bytes(address)] = bytes(data)

    def put_curve(self, address: bytes, curve: CurveSnapshot) -> None:
        self.put(address, encode_curve(curve))

    def put_duel(self, address: bytes, duel: DuelSnapshot) -> None:
        self.put(address, encode_duel(duel))

    def put_config(self, address: bytes, config: ProgramConfig) -> None:
        self.put(address, encode_config(config))

    def remove(self, address: bytes) -> None:
        with self._lock:
            self._accounts.pop(bytes(address), None)

    def fail_next(self, address: bytes, error: Optional[Exception] = None) -> None:
        """Queue an error for the next fetch of address."""
        if error is None:
            error = AccountFetchError("Scripted fetch failure", address=address)
        with self._lock:
            self._failures.setdefault(bytes(address), []).append(error)

    def fetch_account(self, address: bytes) -> Optional[bytes]:
        key = bytes(address)
        with self._lock:
            self.fetch_log.append(key)
            pending = self._failures.get(key)
            error = pending.pop(0) if pending else None
            data = self._accounts.get(key)

        if error is not None:
            self.logger.debug("Serving scripted failure", address=short_address(key), error=str(error))
            raise error

        return data

    def scan(self, filters: Sequence[MemcmpFilter]) -> list[tuple[bytes, bytes]]:
        with self._lock:
            snapshot = list(self._accounts.items())
        return [
            (address, data) for address, data in snapshot
            if all(f.matches(data) for f in filters)
        ]

    def fetch_count(self, address: bytes) -> int:
        """Number of fetches of address still held in the fetch log."""
        with self._lock:
            return self.fetch_log.count(bytes(address))

    def clear_fetch_log(self) -> None:
        with self._lock:
            self.fetch_log.clear()
