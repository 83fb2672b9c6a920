"""
Storage interfaces.

Pipelines write registry records and vendor intelligence through these
protocols and read vendor contacts from them. In-memory implementations
back the CLIs and tests.
"""

import threading
from typing import Dict, Iterable, List, Optional, Protocol

from .models import RegistryRecord, VendorContact, VendorIntelligence


class StorageError(Exception):
    """A store could not persist or load an item."""


class RegistryStore(Protocol):
    def upsert(self, record: RegistryRecord) -> None: ...


class IntelligenceStore(Protocol):
    def get(self, vendor_name: str) -> Optional[VendorIntelligence]: ...

    def upsert(self, intel: VendorIntelligence) -> None: ...


class VendorStore(Protocol):
    def all_vendors(self) -> List[VendorContact]: ...


class InMemoryRegistryStore:
    """Registry records keyed by registration number."""

    def __init__(self, records: Iterable[RegistryRecord] = ()):
        self._records: Dict[str, RegistryRecord] = {}
        self._lock = threading.Lock()
        for record in records:
            self.upsert(record)

    def upsert(self, record: RegistryRecord) -> None:
        if not record.registration_number:
            raise StorageError("record has no registration number")
        with self._lock:
            self._records[record.registration_number] = record

    def get(self, registration_number: str) -> Optional[RegistryRecord]:
        return self._records.get(registration_number)

    def all_records(self) -> List[RegistryRecord]:
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


class InMemoryIntelligenceStore:
    """Vendor intelligence keyed by case-insensitive vendor name."""

    def __init__(self):
        self._items: Dict[str, VendorIntelligence] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(vendor_name: str) -> str:
        return vendor_name.strip().lower()

    def get(self, vendor_name: str) -> Optional[VendorIntelligence]:
        return self._items.get(self._key(vendor_name))

    def upsert(self, intel: VendorIntelligence) -> None:
        with self._lock:
            self._items[self._key(intel.vendor_name)] = intel

    def __len__(self) -> int:
        return len(self._items)


class InMemoryVendorStore:
    """Fixed list of vendor contacts."""

    def __init__(self, vendors: Iterable[VendorContact] = ()):
        self._vendors = list(vendors)

    def add(self, vendor: VendorContact) -> None:
        self._vendors.append(vendor)

    def all_vendors(self) -> List[VendorContact]:
        return list(self._vendors)
