"""
Batch Repository — Frying Stations, Oil Batches and Test Records

The dashboard tracks each oil fill ("batch") on a frying station and every
test run against it. BatchRepository is the interface the API depends on;
InMemoryBatchRepository keeps everything in process memory and is what the
demo deployment uses. A database-backed implementation only needs to
satisfy the same interface.

Usage:
    repo = InMemoryBatchRepository(seed_demo=True)
    batch = repo.create_batch("STATION-A1", "Palm Olein")
"""

import logging
import secrets
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from threading import Lock
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from oiliq.exceptions import RecordNotFound
from oiliq.rules.aggregator import round_half_up
from oiliq.rules.classifier import ComplianceStatus


logger = logging.getLogger(__name__)


# ============================================================================
# Schemas
# ============================================================================

class StationStatus(str, Enum):
    """Operational state of a frying station."""
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


class FryingStation(BaseModel):
    """A fryer that oil batches are loaded into."""
    id: str
    name: str = Field(..., min_length=1)
    location: str
    equipment: str
    capacity: str
    status: StationStatus = StationStatus.ACTIVE


class Batch(BaseModel):
    """One oil fill on a station, tracked across its test history."""
    id: str
    station_id: str
    station_name: str
    location: str
    equipment: str
    oil_type: str
    created_at: datetime
    last_tested_at: Optional[datetime] = None
    tests_count: int = Field(default=0, ge=0)
    current_score: Optional[int] = Field(default=None, ge=0, le=100)
    current_status: Optional[ComplianceStatus] = None
    notes: Optional[str] = None


class TestRecord(BaseModel):
    """A persisted test result for a batch."""
    model_config = ConfigDict(protected_namespaces=())

    id: str
    batch_id: str
    timestamp: datetime
    ffa: float
    tpc: float
    pv: float
    score: int = Field(..., ge=0, le=100)
    classification: ComplianceStatus
    confidence: float
    operator_id: Optional[str] = None
    model_version: Optional[str] = None

    # Not a pytest test class despite the name
    __test__ = False


class BatchStatistics(BaseModel):
    """Dashboard headline numbers."""
    total_batches: int
    active_batches: int
    pass_rate: int = Field(..., description="% of tested batches currently passing")
    alert_count: int = Field(..., description="Batches not currently passing")


# ============================================================================
# Interface
# ============================================================================

class BatchRepository(ABC):
    """Storage interface for stations, batches and test records."""

    # --- Stations ---
    @abstractmethod
    def list_stations(self) -> List[FryingStation]: ...

    @abstractmethod
    def get_station(self, station_id: str) -> Optional[FryingStation]: ...

    @abstractmethod
    def add_station(
        self,
        name: str,
        location: str,
        equipment: str,
        capacity: str,
        status: StationStatus = StationStatus.ACTIVE,
    ) -> FryingStation: ...

    @abstractmethod
    def update_station(self, station_id: str, **updates) -> Optional[FryingStation]: ...

    # --- Batches ---
    @abstractmethod
    def list_batches(
        self,
        station_id: Optional[str] = None,
        status: Optional[ComplianceStatus] = None,
    ) -> List[Batch]: ...

    @abstractmethod
    def get_batch(self, batch_id: str) -> Optional[Batch]: ...

    @abstractmethod
    def create_batch(self, station_id: str, oil_type: str, notes: Optional[str] = None) -> Batch: ...

    @abstractmethod
    def update_batch_from_test(
        self,
        batch_id: str,
        score: int,
        status: ComplianceStatus,
        tested_at: Optional[datetime] = None,
    ) -> Optional[Batch]: ...

    # --- Test records ---
    @abstractmethod
    def add_test_record(self, **fields) -> TestRecord: ...

    @abstractmethod
    def list_test_records(self, batch_id: Optional[str] = None) -> List[TestRecord]: ...

    @abstractmethod
    def get_test_record(self, test_id: str) -> Optional[TestRecord]: ...

    # --- Statistics ---
    @abstractmethod
    def get_statistics(self) -> BatchStatistics: ...


# ============================================================================
# Demo seed data
# ============================================================================

DEMO_STATIONS: List[Dict] = [
    {"id": "STATION-A1", "name": "Fryer A1", "location": "Kitchen Zone A",
     "equipment": "Industrial Fryer 50L", "capacity": "50L", "status": "active"},
    {"id": "STATION-A2", "name": "Fryer A2", "location": "Kitchen Zone A",
     "equipment": "Industrial Fryer 50L", "capacity": "50L", "status": "active"},
    {"id": "STATION-A3", "name": "Fryer A3", "location": "Kitchen Zone A",
     "equipment": "Industrial Fryer 30L", "capacity": "30L", "status": "active"},
    {"id": "STATION-B1", "name": "Fryer B1", "location": "Kitchen Zone B",
     "equipment": "Commercial Fryer 25L", "capacity": "25L", "status": "maintenance"},
    {"id": "STATION-B2", "name": "Fryer B2", "location": "Kitchen Zone B",
     "equipment": "Commercial Fryer 25L", "capacity": "25L", "status": "active"},
]

DEMO_BATCHES: List[Dict] = [
    {"id": "BATCH-2024-0115-A", "station_id": "STATION-A1", "station_name": "Fryer A1",
     "location": "Kitchen Zone A", "equipment": "Industrial Fryer 50L",
     "oil_type": "Refined Sunflower Oil", "created_at": "2024-01-15T08:00:00Z",
     "last_tested_at": "2024-01-15T14:32:00Z", "tests_count": 3,
     "current_score": 84, "current_status": "pass"},
    {"id": "BATCH-2024-0115-B", "station_id": "STATION-A2", "station_name": "Fryer A2",
     "location": "Kitchen Zone A", "equipment": "Industrial Fryer 50L",
     "oil_type": "Palm Olein", "created_at": "2024-01-15T07:30:00Z",
     "last_tested_at": "2024-01-15T11:15:00Z", "tests_count": 2,
     "current_score": 91, "current_status": "pass"},
    {"id": "BATCH-2024-0115-C", "station_id": "STATION-A3", "station_name": "Fryer A3",
     "location": "Kitchen Zone A", "equipment": "Industrial Fryer 30L",
     "oil_type": "Refined Sunflower Oil", "created_at": "2024-01-14T08:00:00Z",
     "last_tested_at": "2024-01-15T09:45:00Z", "tests_count": 5,
     "current_score": 62, "current_status": "borderline"},
]


def _timestamp_ms(ts: datetime) -> int:
    return int(ts.timestamp() * 1000)


def batch_suffix(index: int) -> str:
    """Spreadsheet-style letters: 0 -> A, 25 -> Z, 26 -> AA, 27 -> AB."""
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


# ============================================================================
# In-memory implementation
# ============================================================================

class InMemoryBatchRepository(BatchRepository):
    """
    Process-local repository. Thread-safe; data is lost on restart.
    """

    def __init__(self, seed_demo: bool = False):
        self._lock = Lock()
        self._stations: List[FryingStation] = []
        self._batches: List[Batch] = []
        self._records: List[TestRecord] = []

        if seed_demo:
            self._stations = [FryingStation(**s) for s in DEMO_STATIONS]
            self._batches = [Batch(**b) for b in DEMO_BATCHES]
            logger.info(
                f"🌱 Seeded {len(self._stations)} stations and {len(self._batches)} batches"
            )

    # --- Stations ---

    def list_stations(self) -> List[FryingStation]:
        with self._lock:
            return list(self._stations)

    def get_station(self, station_id: str) -> Optional[FryingStation]:
        with self._lock:
            return next((s for s in self._stations if s.id == station_id), None)

    def add_station(
        self,
        name: str,
        location: str,
        equipment: str,
        capacity: str,
        status: StationStatus = StationStatus.ACTIVE,
    ) -> FryingStation:
        now = datetime.now(timezone.utc)
        station = FryingStation(
            id=f"STATION-{_timestamp_ms(now)}",
            name=name,
            location=location,
            equipment=equipment,
            capacity=capacity,
            status=status,
        )
        with self._lock:
            self._stations.append(station)
        logger.info(f"Station added: {station.id} ({station.name})")
        return station

    def update_station(self, station_id: str, **updates) -> Optional[FryingStation]:
        updates.pop("id", None)
        with self._lock:
            for index, station in enumerate(self._stations):
                if station.id == station_id:
                    updated = FryingStation(**{**station.model_dump(), **updates})
                    self._stations[index] = updated
                    return updated
        return None

    # --- Batches ---

    def list_batches(
        self,
        station_id: Optional[str] = None,
        status: Optional[ComplianceStatus] = None,
    ) -> List[Batch]:
        with self._lock:
            filtered = list(self._batches)
        if station_id:
            filtered = [b for b in filtered if b.station_id == station_id]
        if status:
            filtered = [b for b in filtered if b.current_status == status]
        return sorted(filtered, key=lambda b: b.created_at, reverse=True)

    def get_batch(self, batch_id: str) -> Optional[Batch]:
        with self._lock:
            return next((b for b in self._batches if b.id == batch_id), None)

    def create_batch(self, station_id: str, oil_type: str, notes: Optional[str] = None) -> Batch:
        """
        Open a new batch on a station.

        IDs follow BATCH-YYYYMMDD-<letters>: A..Z, then AA, AB... per day.

        Raises:
            RecordNotFound: If the station does not exist
        """
        station = self.get_station(station_id)
        if station is None:
            raise RecordNotFound("Station", station_id)

        now = datetime.now(timezone.utc)
        date_str = now.strftime("%Y%m%d")

        with self._lock:
            count = sum(1 for b in self._batches if date_str in b.id)
            suffix = batch_suffix(count)
            batch = Batch(
                id=f"BATCH-{date_str}-{suffix}",
                station_id=station.id,
                station_name=station.name,
                location=station.location,
                equipment=station.equipment,
                oil_type=oil_type,
                created_at=now,
                tests_count=0,
                notes=notes,
            )
            self._batches.insert(0, batch)

        logger.info(f"Batch created: {batch.id} on {station.id}")
        return batch

    def update_batch_from_test(
        self,
        batch_id: str,
        score: int,
        status: ComplianceStatus,
        tested_at: Optional[datetime] = None,
    ) -> Optional[Batch]:
        with self._lock:
            for index, batch in enumerate(self._batches):
                if batch.id == batch_id:
                    updated = batch.model_copy(update={
                        "last_tested_at": tested_at or datetime.now(timezone.utc),
                        "tests_count": batch.tests_count + 1,
                        "current_score": score,
                        "current_status": status,
                    })
                    self._batches[index] = updated
                    return updated
        return None

    # --- Test records ---

    def add_test_record(self, **fields) -> TestRecord:
        now = datetime.now(timezone.utc)
        fields.setdefault("timestamp", now)
        record = TestRecord(
            id=f"TEST-{_timestamp_ms(now)}-{secrets.token_hex(5)[:9]}",
            **fields,
        )
        with self._lock:
            self._records.insert(0, record)
        return record

    def list_test_records(self, batch_id: Optional[str] = None) -> List[TestRecord]:
        with self._lock:
            records = list(self._records)
        if batch_id:
            records = [r for r in records if r.batch_id == batch_id]
        return records

    def get_test_record(self, test_id: str) -> Optional[TestRecord]:
        with self._lock:
            return next((r for r in self._records if r.id == test_id), None)

    # --- Statistics ---

    def get_statistics(self) -> BatchStatistics:
        with self._lock:
            batches = list(self._batches)

        active = [b for b in batches if b.current_status is not None]
        passing = [b for b in active if b.current_status == ComplianceStatus.PASS]

        pass_rate = round_half_up(len(passing) / len(active) * 100) if active else 100

        return BatchStatistics(
            total_batches=len(batches),
            active_batches=len(active),
            pass_rate=pass_rate,
            alert_count=sum(1 for b in batches if b.current_status != ComplianceStatus.PASS),
        )
