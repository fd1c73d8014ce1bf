"""
Legacy vehicle source

Read-only access to vehicle rows kept in the old Firebase Realtime
Database, through its REST API:

    GET {database_url}/{path}.json?auth={token}

Rows are mapped to LegacyVehicle in one place (LegacyVehicle.from_firebase)
and cached in the application cache.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import httpx

from busstation.business.core.errors import DomainError
from busstation.logger import get_logger
from busstation.utils.cache import TTLCache

logger = get_logger("bus_station.legacy")

CACHE_KEY = 'legacy:vehicles'


class LegacySourceError(DomainError):
    """The legacy database could not be read"""

    code = 'LEGACY_SOURCE_ERROR'


class LegacySourceDisabled(DomainError):
    """No legacy database is configured"""

    code = 'LEGACY_SOURCE_DISABLED'

    def __init__(self):
        super().__init__("Legacy vehicle source is not configured")


def _text(row: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = row.get(key)
        if value:
            return str(value).strip()
    return ''


def _int_or_none(value) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class LegacyVehicle:
    id: str
    plate_number: str
    vehicle_type: str
    seat_capacity: int
    manufacturer: str
    model_code: str
    manufacture_year: Optional[int]
    color: str
    chassis_number: str
    engine_number: str
    operator_name: str
    notes: str
    inspection_expiry_date: Optional[str]
    insurance_expiry_date: Optional[str]

    @classmethod
    def from_firebase(cls, key: str, row: Mapping[str, Any]) -> Optional['LegacyVehicle']:
        """
        Map one Firebase row. Older rows use Vietnamese column names, newer
        ones snake_case; snake_case wins when both exist.

        Returns None for rows without a plate number.
        """
        if not isinstance(row, Mapping):
            return None
        plate_number = _text(row, 'plate_number', 'BienSo')
        if not plate_number:
            return None
        return cls(
            id=f"legacy_{key}",
            plate_number=plate_number,
            vehicle_type=_text(row, 'vehicle_type', 'LoaiXe'),
            seat_capacity=_int_or_none(row.get('seat_count') or row.get('SoCho')) or 0,
            manufacturer=_text(row, 'manufacturer', 'NhanHieu'),
            model_code=_text(row, 'model_code', 'SoLoai'),
            manufacture_year=_int_or_none(row.get('manufacture_year') or row.get('NamSanXuat')),
            color=_text(row, 'color', 'MauSon'),
            chassis_number=_text(row, 'chassis_number', 'SoKhung'),
            engine_number=_text(row, 'engine_number', 'SoMay'),
            operator_name=_text(row, 'owner_name', 'TenDangKyXe'),
            notes=_text(row, 'notes', 'GhiChu'),
            inspection_expiry_date=_text(row, 'inspection_expiry', 'NgayHetHanKiemDinh') or None,
            insurance_expiry_date=_text(row, 'insurance_expiry', 'NgayHetHanBaoHiem') or None,
        )

    def to_api_dict(self) -> dict:
        return {
            'id': self.id,
            'plateNumber': self.plate_number,
            'vehicleTypeName': self.vehicle_type,
            'seatCapacity': self.seat_capacity,
            'manufacturer': self.manufacturer,
            'modelCode': self.model_code,
            'manufactureYear': self.manufacture_year,
            'color': self.color,
            'chassisNumber': self.chassis_number,
            'engineNumber': self.engine_number,
            'operatorName': self.operator_name,
            'notes': self.notes,
            'inspectionExpiryDate': self.inspection_expiry_date,
            'insuranceExpiryDate': self.insurance_expiry_date,
            'isActive': True,
            'source': 'legacy',
        }


def parse_vehicles(payload: Any) -> List[LegacyVehicle]:
    """Firebase returns an object keyed by push id, or a list for integer keys"""
    if payload is None:
        return []
    if isinstance(payload, list):
        items = [(str(i), row) for i, row in enumerate(payload)]
    elif isinstance(payload, dict):
        items = list(payload.items())
    else:
        raise LegacySourceError(f"Unexpected legacy payload type: {type(payload).__name__}")
    vehicles = []
    for key, row in items:
        vehicle = LegacyVehicle.from_firebase(key, row)
        if vehicle is not None:
            vehicles.append(vehicle)
    return vehicles


class FirebaseRealtimeClient:
    """
    Minimal read-only client for the Realtime Database REST API.

    Args:
        database_url: e.g. https://example-default-rtdb.firebaseio.com
        auth_token: database secret or ID token, sent as ?auth=
        timeout: seconds per request
        transport: optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(self, database_url: str, auth_token: Optional[str] = None,
                 timeout: float = 10.0, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = database_url.rstrip('/')
        self.auth_token = auth_token
        self.timeout = timeout
        self._transport = transport

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.strip('/')}.json"

    def get(self, path: str) -> Any:
        """
        Raises:
            LegacySourceError: On transport errors, non-2xx responses or bad JSON
        """
        params: Dict[str, str] = {}
        if self.auth_token:
            params['auth'] = self.auth_token
        url = self.url_for(path)
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(f"Firebase GET {path} failed: HTTP {exc.response.status_code}")
            raise LegacySourceError(
                f"Legacy source returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(f"Firebase GET {path} failed: {type(exc).__name__}")
            raise LegacySourceError("Legacy source is unreachable") from exc
        except ValueError as exc:
            logger.error(f"Firebase GET {path} returned invalid JSON")
            raise LegacySourceError("Legacy source returned invalid data") from exc


class LegacyVehicleSource:
    """Cached access to legacy vehicles"""

    def __init__(self, client: Optional[FirebaseRealtimeClient], cache: TTLCache,
                 path: str = 'vehicles', ttl: float = TTLCache.TTL['LONG']):
        self.client = client
        self.cache = cache
        self.path = path
        self.ttl = ttl

    @classmethod
    def from_app(cls, app, transport: Optional[httpx.BaseTransport] = None) -> 'LegacyVehicleSource':
        config = app.config
        client = None
        if config.get('FIREBASE_DATABASE_URL'):
            client = FirebaseRealtimeClient(
                config['FIREBASE_DATABASE_URL'],
                config.get('FIREBASE_AUTH_TOKEN'),
                timeout=config.get('FIREBASE_TIMEOUT_SECONDS', 10),
                transport=transport or config.get('FIREBASE_TRANSPORT'),
            )
        return cls(
            client,
            app.extensions['busstation_cache'],
            path=config.get('FIREBASE_VEHICLES_PATH', 'vehicles'),
            ttl=config.get('LEGACY_CACHE_TTL_SECONDS', TTLCache.TTL['LONG']),
        )

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _fetch(self) -> List[LegacyVehicle]:
        vehicles = parse_vehicles(self.client.get(self.path))
        logger.info(f"Loaded {len(vehicles)} legacy vehicles from '{self.path}'")
        return vehicles

    def list_vehicles(self, refresh: bool = False, operator: Optional[str] = None,
                      search: Optional[str] = None) -> List[LegacyVehicle]:
        """
        Args:
            refresh: Bypass the cache and re-read the source
            operator: Exact (case-insensitive) operator name filter
            search: Substring match on plate number

        Raises:
            LegacySourceDisabled: If no database URL is configured
            LegacySourceError: If the source cannot be read
        """
        if not self.enabled:
            raise LegacySourceDisabled()
        if refresh:
            vehicles = self.cache.refresh(CACHE_KEY, self._fetch, self.ttl)
        else:
            vehicles = self.cache.get_or_set(CACHE_KEY, self._fetch, self.ttl)

        if operator:
            wanted = operator.strip().lower()
            vehicles = [v for v in vehicles if v.operator_name.lower() == wanted]
        if search:
            needle = search.strip().lower()
            vehicles = [v for v in vehicles if needle in v.plate_number.lower()]
        return vehicles
