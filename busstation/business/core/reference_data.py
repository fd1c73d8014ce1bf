"""
Reference data managers

CRUD for the entities the dispatch workflow points at: vehicles, drivers,
stations, routes, schedules and billable services. Each manager declares
its model, schemas, unique columns and searchable columns; the base class
does the work.

Listings are cached per manager and every write drops that manager's
cached listings.
"""

from typing import Dict, List, Optional, Tuple, Type

from pydantic.alias_generators import to_camel
from sqlalchemy import or_

from busstation import db
from busstation.business.core import schemas
from busstation.business.core.errors import ConflictError, NotFoundError, ValidationFailed
from busstation.business.core.validation import ApiSchema, parse_payload
from busstation.data.core.driver import Driver
from busstation.data.core.location import Location
from busstation.data.core.route import Route
from busstation.data.core.schedule import Schedule
from busstation.data.core.vehicle import Vehicle
from busstation.logger import get_logger
from busstation.utils.cache import TTLCache, get_app_cache

logger = get_logger("bus_station.business.reference")


class ReferenceDataManager:
    """
    Base manager. Subclasses set:
        model: SQLAlchemy model
        label: Human readable name used in messages
        create_schema / update_schema: ApiSchema classes
        unique_fields: {column: camelCase field} checked before writes
        references: {column: (model, camelCase field, label)} that must exist
        search_fields: columns matched by ?search=
        order_by: column name for listings
        soft_delete: deactivate instead of deleting rows
    """

    model = None
    label = 'Record'
    create_schema: Type[ApiSchema] = None
    update_schema: Type[ApiSchema] = None
    unique_fields: Dict[str, str] = {}
    references: Dict[str, Tuple] = {}
    search_fields: Tuple[str, ...] = ()
    order_by = 'id'
    soft_delete = True
    cache_ttl = TTLCache.TTL['LONG']

    # Columns that may not be set to null by an update
    required_fields: Tuple[str, ...] = ()

    @classmethod
    def cache_prefix(cls) -> str:
        return f"{cls.model.__tablename__}:"

    @classmethod
    def serialize(cls, instance) -> dict:
        return instance.to_api_dict()

    @classmethod
    def invalidate(cls) -> int:
        return get_app_cache().invalidate_prefix(cls.cache_prefix())

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @classmethod
    def build_query(cls, include_inactive: bool = False, search: Optional[str] = None):
        query = cls.model.query
        if not include_inactive and hasattr(cls.model, 'is_active'):
            query = query.filter(cls.model.is_active.is_(True))
        if search and cls.search_fields:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(*[getattr(cls.model, f).ilike(pattern) for f in cls.search_fields]))
        return query.order_by(getattr(cls.model, cls.order_by))

    @classmethod
    def list(cls, include_inactive: bool = False, search: Optional[str] = None) -> List[dict]:
        def load():
            return [cls.serialize(item) for item in cls.build_query(include_inactive, search).all()]

        # Searches are not cached
        if search:
            return load()
        key = f"{cls.cache_prefix()}{'all' if include_inactive else 'active'}"
        return get_app_cache().get_or_set(key, load, cls.cache_ttl)

    @classmethod
    def get(cls, instance_id: int):
        """
        Raises:
            NotFoundError: If no row has this id
        """
        instance = db.session.get(cls.model, instance_id)
        if instance is None:
            raise NotFoundError(cls.label, instance_id)
        return instance

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @classmethod
    def _ensure_unique(cls, values: dict, exclude_id: Optional[int] = None) -> None:
        for column, api_field in cls.unique_fields.items():
            value = values.get(column)
            if value is None:
                continue
            query = cls.model.query.filter(getattr(cls.model, column) == value)
            if exclude_id is not None:
                query = query.filter(cls.model.id != exclude_id)
            if query.first() is not None:
                raise ConflictError(f"{cls.label} with {api_field} '{value}' already exists", field=api_field)

    @classmethod
    def _ensure_references(cls, values: dict) -> None:
        errors = {}
        for column, (model, api_field, label) in cls.references.items():
            value = values.get(column)
            if value is not None and db.session.get(model, value) is None:
                errors[api_field] = f"{label} not found"
        if errors:
            raise ValidationFailed("Referenced records do not exist", errors)

    @classmethod
    def validate_changes(cls, values: dict, instance=None) -> None:
        """Hook for entity-specific rules"""

    @classmethod
    def create(cls, data, user_id: Optional[int] = None):
        values = parse_payload(cls.create_schema, data).model_dump()
        cls._ensure_unique(values)
        cls._ensure_references(values)
        cls.validate_changes(values)
        instance = cls.model.create(user_id=user_id, **values)
        db.session.commit()
        cls.invalidate()
        logger.info(f"{cls.label} created: id={instance.id}")
        return instance

    @classmethod
    def update(cls, instance_id: int, data, user_id: Optional[int] = None):
        instance = cls.get(instance_id)
        changes = parse_payload(cls.update_schema, data).model_dump(exclude_unset=True)
        missing = {
            to_camel(f): "This field cannot be empty"
            for f in cls.required_fields if f in changes and changes[f] is None
        }
        if missing:
            raise ValidationFailed("Required fields cannot be cleared", missing)
        cls._ensure_unique(changes, exclude_id=instance.id)
        cls._ensure_references(changes)
        cls.validate_changes(changes, instance)
        changed = instance.apply_changes(changes, user_id=user_id)
        db.session.commit()
        cls.invalidate()
        logger.info(f"{cls.label} updated: id={instance.id} fields={sorted(changed)}")
        return instance

    @classmethod
    def delete(cls, instance_id: int, user_id: Optional[int] = None):
        """
        Deactivate (or, for hard-deleted entities, remove) a row.

        Returns:
            The deactivated instance, or None when the row was removed
        """
        instance = cls.get(instance_id)
        if cls.soft_delete:
            instance.apply_changes({'is_active': False}, user_id=user_id)
            db.session.commit()
            cls.invalidate()
            logger.info(f"{cls.label} deactivated: id={instance_id}")
            return instance
        cls.ensure_deletable(instance)
        db.session.delete(instance)
        db.session.commit()
        cls.invalidate()
        logger.info(f"{cls.label} deleted: id={instance_id}")
        return None

    @classmethod
    def ensure_deletable(cls, instance) -> None:
        """Hook for hard-deleted entities; raise ConflictError while referenced"""


class VehicleManager(ReferenceDataManager):
    model = Vehicle
    label = 'Vehicle'
    create_schema = schemas.VehicleInput
    update_schema = schemas.VehicleUpdateInput
    unique_fields = {'plate_number': 'plateNumber'}
    required_fields = ('plate_number', 'seat_capacity', 'is_active')
    search_fields = ('plate_number', 'operator_name')
    order_by = 'plate_number'


class DriverManager(ReferenceDataManager):
    model = Driver
    label = 'Driver'
    create_schema = schemas.DriverInput
    update_schema = schemas.DriverUpdateInput
    unique_fields = {'id_number': 'idNumber'}
    required_fields = ('full_name', 'id_number', 'is_active')
    search_fields = ('full_name', 'phone', 'license_number')
    order_by = 'full_name'


class LocationManager(ReferenceDataManager):
    model = Location
    label = 'Location'
    create_schema = schemas.LocationInput
    update_schema = schemas.LocationUpdateInput
    unique_fields = {'code': 'code'}
    required_fields = ('name', 'code', 'is_active')
    search_fields = ('name', 'code', 'address')
    order_by = 'name'
    soft_delete = False

    @classmethod
    def ensure_deletable(cls, instance) -> None:
        route_count = Route.query.filter(
            or_(Route.departure_station_id == instance.id, Route.arrival_station_id == instance.id)
        ).count()
        if route_count:
            raise ConflictError(
                f"Cannot delete location '{instance.name}': {route_count} route(s) still use it"
            )


class RouteManager(ReferenceDataManager):
    model = Route
    label = 'Route'
    create_schema = schemas.RouteInput
    update_schema = schemas.RouteUpdateInput
    unique_fields = {'route_code': 'routeCode'}
    required_fields = ('route_code', 'is_active')
    references = {
        'departure_station_id': (Location, 'departureStationId', 'Departure station'),
        'arrival_station_id': (Location, 'arrivalStationId', 'Arrival station'),
    }
    search_fields = ('route_code', 'itinerary')
    order_by = 'route_code'

    @classmethod
    def serialize(cls, instance) -> dict:
        data = instance.to_api_dict()
        data['routeName'] = instance.route_name
        return data

    @classmethod
    def validate_changes(cls, values: dict, instance=None) -> None:
        departure = values.get('departure_station_id', instance.departure_station_id if instance else None)
        arrival = values.get('arrival_station_id', instance.arrival_station_id if instance else None)
        if departure is not None and departure == arrival:
            raise ValidationFailed(
                "Departure and arrival stations must differ",
                {'arrivalStationId': 'Must differ from the departure station'},
            )


class ScheduleManager(ReferenceDataManager):
    model = Schedule
    label = 'Schedule'
    create_schema = schemas.ScheduleInput
    update_schema = schemas.ScheduleUpdateInput
    unique_fields = {'schedule_code': 'scheduleCode'}
    required_fields = ('schedule_code', 'route_id', 'departure_time', 'is_active')
    references = {'route_id': (Route, 'routeId', 'Route')}
    search_fields = ('schedule_code',)
    order_by = 'departure_time'

    @classmethod
    def build_query(cls, include_inactive: bool = False, search: Optional[str] = None, route_id: Optional[int] = None):
        query = super().build_query(include_inactive, search)
        if route_id is not None:
            query = query.filter(Schedule.route_id == route_id)
        return query

    @classmethod
    def list_for_route(cls, route_id: int, include_inactive: bool = False) -> List[dict]:
        return [cls.serialize(s) for s in cls.build_query(include_inactive, route_id=route_id).all()]
