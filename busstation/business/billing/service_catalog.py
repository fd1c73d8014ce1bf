"""
Service catalog

Billable station services (parking, cleaning, ...). Charges copy the
service's base price unless a unit price is given.
"""

from busstation.business.billing.schemas import ServiceInput, ServiceUpdateInput
from busstation.business.core.reference_data import ReferenceDataManager
from busstation.data.core.service import Service
from busstation.utils.cache import TTLCache


class ServiceCatalog(ReferenceDataManager):
    model = Service
    label = 'Service'
    create_schema = ServiceInput
    update_schema = ServiceUpdateInput
    unique_fields = {'code': 'code'}
    required_fields = ('code', 'name', 'base_price', 'is_active')
    search_fields = ('code', 'name')
    order_by = 'name'
    cache_ttl = TTLCache.TTL['MEDIUM']
