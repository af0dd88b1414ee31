"""
PynamoDB models for the DynamoDB registry tables.

Entities are stored as a JSON ``document`` next to the key attributes the
indexes need. Binding tables use a composite key: the owner id as partition
key and the registration id as sort key, with a ``position`` attribute for
the display order.

Table names and region are configured at runtime by ``configure_table``.
"""

from pynamodb.attributes import NumberAttribute, UnicodeAttribute
from pynamodb.indexes import AllProjection, GlobalSecondaryIndex
from pynamodb.models import Model

from oauth2_registry.core.logging import logger

CAPACITY_UNITS = 5


class RegistrationTenantIndex(GlobalSecondaryIndex):
    """Lookup of registrations by tenant."""

    class Meta:
        index_name = "RegistrationTenantIndex"
        read_capacity_units = CAPACITY_UNITS
        write_capacity_units = CAPACITY_UNITS
        projection = AllProjection()

    tenant_id = UnicodeAttribute(hash_key=True)


class RegistrationModel(Model):
    """OAuth2 client registrations (partition key: id)."""

    class Meta:
        table_name = None
        region = None

    id = UnicodeAttribute(hash_key=True)
    tenant_id = UnicodeAttribute()
    created_time = NumberAttribute(default=0)
    document = UnicodeAttribute()

    tenant_index = RegistrationTenantIndex()


class DomainTenantIndex(GlobalSecondaryIndex):
    class Meta:
        index_name = "DomainTenantIndex"
        read_capacity_units = CAPACITY_UNITS
        write_capacity_units = CAPACITY_UNITS
        projection = AllProjection()

    tenant_id = UnicodeAttribute(hash_key=True)


class DomainNameIndex(GlobalSecondaryIndex):
    """Lookup of domains by lower-cased name."""

    class Meta:
        index_name = "DomainNameIndex"
        read_capacity_units = CAPACITY_UNITS
        write_capacity_units = CAPACITY_UNITS
        projection = AllProjection()

    name = UnicodeAttribute(hash_key=True)


class DomainModel(Model):
    """Domains (partition key: id)."""

    class Meta:
        table_name = None
        region = None

    id = UnicodeAttribute(hash_key=True)
    tenant_id = UnicodeAttribute()
    name = UnicodeAttribute()
    created_time = NumberAttribute(default=0)
    document = UnicodeAttribute()

    tenant_index = DomainTenantIndex()
    name_index = DomainNameIndex()


class BindingRegistrationIndex(GlobalSecondaryIndex):
    """Lookup of bindings by registration, used to cascade deletes."""

    class Meta:
        index_name = "RegistrationIndex"
        read_capacity_units = CAPACITY_UNITS
        write_capacity_units = CAPACITY_UNITS
        projection = AllProjection()

    registration_id = UnicodeAttribute(hash_key=True)


class DomainRegistrationModel(Model):
    """Domain bindings (partition key: domain_id, sort key: registration_id)."""

    class Meta:
        table_name = None
        region = None

    domain_id = UnicodeAttribute(hash_key=True)
    registration_id = UnicodeAttribute(range_key=True)
    position = NumberAttribute(default=0)

    registration_index = BindingRegistrationIndex()


class MobileAppTenantIndex(GlobalSecondaryIndex):
    class Meta:
        index_name = "MobileAppTenantIndex"
        read_capacity_units = CAPACITY_UNITS
        write_capacity_units = CAPACITY_UNITS
        projection = AllProjection()

    tenant_id = UnicodeAttribute(hash_key=True)


class PkgNameIndex(GlobalSecondaryIndex):
    """Lookup of mobile applications by package name."""

    class Meta:
        index_name = "PkgNameIndex"
        read_capacity_units = CAPACITY_UNITS
        write_capacity_units = CAPACITY_UNITS
        projection = AllProjection()

    pkg_name = UnicodeAttribute(hash_key=True)


class MobileAppModel(Model):
    """Mobile applications (partition key: id)."""

    class Meta:
        table_name = None
        region = None

    id = UnicodeAttribute(hash_key=True)
    tenant_id = UnicodeAttribute()
    pkg_name = UnicodeAttribute()
    created_time = NumberAttribute(default=0)
    document = UnicodeAttribute()

    tenant_index = MobileAppTenantIndex()
    pkg_name_index = PkgNameIndex()


class MobileAppBindingRegistrationIndex(GlobalSecondaryIndex):
    class Meta:
        index_name = "MobileAppRegistrationIndex"
        read_capacity_units = CAPACITY_UNITS
        write_capacity_units = CAPACITY_UNITS
        projection = AllProjection()

    registration_id = UnicodeAttribute(hash_key=True)


class MobileAppRegistrationModel(Model):
    """Mobile app bindings (partition key: mobile_app_id, sort key: registration_id)."""

    class Meta:
        table_name = None
        region = None

    mobile_app_id = UnicodeAttribute(hash_key=True)
    registration_id = UnicodeAttribute(range_key=True)
    position = NumberAttribute(default=0)

    registration_index = MobileAppBindingRegistrationIndex()


def configure_table(
    model: type[Model], table_name: str, region_name: str, auto_create: bool = False
) -> None:
    """
    Point a model at its table and optionally create it.

    Args:
        model: PynamoDB model class
        table_name: DynamoDB table name (from settings)
        region_name: AWS region (from settings)
        auto_create: Create the table when it does not exist

    Raises:
        ValueError: If table_name or region_name is empty
    """
    if not table_name:
        raise ValueError("table_name cannot be empty")
    if not region_name:
        raise ValueError("region_name cannot be empty")

    model.Meta.table_name = table_name
    model.Meta.region = region_name

    if auto_create and not model.exists():
        logger.info(f"Creating DynamoDB table: {table_name}")
        model.create_table(
            read_capacity_units=CAPACITY_UNITS,
            write_capacity_units=CAPACITY_UNITS,
            wait=True,
        )
        logger.info(f"Table {table_name} created successfully")
