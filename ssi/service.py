"""
DID Services

A service is an endpoint that can be used to communicate with the DID
subject or to act on its behalf (e-mail inbox, credential store, signature
service, ...). Custom fields are merged flat into the on-chain object.
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional

from ssi.config import ENTRY_SCHEMA_V100
from ssi.errors import UnknownSchemaVersionError, ValidationError
from ssi.validators import validate_alias, validate_priority_requirement, validate_service_endpoint

RESERVED_SERVICE_FIELDS = frozenset({"id", "type", "serviceEndpoint", "priorityRequirement"})


class Service:
    """
    Service associated with a DID.

    Args:
        alias: Human-readable nickname, unique among the DID's services
        service_type: Type of the service (e.g. "EmailService")
        endpoint: http:// or https:// URL of the service
        priority_requirement: Minimum priority a management key needs to remove the service
        custom_fields: Extra on-chain fields (e.g. {"description": "My photo stream"})

    Example:
        >>> svc = Service("inbox", "EmailService", "https://mail.example.com")
        >>> svc.to_entry_obj("did:factom:" + "a" * 64)["serviceEndpoint"]
        'https://mail.example.com'
    """

    def __init__(
        self,
        alias: str,
        service_type: str,
        endpoint: str,
        priority_requirement: Optional[int] = None,
        custom_fields: Optional[Dict[str, Any]] = None,
    ):
        validate_alias(alias)
        validate_service_endpoint(endpoint)
        validate_priority_requirement(priority_requirement)

        if not isinstance(service_type, str) or not service_type:
            raise ValidationError("Service type is required!")

        if custom_fields is not None:
            if not isinstance(custom_fields, Mapping):
                raise ValidationError("Custom fields must be an object!")
            if not all(isinstance(k, str) for k in custom_fields):
                raise ValidationError("Custom field names must be strings.")
            clashing = RESERVED_SERVICE_FIELDS.intersection(custom_fields)
            if clashing:
                raise ValidationError(
                    f"Custom fields must not override reserved fields: {', '.join(sorted(clashing))}"
                )
            custom_fields = dict(custom_fields)

        self.alias = alias
        self.service_type = service_type
        self.endpoint = endpoint
        self.priority_requirement = priority_requirement
        self.custom_fields = custom_fields

    def full_id(self, did_id: str) -> str:
        return f"{did_id}#{self.alias}"

    def to_entry_obj(self, did_id: str, version: str = ENTRY_SCHEMA_V100) -> Dict[str, Any]:
        """
        Build the object recorded on-chain for this service.

        Raises:
            UnknownSchemaVersionError: For any version other than 1.0.0
        """
        if version != ENTRY_SCHEMA_V100:
            raise UnknownSchemaVersionError(version)

        entry_obj = {
            "id": self.full_id(did_id),
            "type": self.service_type,
            "serviceEndpoint": self.endpoint,
        }
        if self.priority_requirement is not None:
            entry_obj["priorityRequirement"] = self.priority_requirement
        if self.custom_fields:
            entry_obj.update(self.custom_fields)
        return entry_obj

    def __eq__(self, other):
        if not isinstance(other, Service):
            return NotImplemented
        return (
            self.alias == other.alias
            and self.service_type == other.service_type
            and self.endpoint == other.endpoint
            and self.priority_requirement == other.priority_requirement
            and self.custom_fields == other.custom_fields
        )

    __hash__ = None

    def __repr__(self):
        return f"Service(alias={self.alias!r}, service_type={self.service_type!r}, endpoint={self.endpoint!r})"
