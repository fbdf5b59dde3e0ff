# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent platform entities.

Each sub-package holds a table.py with the Entity definition (discovered
by schema.get_schema) and, for entities with domain logic, a registry.py.
"""

from .audit_log import AuditLogEntity, AuditLogRegistry
from .consent import ConsentEntity, ConsentRegistry
from .consent_geo_location import ConsentGeoLocationEntity
from .consent_policy import ConsentPolicyEntity, ConsentPolicyRegistry
from .consent_purpose import ConsentPurposeEntity, ConsentPurposeRegistry
from .consent_purpose_junction import ConsentPurposeJunctionEntity
from .consent_record import ConsentRecordEntity
from .consent_withdrawal import ConsentWithdrawalEntity
from .domain import DomainEntity, DomainRegistry
from .geo_location import GeoLocationEntity
from .subject import SubjectEntity, SubjectRegistry

__all__ = [
    "AuditLogEntity",
    "AuditLogRegistry",
    "ConsentEntity",
    "ConsentGeoLocationEntity",
    "ConsentPolicyEntity",
    "ConsentPolicyRegistry",
    "ConsentPurposeEntity",
    "ConsentPurposeJunctionEntity",
    "ConsentPurposeRegistry",
    "ConsentRecordEntity",
    "ConsentRegistry",
    "ConsentWithdrawalEntity",
    "DomainEntity",
    "DomainRegistry",
    "GeoLocationEntity",
    "SubjectEntity",
    "SubjectRegistry",
]
