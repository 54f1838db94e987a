"""Resolve the restaurant a public request is addressed to."""

import logging
from dataclasses import dataclass
from enum import Enum as PyEnum

from sqlalchemy.orm import Session

from app.core.exceptions import TenantNotResolvableException
from app.models.tenant import Tenant
from app.repositories.tenant_repository import TenantRepository

logger = logging.getLogger(__name__)


class DetectionMethod(str, PyEnum):
    CUSTOM_DOMAIN = "custom_domain"
    SUBDOMAIN = "subdomain"
    OVERRIDE = "override"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolvedTenant:
    tenant: Tenant
    method: DetectionMethod


def strip_port(host: str) -> str:
    """Drop a ':port' suffix, keeping bracketed IPv6 literals intact."""
    host = host.strip().lower()
    if host.startswith("["):
        return host.split("]", 1)[0] + "]"
    return host.rsplit(":", 1)[0] if ":" in host else host


def candidate_subdomain(host: str) -> str:
    """
    First label of a dotted host, or the whole host for single-label hosts
    (e.g. 'localhost' during development).
    """
    labels = [label for label in host.split(".") if label]
    if len(labels) >= 2:
        return labels[0]
    return host


class TenantResolver:
    """
    Maps a request host to exactly one servable tenant.

    Resolution order:
    1. Custom domain (exact match on the port-less host) - always wins
    2. Subdomain (first host label)
    3. Default tenant - non-production only

    A caller-supplied subdomain override is honored only outside production.
    In production it is ignored here, at the resolver, so no route can use it
    to spoof tenant context.

    Only active, paid (active/trialing) and non-deleted tenants resolve.
    """

    def __init__(
        self,
        db: Session,
        is_production: bool = True,
        default_tenant_id: int | None = None,
    ):
        self.db = db
        self.tenant_repo = TenantRepository(db)
        self.is_production = is_production
        self.default_tenant_id = default_tenant_id

    def resolve(self, host: str | None, override: str | None = None) -> ResolvedTenant:
        """
        Resolve the tenant for a request.

        Args:
            host: Host header (may include a port)
            override: Development-only subdomain override

        Returns:
            ResolvedTenant with the tenant and how it was detected

        Raises:
            TenantNotResolvableException: If nothing matches
        """
        if override:
            if self.is_production:
                logger.warning("Ignoring tenant override %r in production", override)
            else:
                tenant = self.tenant_repo.get_servable_by_subdomain(override.strip())
                if tenant:
                    return ResolvedTenant(tenant, DetectionMethod.OVERRIDE)
                logger.info("Tenant override %r did not match any restaurant", override)
                raise TenantNotResolvableException()

        if host:
            hostname = strip_port(host)

            tenant = self.tenant_repo.get_servable_by_custom_domain(hostname)
            if tenant:
                return ResolvedTenant(tenant, DetectionMethod.CUSTOM_DOMAIN)

            tenant = self.tenant_repo.get_servable_by_subdomain(candidate_subdomain(hostname))
            if tenant:
                return ResolvedTenant(tenant, DetectionMethod.SUBDOMAIN)

        if not self.is_production and self.default_tenant_id is not None:
            tenant = self.tenant_repo.get_servable_by_id(self.default_tenant_id)
            if tenant:
                return ResolvedTenant(tenant, DetectionMethod.DEFAULT)

        logger.info("No restaurant found for host %r", host)
        raise TenantNotResolvableException()
