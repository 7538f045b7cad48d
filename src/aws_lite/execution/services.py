"""Signing-region rules for global AWS services."""

from __future__ import annotations

DEFAULT_REGION = "us-east-1"

# Services whose requests are signed without a region (keyed by signing name).
GLOBAL_SERVICES = frozenset(
    {
        "cloudfront",
        "globalaccelerator",
        "iam",
        "importexport",
        "networkmanager",
        "organizations",
        "route53",
        "route53domains",
        "shield",
        "sts",
        "waf",
    }
)

# Global services that keep the region when signing at the default region.
SEMI_GLOBAL_SERVICES = frozenset({"sts"})


def is_global_service(signing_name: str) -> bool:
    return signing_name.lower() in GLOBAL_SERVICES


def signing_region(signing_name: str, region: str | None) -> str | None:
    """Return the region to sign with, or ``None`` to omit it."""
    name = signing_name.lower()
    if name not in GLOBAL_SERVICES:
        return region
    if name in SEMI_GLOBAL_SERVICES and region == DEFAULT_REGION:
        return region
    return None
