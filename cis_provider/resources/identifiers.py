"""Composite identifier codec.

The engine tracks each rule by a single string built from the remote ids:

    rule_id:zone_id:instance_id     (resource id)
    zone_id:instance_id             (domain_id)

No escaping is done, so the leading components must not contain the
separator. The instance id is always the trailing component and is taken as
the remainder of the string, which keeps CRNs (themselves colon-delimited)
intact.
"""

from __future__ import annotations

from cis_provider.core.errors import IdentifierFormatError

SEPARATOR = ":"


def _check_component(name: str, value: str) -> None:
    if not value:
        raise IdentifierFormatError(
            code="invalid_identifier",
            message=f"{name} must not be empty",
            details={"field": name},
        )
    if SEPARATOR in value:
        raise IdentifierFormatError(
            code="invalid_identifier",
            message=f"{name} must not contain '{SEPARATOR}'",
            details={"field": name},
        )


def _split(identifier: str, parts: int, layout: str) -> list[str]:
    pieces = identifier.split(SEPARATOR, parts - 1)
    if len(pieces) < parts or not all(pieces):
        raise IdentifierFormatError(
            code="invalid_identifier",
            message=f"The given id {identifier!r} does not contain all expected sections, should be of format {layout}",
            details={"hint": layout},
        )
    return pieces


def encode_rule_id(rule_id: str, zone_id: str, instance_id: str) -> str:
    """Build the resource identifier for a rule."""
    _check_component("rule_id", rule_id)
    _check_component("zone_id", zone_id)
    if not instance_id:
        _check_component("instance_id", instance_id)
    return SEPARATOR.join((rule_id, zone_id, instance_id))


def decode_rule_id(resource_id: str) -> tuple[str, str, str]:
    """Split a resource identifier into (rule_id, zone_id, instance_id).

    Raises:
        IdentifierFormatError: If fewer than three non-empty parts are present.
    """
    rule_id, zone_id, instance_id = _split(resource_id, 3, "rule_id:zone_id:instance_id")
    return rule_id, zone_id, instance_id


def encode_domain_id(zone_id: str, instance_id: str) -> str:
    """Build the domain_id for a zone."""
    _check_component("zone_id", zone_id)
    if not instance_id:
        _check_component("instance_id", instance_id)
    return SEPARATOR.join((zone_id, instance_id))


def decode_domain_id(domain_id: str) -> tuple[str, str]:
    """Split a domain_id into (zone_id, instance_id).

    Raises:
        IdentifierFormatError: If fewer than two non-empty parts are present.
    """
    zone_id, instance_id = _split(domain_id, 2, "zone_id:instance_id")
    return zone_id, instance_id
