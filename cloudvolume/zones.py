"""Parsing zone lists and choosing the zones a volume is provisioned in."""

from __future__ import annotations

import logging
import random
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from cloudvolume.constants import LABEL_MULTI_ZONE_DELIMITER

LABEL_TOPOLOGY_ZONE = "topology.kubernetes.io/zone"
LABEL_FAILURE_DOMAIN_BETA_ZONE = "failure-domain.beta.kubernetes.io/zone"

_UINT32_MASK = 0xFFFFFFFF
_FNV32_OFFSET = 2166136261
_FNV32_PRIME = 16777619
_DIGITS = re.compile(r"[0-9]+")

logger = logging.getLogger(__name__)


class ZoneError(ValueError):
    """Zones could not be parsed or selected."""


@dataclass
class Node:
    """A cluster node, described by its labels."""

    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class TopologySelectorLabelRequirement:
    """A label key together with the values it may take."""

    key: str
    values: list[str] = field(default_factory=list)


@dataclass
class TopologySelectorTerm:
    """A set of label requirements from a storage class's allowed topologies."""

    match_label_expressions: list[TopologySelectorLabelRequirement] = field(
        default_factory=list
    )


def _split_zones(text: str, delimiter: str) -> list[str]:
    zones = []
    for zone in text.split(delimiter):
        trimmed = zone.strip()
        if not trimmed:
            raise ZoneError(
                f'"{delimiter}" separated list ("{text}") must not contain an empty string'
            )
        zones.append(trimmed)
    return zones


def label_zones_to_set(label_zones_value: str) -> set[str]:
    """Turn a multi-zone label value into a set of zones."""
    return set(_split_zones(label_zones_value, LABEL_MULTI_ZONE_DELIMITER))


def zones_set_to_label_value(zones: Iterable[str]) -> str:
    """Join a set of zones into a multi-zone label value."""
    return LABEL_MULTI_ZONE_DELIMITER.join(sorted(zones))


def zones_to_set(zones_string: str) -> set[str]:
    """Turn a comma separated list of zones into a set."""
    try:
        return set(_split_zones(zones_string, ","))
    except ZoneError as err:
        raise ZoneError(
            f"error parsing zones {zones_string}, must be strings separated by commas: {err}"
        ) from err


def label_zones_to_list(label_zones_value: str) -> list[str]:
    """Turn a multi-zone label value into a list of zones, keeping their order."""
    return _split_zones(label_zones_value, LABEL_MULTI_ZONE_DELIMITER)


def select_zone_for_volume(
    zone_parameter_present: bool,
    zones_parameter_present: bool,
    zone_parameter: str,
    zones_parameter: Iterable[str] | None,
    zones_with_nodes: Iterable[str] | None,
    node: Node | None,
    allowed_topologies: list[TopologySelectorTerm] | None,
    pvc_name: str,
) -> str:
    """Select a single zone for a volume."""
    zones = select_zones_for_volume(
        zone_parameter_present,
        zones_parameter_present,
        zone_parameter,
        zones_parameter,
        zones_with_nodes,
        node,
        allowed_topologies,
        pvc_name,
        1,
    )
    if not zones:
        raise ZoneError("could not determine a zone to provision volume in")
    return zones.pop()


def select_zones_for_volume(
    zone_parameter_present: bool,
    zones_parameter_present: bool,
    zone_parameter: str,
    zones_parameter: Iterable[str] | None,
    zones_with_nodes: Iterable[str] | None,
    node: Node | None,
    allowed_topologies: list[TopologySelectorTerm] | None,
    pvc_name: str,
    num_replicas: int,
) -> set[str]:
    """Select ``num_replicas`` zones for a volume.

    The node's zone, the allowed topologies, the zone/zones storage class
    parameters and the zones that have nodes are consulted in that order.
    """
    if zone_parameter_present and zones_parameter_present:
        raise ZoneError(
            "both zone and zones StorageClass parameters must not be used at the same time"
        )

    zone_from_node = ""
    if node is not None:
        if zone_parameter_present or zones_parameter_present:
            raise ZoneError(
                "zone[s] cannot be specified in StorageClass if VolumeBindingMode is set "
                "to WaitForFirstConsumer. Please specify allowedTopologies in "
                "StorageClass for constraining zones"
            )
        if LABEL_TOPOLOGY_ZONE in node.labels:
            zone_from_node = node.labels[LABEL_TOPOLOGY_ZONE]
        elif LABEL_FAILURE_DOMAIN_BETA_ZONE in node.labels:
            zone_from_node = node.labels[LABEL_FAILURE_DOMAIN_BETA_ZONE]
        else:
            raise ZoneError(
                f"Either {LABEL_TOPOLOGY_ZONE} or {LABEL_FAILURE_DOMAIN_BETA_ZONE} "
                "Label for node missing"
            )
        if num_replicas == 1:
            return {zone_from_node}

    allowed_zones = zones_from_allowed_topologies(allowed_topologies)
    if allowed_topologies and not allowed_zones:
        raise ZoneError(
            f"no matchLabelExpressions with {LABEL_TOPOLOGY_ZONE} key found in "
            f"allowedTopologies. Please specify matchLabelExpressions with "
            f"{LABEL_TOPOLOGY_ZONE} key"
        )

    if allowed_zones:
        if zone_parameter_present or zones_parameter_present:
            raise ZoneError(
                "zone[s] cannot be specified in StorageClass if allowedTopologies specified"
            )
        try:
            return _choose_zones_for_volume_including_zone(
                allowed_zones, pvc_name, zone_from_node, num_replicas
            )
        except ZoneError as err:
            raise ZoneError(f"cannot process zones in allowedTopologies: {err}") from err

    if zone_parameter_present:
        if num_replicas > 1:
            raise ZoneError(
                "zone cannot be specified if desired number of replicas for pv is "
                "greather than 1. Please specify zones or allowedTopologies to "
                "specify desired zones"
            )
        return {zone_parameter}

    if zones_parameter_present:
        parameter_zones = set(zones_parameter or ())
        if len(parameter_zones) < num_replicas:
            raise ZoneError(
                f"not enough zones found in zones parameter to provision a volume with "
                f"{num_replicas} replicas. Found {len(parameter_zones)} zones, "
                f"need {num_replicas} zones"
            )
        return choose_zones_for_volume(parameter_zones, pvc_name, num_replicas)

    node_zones = set(zones_with_nodes or ())
    if node_zones:
        try:
            return _choose_zones_for_volume_including_zone(
                node_zones, pvc_name, zone_from_node, num_replicas
            )
        except ZoneError as err:
            raise ZoneError(
                f"cannot process zones where nodes exist in the cluster: {err}"
            ) from err

    raise ZoneError("cannot determine zones to provision volume in")


def zones_from_allowed_topologies(
    allowed_topologies: Iterable[TopologySelectorTerm] | None,
) -> set[str]:
    """Collect the zones named in a storage class's allowed topologies."""
    zones: set[str] = set()
    for term in allowed_topologies or ():
        for expression in term.match_label_expressions:
            if expression.key not in (LABEL_TOPOLOGY_ZONE, LABEL_FAILURE_DOMAIN_BETA_ZONE):
                raise ZoneError(
                    f"unsupported key found in matchLabelExpressions: {expression.key}"
                )
            zones.update(expression.values)
    return zones


def _choose_zones_for_volume_including_zone(
    zones: Iterable[str], pvc_name: str, zone_to_include: str, num_replicas: int
) -> set[str]:
    """Choose zones for a volume, making sure ``zone_to_include`` is among them."""
    candidates = set(zones)
    if num_replicas == 0:
        raise ZoneError("invalid number of replicas passed")
    if len(candidates) < num_replicas:
        raise ZoneError(
            f"not enough zones found to provision a volume with {num_replicas} replicas. "
            f"Need at least {num_replicas} distinct zones for a volume with "
            f"{num_replicas} replicas"
        )
    if zone_to_include and zone_to_include not in candidates:
        raise ZoneError(
            f"zone to be included: {zone_to_include} needs to be member of set: "
            f"{sorted(candidates)}"
        )
    if len(candidates) == num_replicas:
        return candidates
    if zone_to_include:
        candidates.discard(zone_to_include)
        num_replicas -= 1
    chosen = choose_zones_for_volume(candidates, pvc_name, num_replicas)
    if zone_to_include:
        chosen.add(zone_to_include)
    return chosen


def choose_zones_for_volume(
    zones: Iterable[str] | None, pvc_name: str, num_zones: int
) -> set[str]:
    """Choose ``num_zones`` zones for a volume, spread by the claim's name."""
    zone_list = sorted(set(zones or ()))
    if not zone_list:
        return set()

    name_hash, index = _pvc_name_hash_and_index_offset(pvc_name)
    starting_index = (index * num_zones) & _UINT32_MASK
    chosen = {
        zone_list[((name_hash + ((starting_index + step) & _UINT32_MASK)) & _UINT32_MASK)
                  % len(zone_list)]
        for step in range(num_zones)
    }
    logger.debug(
        "Creating volume for replicated PVC %r; chosen zones=%r from zones=%r",
        pvc_name,
        sorted(chosen),
        zone_list,
    )
    return chosen


def _fnv32(data: bytes) -> int:
    """FNV-1 32-bit hash."""
    value = _FNV32_OFFSET
    for byte in data:
        value = ((value * _FNV32_PRIME) & _UINT32_MASK) ^ byte
    return value


def _parse_uint32(text: str) -> int | None:
    if not _DIGITS.fullmatch(text):
        return None
    number = int(text)
    return number if number <= _UINT32_MASK else None


def _pvc_name_hash_and_index_offset(pvc_name: str) -> tuple[int, int]:
    if not pvc_name:
        logger.warning("No name defined during volume create; choosing random zone")
        return random.getrandbits(32), 0

    index = 0
    hash_string = pvc_name
    # StatefulSet claims are named ClaimName-StatefulSetName-Id: offset by Id and
    # hash only StatefulSetName so a pod's claims land in the same zone.
    prefix, dash, suffix = pvc_name.rpartition("-")
    if dash:
        statefulset_id = _parse_uint32(suffix)
        if statefulset_id is not None:
            index = statefulset_id
            hash_string = prefix.rpartition("-")[2]
            logger.debug(
                "Detected StatefulSet-style volume name %r; index=%d", pvc_name, index
            )

    return _fnv32(hash_string.encode()), index