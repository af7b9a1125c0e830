# cloudvolume

Small, dependency-free helpers for code that provisions storage volumes in a
cloud: it rounds requested sizes up to a provider's allocation unit, picks the
zones a volume (or its replicas) should live in, and defines errors that
volume plugins report.

## Installation

```
pip install .
```

## Rounding sizes (`cloudvolume.rounding`)

Sizes are quantities in the usual storage notation: a number with an optional
sign and decimal part, followed by a binary suffix (`Ki`, `Mi`, `Gi`, `Ti`,
`Pi`, `Ei`), a decimal suffix (`n`, `u`, `m`, `k`, `M`, `G`, `T`, `P`, `E`) or
an exponent (`1e3`). `parse_quantity` turns such text into a `Quantity`, which
holds the amount exactly; anything finer than a nano unit is rounded up to it.
Text that does not match raises `ValueError`.

```python
from cloudvolume.rounding import parse_quantity, round_up_to_gib, round_up_to_mb

round_up_to_gib(parse_quantity("1500Mi"))   # 2
round_up_to_mb(parse_quantity("1000Ki"))    # 2
```

`Quantity.value()` gives the amount as a whole number, rounded up, and
`Quantity.cmp_int(n)` compares it with an integer, returning -1, 0 or 1.

Rounding functions:

- `round_up_to_gib`, `round_up_to_mib`, `round_up_to_kib`, `round_up_to_mb`,
  `round_up_to_kb`, `round_up_to_b` — fail with `QuantityOverflowError` when
  the quantity is not below the largest signed 64-bit integer;
- `round_up_to_gib_int`, `round_up_to_mib_int`, `round_up_to_kib_int`,
  `round_up_to_mb_int`, `round_up_to_kb_int` — the same, but limited to 32 bits
  on a 32-bit interpreter;
- `round_up_to_gib_int32` — also fails when the result exceeds the largest
  signed 32-bit integer.

`QuantityOverflowError` is a subclass of `OverflowError`. The unit sizes are
available as `GB`, `GIB`, `MB`, `MIB`, `KB` and `KIB`.

## Choosing zones (`cloudvolume.zones`)

```python
from cloudvolume.zones import zones_to_set, choose_zones_for_volume

zones = zones_to_set("us-east-1a, us-east-1b, us-east-1c")
choose_zones_for_volume(zones, "data-web-1", 2)
```

`choose_zones_for_volume` picks zones from the sorted zone list, starting at a
position given by an FNV-1 hash of the claim name. Names that look like
StatefulSet claims (`claim-set-N`) hash only the set name and are offset by
`N`, so set members are spread round-robin while the claims of one member land
in the same zone. An empty claim name picks a random starting point. An empty
or `None` zone collection gives an empty set.

`select_zones_for_volume` combines, in this order, a `Node`'s zone label
(`LABEL_TOPOLOGY_ZONE`, falling back to `LABEL_FAILURE_DOMAIN_BETA_ZONE`), the
allowed topologies as a list of `TopologySelectorTerm` holding
`TopologySelectorLabelRequirement` entries, the StorageClass `zone`/`zones`
parameters, and the zones that have nodes. `select_zone_for_volume` does the
same for a single replica and returns one zone. `zones_from_allowed_topologies`
collects the zones named in allowed topologies. Invalid combinations, unknown
label keys, too few zones and unparsable lists raise `ZoneError`, a subclass of
`ValueError`.

Comma-separated lists are parsed with `zones_to_set`. Multi-zone label values
use `__` as a delimiter; convert them with `label_zones_to_set`,
`label_zones_to_list` (keeps order) and `zones_set_to_label_value` (joins in
sorted order). Empty entries raise `ZoneError`.

Chosen zones are logged at debug level on the `cloudvolume.zones` logger.

## Errors (`cloudvolume.errors`)

`DeletedVolumeInUseError` reports a volume that cannot be deleted because it
is in use. `DanglingAttachError` reports a volume attached to an unexpected
node and records `current_node` and `device_path`. `is_deleted_volume_in_use`
and `is_dangling_error` recognise them.

## Constants (`cloudvolume.constants`)

`PROVISIONED_VOLUME_NAME` is the placeholder name for a volume still being
provisioned; `LABEL_MULTI_ZONE_DELIMITER` is the `__` label delimiter.

## What it does not do

The package only computes sizes and zones and defines errors. It does not talk
to any cloud provider or cluster API, create or attach disks, or provide a
command-line tool.

## Running the tests

```
pip install .[test]
pytest
```