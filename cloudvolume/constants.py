"""Shared constants for cloud volume handling."""

# Name of a volume in an external cloud that is still being provisioned and
# should therefore be ignored by everything else.
PROVISIONED_VOLUME_NAME = "placeholder-for-provisioning"

# Separator between zones in a multi-zone volume label value.
LABEL_MULTI_ZONE_DELIMITER = "__"