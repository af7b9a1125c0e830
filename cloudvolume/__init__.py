"""Volume provisioning helpers: size rounding, zone selection and volume errors."""

__version__ = "0.1.0"
__all__ = ["constants", "errors", "rounding", "zones"]