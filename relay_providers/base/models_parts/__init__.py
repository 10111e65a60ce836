"""Model parts package; prefer importing from ``relay_providers.base.models``."""
