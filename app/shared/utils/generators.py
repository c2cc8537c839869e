"""ID generators."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new collision-resistant identifier (CUID2)."""
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(f"Expected str from cuid generator, got {type(result).__name__}")
    return result
