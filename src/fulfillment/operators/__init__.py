"""Operator directory abstraction — pluggable identity lookups."""

from fulfillment.settings import setting

_directory_instance = None


def get_operator_directory():
    """Return the configured operator directory (singleton).

    Uses FakeOperatorDirectory by default; configure via the
    OPERATOR_DIRECTORY_ADAPTER environment variable.
    """
    global _directory_instance
    if _directory_instance is None:
        adapter = setting("OPERATOR_DIRECTORY_ADAPTER")
        if adapter == "fake":
            from fulfillment.operators.fake_adapter import FakeOperatorDirectory

            _directory_instance = FakeOperatorDirectory()
        else:
            raise ValueError(f"Unknown operator directory adapter: {adapter}")
    return _directory_instance


def reset_operator_directory():
    """Reset the operator directory singleton (useful for testing)."""
    global _directory_instance
    _directory_instance = None
