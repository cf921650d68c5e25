# groupmaker/domain/errors.py


class GroupingError(Exception):
    """Base class for errors raised by the grouping engine."""


class InvalidConfigurationError(GroupingError, ValueError):
    """The roster or group layout cannot be partitioned at all."""
