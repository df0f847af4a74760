"""Exception classes for lifnet.

Exception hierarchy:

    LifnetError (base)
    ├── InvalidConfiguration - bad network size, run length or config value
    ├── InvalidWindow        - zero or negative firing-rate window
    └── EmptyTrace           - statistics requested over an empty trace

Every error also derives from ValueError, so callers that only guard
against bad arguments keep working. All of them are raised before any
simulation state is mutated.
"""


class LifnetError(Exception):
    """Base exception for all lifnet errors."""


class InvalidConfiguration(LifnetError, ValueError):
    """Invalid network size, run length or configuration parameter."""


class InvalidWindow(LifnetError, ValueError):
    """A firing-rate window of zero (or negative) length.

    The rate is a count divided by the window length, so a zero window
    has no defined value.
    """


class EmptyTrace(LifnetError, ValueError):
    """An activity trace with no timesteps.

    Mean and variance of an empty sequence are undefined.
    """
