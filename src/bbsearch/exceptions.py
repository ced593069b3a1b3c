class BnBError(Exception):
    """Base class for errors raised by bbsearch."""


class ContractViolation(BnBError):
    """A problem extension broke the hook contract the search engine relies on."""


class InstanceFormatError(BnBError, ValueError):
    """An instance file could not be parsed."""
