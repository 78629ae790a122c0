"""Exceptions raised while auditing schedule files."""


class AuditError(Exception):
    """Base class for schedule audit errors.

    The message is reported verbatim, so ``str(exc)`` is kept undecorated.
    """


class MalformedDocument(AuditError):
    """Document shape violates a cardinality or required-field expectation."""


class UnknownService(AuditError):
    """Schedule references a serviceId missing from the ServiceInformationTable."""
