"""
Error taxonomy.

- TransportFailure: the collaborator was unreachable or answered with something
  that is not a JSON object envelope.
- DomainFailure: the collaborator answered `success: false`.

Background flows log and swallow both. An unparseable agent result is not an
exception: the normalizer returns None for it. Foreground flows turn them into a
single message for the operator.
"""
from __future__ import annotations


class MonitorError(Exception):
    """Base class for every failure the monitor knows how to recover from."""


class TransportFailure(MonitorError):
    pass


class DomainFailure(MonitorError):
    def __init__(self, reason: str | None = None):
        super().__init__(reason or "request reported success: false")
        self.reason = reason
