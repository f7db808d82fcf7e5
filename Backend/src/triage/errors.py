"""Failure types raised at the edges of the triage pipeline."""


class UpstreamUnavailable(RuntimeError):
    """The remote classification call failed, timed out or returned nothing usable."""


class MalformedSignal(ValueError):
    """The upstream response could not be parsed as structured JSON."""
