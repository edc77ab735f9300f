"""
Errors raised by the gateway.

Upstream error envelopes are not exceptions: they become an absent value
(see ``rollgraph.models.envelope.Outcome``).
"""


class TransportFailure(Exception):
    """The upstream call could not be completed or its body was not an envelope"""

    def __init__(self, description: str, reason: str):
        super().__init__(f"Request to {description} failed: {reason}")
        self.description = description
        self.reason = reason


class InvalidArgument(ValueError):
    """Field arguments violate a resolver precondition"""
