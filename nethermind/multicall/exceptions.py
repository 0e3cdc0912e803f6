class DecodingError(Exception):
    """

    Raised when issues occur with decoding multicall payloads or call data

    """


class UnrecognizedEnvelope(DecodingError):
    """
    Raised when a payload does not match any of the supported multicall envelopes.  The following
    formats are probed, in order:

        * Multicall3 ``aggregate3((address,bool,bytes)[])``
        * Multicall2 ``aggregate((address,bytes)[])``
        * ``tryAggregate(bool,(address,bytes)[])``
        * ``tryBlockAndAggregate(bool,(address,bytes)[])``

    """


class MalformedCallData(DecodingError):
    """Raised when call data is shorter than a 4 byte function selector"""


class GatewayError(Exception):
    """

    Raised when a remote lookup service fails to return usable data.  Gateways catch these internally and
    downgrade the result to an empty lookup.

    """


class GatewayRateLimitError(GatewayError):
    """Raised when rate limits are enforced by the remote host"""


class GatewayAuthError(GatewayError):
    """Raised when the remote host rejects the configured API key"""


class GatewayHostError(GatewayError):
    """Raised when the remote host returns error, fails to provide correct data, or when timeout occurs"""
