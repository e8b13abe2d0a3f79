from ..core.extension import Hook, HookOrder
from ..core.transport import TransportLike, as_transport


def use_transport(transport: TransportLike) -> Hook:
    """
    Hook replacing the wrapped transport with ``transport``.

    Runs at HookOrder.TRANSPORT, so hooks with a lower order still wrap it.

    Example:
        >>> with SessionTransport(TransportConfig.create(timeout=5)) as transport:
        ...     Request(url="https://example.com", options=[use_transport(transport)]).do()
    """
    replacement = as_transport(transport)
    return Hook(
        name="transport",
        order=HookOrder.TRANSPORT,
        handle_request=lambda next_transport: replacement,
    )
