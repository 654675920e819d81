from arcanaflow.protocol.channel import ChannelClosedError, OutboundChannel
from arcanaflow.protocol.dispatcher import ProtocolDispatcher, split_into_chunks

__all__ = [
    "ChannelClosedError",
    "OutboundChannel",
    "ProtocolDispatcher",
    "split_into_chunks",
]
