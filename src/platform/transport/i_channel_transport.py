"""
Channel Transport Interface (Port)

Unreliable, best-effort broadcast medium with numbered channels and a
sender-supplied reply channel. Delivery is at most once; the core never
retries and never asks for retransmission.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Union

from anyio.streams.memory import MemoryObjectReceiveStream
import attrs


@attrs.frozen
class InboundMessage:
    channel: int
    reply_channel: int
    payload: Union[bytes, str, Mapping[str, Any]]  # Raw as delivered, decoded by the receiver
    received_at: float  # Wall-clock arrival time


class IChannelTransport(ABC):
    @abstractmethod
    async def transmit(
        self, *, channel: int, reply_channel: int, document: Mapping[str, Any]
    ) -> None:
        """
        Broadcast one document

        Note:
            - Fire-and-forget: failures are logged, not raised
        """
        pass

    @abstractmethod
    async def subscribe(self, *, channel: int) -> MemoryObjectReceiveStream[InboundMessage]:
        """
        Start receiving everything broadcast on channel

        Returns:
            Stream of InboundMessage; slow readers lose messages, never block senders
        """
        pass

    @abstractmethod
    async def unsubscribe(
        self, *, channel: int, stream: MemoryObjectReceiveStream[InboundMessage]
    ) -> None:
        """Stop a subscription and close its stream (safe on unknown streams)"""
        pass

    async def aclose(self) -> None:
        """Release transport resources"""
        return None
