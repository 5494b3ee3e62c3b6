"""
Receive ShopSync Use Case
Decode one inbound broadcast and keep it if it is acceptable
"""

from typing import Optional

from src.platform.codec.document_codec import DocumentCodec
from src.platform.exception.exceptions import MalformedPayloadError
from src.platform.logging.loguru_io import Logger
from src.platform.transport.i_channel_transport import InboundMessage
from src.service.shared_kernel.app.codec.document_decoder import ShopSyncDecoder
from src.service.shared_kernel.app.dto.decode_result import DecodeResult
from src.service.shared_kernel.domain.enum.error_kind import ErrorKind
from src.service.shared_kernel.domain.shop_sync_errors import DocumentRejectedError
from src.service.shop_listener.app.dto.snapshot_record import SnapshotRecord
from src.service.shop_listener.app.interface.i_snapshot_registry import ISnapshotRegistry


class ReceiveShopSyncUseCase:
    def __init__(self, *, decoder: ShopSyncDecoder, registry: ISnapshotRegistry) -> None:
        self.decoder = decoder
        self.registry = registry
        self.accepted_count = 0
        self.rejected_count: dict[ErrorKind, int] = {}

    @Logger.io
    async def execute(self, message: InboundMessage) -> Optional[DecodeResult]:
        """
        Returns:
            DecodeResult when accepted, None when the document was rejected

        Note:
            - Rejections are logged and counted, never raised
        """
        try:
            document = DocumentCodec.decode(raw_data=message.payload)
            result = self.decoder.decode(document, reply_address=message.reply_channel)
        except MalformedPayloadError as e:
            # Not even a table: same outcome as a non-ShopSync document
            self._reject(ErrorKind.WRONG_TYPE, message, e.message)
            return None
        except DocumentRejectedError as e:
            self._reject(e.kind, message, e.message)
            return None

        stored = self.registry.record(
            SnapshotRecord.from_result(result, received_at=message.received_at)
        )
        self.accepted_count += 1
        Logger.base.info(
            f'🛒 [LISTENER] {result.identity}: {len(result.snapshot.listings)} listings, '
            f'{len(result.warnings)} warnings (identity via {result.identity_source}'
            f'{"" if stored else ", stale"})'
        )
        return result

    def _reject(self, kind: ErrorKind, message: InboundMessage, reason: str) -> None:
        self.rejected_count[kind] = self.rejected_count.get(kind, 0) + 1
        Logger.base.warning(
            f'🚫 [LISTENER] Rejected {kind} from reply channel {message.reply_channel}: {reason}'
        )
