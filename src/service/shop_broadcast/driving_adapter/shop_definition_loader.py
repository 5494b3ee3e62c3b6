"""
Shop Definition Loader

A shop definition file is itself a ShopSync document (JSON or MessagePack),
so the same decoder that reads the air validates what the shop advertises.
"""

from pathlib import Path
from typing import Optional

import attrs

from src.platform.codec.document_codec import DocumentCodec
from src.platform.exception.exceptions import ConfigurationError, MalformedPayloadError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.codec.document_decoder import ShopSyncDecoder
from src.service.shared_kernel.domain.entity.shop_snapshot import ShopSnapshot
from src.service.shared_kernel.domain.shop_sync_errors import DocumentRejectedError


@attrs.frozen
class ShopDefinition:
    snapshot: ShopSnapshot
    computer_id: int


class ShopDefinitionLoader:
    def __init__(
        self,
        *,
        path: Path,
        decoder: ShopSyncDecoder,
        computer_id_override: Optional[int] = None,
    ) -> None:
        self.path = Path(path)
        self.decoder = decoder
        self.computer_id_override = computer_id_override

    @Logger.io
    def load(self) -> ShopDefinition:
        """
        Read and validate the definition file

        Raises:
            ConfigurationError: file missing or unreadable, document rejected,
                or no computer ID from either the file or the override
        """
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise ConfigurationError(f'Cannot read shop definition {self.path}: {e}') from e

        try:
            document = DocumentCodec.decode(raw_data=raw)
            result = self.decoder.decode(document, reply_address=self.computer_id_override or 0)
        except (MalformedPayloadError, DocumentRejectedError) as e:
            raise ConfigurationError(f'Invalid shop definition {self.path}: {e.message}') from e

        for warning in result.warnings:
            Logger.base.warning(f'⚠️ [SHOP DEFINITION] {self.path.name}: {warning}')

        snapshot = result.snapshot
        computer_id = self.computer_id_override
        if computer_id is None:
            computer_id = snapshot.info.computer_id
        if computer_id is None:
            raise ConfigurationError(
                'Shop computer ID unknown: set info.computerID or SHOP_COMPUTER_ID'
            )

        if snapshot.info.computer_id != computer_id:
            snapshot = attrs.evolve(
                snapshot, info=attrs.evolve(snapshot.info, computer_id=computer_id)
            )
        return ShopDefinition(snapshot=snapshot, computer_id=computer_id)

    def modified_at(self) -> Optional[float]:
        try:
            return self.path.stat().st_mtime
        except OSError:
            return None
