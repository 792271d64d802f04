"""PublicViewResolver: anonymous, token-addressed collection snapshots."""

from __future__ import annotations

import logging
import re

from figure_tracker.db.models import ShareKind
from figure_tracker.errors import InvalidArgumentError, NotAvailableError
from figure_tracker.schemas.sharing import PublicCollectionEntry, PublicCollectionView
from figure_tracker.services.sharing_service import SharingRegistry
from figure_tracker.services.tracking_service import OwnershipStore

logger = logging.getLogger(__name__)

# ``secrets.token_urlsafe`` output: URL-safe base64 without padding.
_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]{16,128}$")

DEFAULT_OWNER_NAME = "A collector"


class PublicViewResolver:
    """Serve read-only ownership listings to anyone holding an active token.

    Only collection (ownership) links have a public projection; wishlist links
    resolve as unavailable.  Unknown, disabled and mismatched tokens all fail
    with the same :class:`NotAvailableError`.
    """

    def __init__(self, registry: SharingRegistry, ownership: OwnershipStore) -> None:
        self._registry = registry
        self._ownership = ownership

    async def view_by_token(
        self, token: str, kind: ShareKind = ShareKind.OWNERSHIP
    ) -> PublicCollectionView:
        if not _TOKEN_PATTERN.fullmatch(token):
            raise InvalidArgumentError("Malformed share token")

        link = await self._registry.resolve(token)
        if link is None:
            logger.info("Share token lookup missed")
            raise NotAvailableError()
        if not link.active:
            logger.info("Share link %s requested while inactive", link.id)
            raise NotAvailableError()
        if link.kind != kind or kind is not ShareKind.OWNERSHIP:
            logger.info("Share link %s requested with unsupported kind %s", link.id, kind.value)
            raise NotAvailableError()

        # Snapshot the link first; a failed increment rolls the session back and expires it.
        link_id = link.id
        owner_id = link.caller_id
        header = {
            "kind": ShareKind(link.kind),
            "title": link.title,
            "description": link.description,
            "owner_display_name": link.owner_display_name or DEFAULT_OWNER_NAME,
            "shared_since": link.created_at,
        }
        view_count = link.view_count

        try:
            await self._registry.record_view(link_id)
            view_count += 1
        except Exception as exc:  # view telemetry never fails the read
            logger.warning("Failed to record view for share link %s: %s", link_id, exc)

        listing = await self._ownership.list(owner_id)
        entries = [
            PublicCollectionEntry(**entry.model_dump()) for entry in listing.entries
        ]
        return PublicCollectionView(
            **header,
            view_count=view_count,
            total=len(entries),
            entries=entries,
        )


__all__ = ["PublicViewResolver"]
