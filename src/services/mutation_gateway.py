# src/services/mutation_gateway.py

"""Catalog writes against the remote datastore, with a local fallback."""

import asyncio
import logging
import time
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from src.data.fallback_catalog import fallback_products
from src.models.product import Product, ProductId, serialize_fields
from src.remote.base_catalog import RemoteCatalog, RemoteCatalogError
from src.storage.catalog_snapshot import LOCAL_ID_PREFIX, CatalogSnapshotStore

logger = logging.getLogger("umars_hands.mutations")

MutationOutcome = Literal["remote", "local"]


def synthesize_local_id() -> str:
    """Build a ``local-`` id for a product the remote did not accept."""
    millis = time.time_ns() // 1_000_000
    return f"{LOCAL_ID_PREFIX}{millis}-{uuid.uuid4().hex[:6]}"


class MutationGateway:
    """Applies create/update/delete to the remote catalog.

    A successful write is not applied locally: the remote subscription
    pushes the new snapshot back.  A failed write is applied to the
    in-memory catalog only, so the admin view stays responsive.  Such
    local changes are not durable; the next remote snapshot replaces
    them (last write wins, no replay queue).
    """

    def __init__(
        self,
        remote: RemoteCatalog,
        catalog: CatalogSnapshotStore,
        seed_products: Sequence[Product] | None = None,
    ) -> None:
        self.remote = remote
        self.catalog = catalog
        self._seed_products = seed_products

    async def add_product(
        self, data: Mapping[str, Any],
    ) -> MutationOutcome:
        """Create a product remotely, or append it locally on failure.

        Raises ``ValueError`` if *data* cannot describe a product.
        """
        document = serialize_fields(data)
        # Validate before touching the remote side.
        Product.from_dict(document, product_id="new")

        try:
            new_id = await asyncio.to_thread(
                self.remote.create_product, document,
            )
        except RemoteCatalogError as exc:
            local_id = synthesize_local_id()
            logger.warning(
                "Remote create failed, adding %s locally: %s",
                local_id,
                exc,
            )
            self.catalog.append_local(
                Product.from_dict(document, product_id=local_id)
            )
            return "local"

        logger.info("Created product %s remotely", new_id)
        return "remote"

    async def update_product(
        self, product_id: ProductId, updates: Mapping[str, Any],
    ) -> MutationOutcome:
        """Partially update a product remotely, or patch it locally.

        Raises ``ValueError`` if *updates* would make the product invalid.
        """
        changes = serialize_fields(updates)
        current = self.catalog.get(product_id)
        if current is not None:
            current.with_updates(changes)
        else:
            # Unknown locally: still check the fields that were given
            Product.from_dict(changes, product_id=product_id)
        try:
            await asyncio.to_thread(
                self.remote.update_product, product_id, changes,
            )
        except RemoteCatalogError as exc:
            logger.warning(
                "Remote update of %s failed, patching locally: %s",
                product_id,
                exc,
            )
            self.catalog.patch_local(product_id, changes)
            return "local"

        logger.info(
            "Updated product %s remotely (%s)",
            product_id,
            ", ".join(sorted(changes)),
        )
        return "remote"

    async def delete_product(
        self, product_id: ProductId,
    ) -> MutationOutcome:
        """Delete a product remotely, or drop it locally on failure."""
        try:
            await asyncio.to_thread(
                self.remote.delete_product, product_id,
            )
        except RemoteCatalogError as exc:
            logger.warning(
                "Remote delete of %s failed, removing locally: %s",
                product_id,
                exc,
            )
            self.catalog.remove_local(product_id)
            return "local"

        logger.info("Deleted product %s remotely", product_id)
        return "remote"

    async def seed_database(self) -> bool:
        """Bulk-write the bundled catalog to the remote datastore.

        Ids are left for the datastore to assign.  Failure is logged and
        reported through the return value only.
        """
        products = (
            list(self._seed_products)
            if self._seed_products is not None
            else fallback_products()
        )
        documents: list[Mapping[str, Any]] = [
            p.to_document() for p in products
        ]
        try:
            count = await asyncio.to_thread(
                self.remote.batch_create, documents,
            )
        except RemoteCatalogError as exc:
            logger.warning("Seeding the remote catalog failed: %s", exc)
            return False

        logger.info("Seeded remote catalog with %d products", count)
        return True
