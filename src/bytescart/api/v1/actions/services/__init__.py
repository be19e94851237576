"""
Server action business logic.

Every action checks that a user is signed in and owns the store it touches,
writes through the repositories, invalidates the cache tags of what changed
and records an audit entry.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Literal

from bytescart.api.v1.actions.request import (
    CreateStoreRequest,
    ProductRequest,
    ShippingLocationRequest,
    UpdateDomainRequest,
    UpdateStoreSettingsRequest,
)
from bytescart.api.v1.actions.response import (
    DnsRecord,
    DomainUpdateResponse,
    OrderResponse,
    OrdersResponse,
    OrderStatsResponse,
    ProductResponse,
    ShippingLocationResponse,
    StoreResponse,
)
from bytescart.core.logging import logger
from bytescart.domain.domains import (
    DnsTargets,
    DomainStatus,
    get_status_message,
    normalize_domain,
    to_ascii_domain,
    validate_domain_format,
)
from bytescart.domain.services.auth_base import AuthUser
from bytescart.domain.services.hosting_base import HostingProviderBase
from bytescart.domain.services.payment_base import PaymentProcessorBase, PaymentProviderError
from bytescart.exception_handlers import RouteError
from bytescart.infrastructure.cache import CacheTags, TagCache, store_cache_tags
from bytescart.infrastructure.repositories import (
    STRIPE_NOT_CONNECTED,
    AuditAction,
    OrderRepository,
    ProductRepository,
    ShippingLocationRepository,
    Store,
    StoreRepository,
    StoreSlugTakenError,
)
from bytescart.models import ActionResult
from bytescart.services.audit import AuditLogEntry, AuditLogger

OrderRange = Literal["7days", "30days", "all"]

SLUG_TAKEN = "This store name is already taken. Please choose another."
DOMAIN_TAKEN = "This domain is already connected to another store"
STORE_NOT_FOUND = "Store not found or unauthorized"
PRODUCT_NOT_FOUND = "Product not found or unauthorized"
LOCATION_NOT_FOUND = "Shipping location not found or unauthorized"


@dataclass
class ActionContext:
    """Who runs an action and from where."""

    user: AuthUser
    ip_address: str


def require_user(user: AuthUser | None) -> AuthUser:
    if user is None:
        raise RouteError(401, "Not authenticated")
    return user


async def require_owned_store(
    stores: StoreRepository, store_id: str, user: AuthUser
) -> Store:
    store = await stores.get_owned(store_id, user.id)
    if store is None:
        raise RouteError(404, STORE_NOT_FOUND)
    return store


async def require_user_store(stores: StoreRepository, user: AuthUser) -> Store:
    store = await stores.get_by_owner(user.id)
    if store is None:
        raise RouteError(404, STORE_NOT_FOUND)
    return store


class StoreActions:
    """Store creation, settings and custom domain."""

    def __init__(
        self,
        stores: StoreRepository,
        hosting: HostingProviderBase,
        audit: AuditLogger,
        cache: TagCache,
        dns_targets: DnsTargets,
    ) -> None:
        self.stores = stores
        self.hosting = hosting
        self.audit = audit
        self.cache = cache
        self.dns_targets = dns_targets

    async def create_store(self, ctx: ActionContext, data: CreateStoreRequest) -> Store:
        """
        Create a store owned by the current user.

        Raises:
            RouteError: 409 when the slug is already taken
        """
        if await self.stores.get_by_slug(data.subdomain_slug) is not None:
            raise RouteError(409, SLUG_TAKEN)

        try:
            store = await self.stores.create(
                owner_id=ctx.user.id,
                store_name=data.store_name,
                subdomain_slug=data.subdomain_slug,
                theme_id=data.theme_id,
            )
        except StoreSlugTakenError as e:
            raise RouteError(409, SLUG_TAKEN) from e

        self.cache.invalidate_tags(*store_cache_tags(store))
        await self.audit.log(
            AuditLogEntry(
                action=AuditAction.STORE_CREATED,
                actor_id=ctx.user.id,
                store_id=store.id,
                resource_type="Store",
                resource_id=store.id,
                metadata={"subdomainSlug": store.subdomain_slug},
                ip_address=ctx.ip_address,
            )
        )
        logger.info(f"Created store {store.id} ({store.subdomain_slug})")
        return store

    async def update_settings(
        self, ctx: ActionContext, store_id: str, data: UpdateStoreSettingsRequest
    ) -> ActionResult:
        store = await require_owned_store(self.stores, store_id, ctx.user)

        fields = data.model_dump(exclude_unset=True, exclude_none=True, by_alias=False)
        if fields:
            store = await self.stores.update(store.id, **fields)
            self.cache.invalidate_tags(*store_cache_tags(store))
            await self.audit.log(
                AuditLogEntry(
                    action=AuditAction.STORE_UPDATED,
                    actor_id=ctx.user.id,
                    store_id=store.id,
                    resource_type="Store",
                    resource_id=store.id,
                    metadata={"fields": sorted(fields)},
                    ip_address=ctx.ip_address,
                )
            )

        return ActionResult(
            success=True, data=StoreResponse.from_store(store).model_dump(mode="json")
        )

    def _dns_records(self) -> list[DnsRecord]:
        return [
            DnsRecord(type="A", name="@", value=self.dns_targets.a_record_ip),
            DnsRecord(type="CNAME", name="www", value=self.dns_targets.cname_target),
        ]

    async def _release_domain(self, domain: str) -> None:
        result = await self.hosting.remove_domain(domain)
        if not result.success:
            logger.warning(f"Could not remove domain {domain} from hosting: {result.error}")

    async def update_domain(
        self, ctx: ActionContext, store_id: str, data: UpdateDomainRequest
    ) -> ActionResult:
        """
        Set, change or remove a store's custom domain.

        A new domain starts over at Pending; the owner then adds the DNS
        records returned here and polls the status check.
        """
        store = await require_owned_store(self.stores, store_id, ctx.user)
        previous = store.domain

        if data.domain and data.domain.strip():
            validation = validate_domain_format(data.domain)
            if not validation.valid:
                raise RouteError(400, validation.error)
            domain = to_ascii_domain(normalize_domain(data.domain))
            if await self.stores.domain_taken(domain, exclude_store_id=store.id):
                raise RouteError(409, DOMAIN_TAKEN)
        else:
            domain = None

        if domain == previous:
            return ActionResult(
                success=True,
                data=DomainUpdateResponse(
                    domain=store.domain,
                    status=store.domain_status,
                    message=get_status_message(store.domain_status),
                    dns_records=self._dns_records() if store.domain else [],
                ).model_dump(mode="json"),
            )

        if previous:
            await self._release_domain(previous)

        store = await self.stores.update(
            store.id,
            domain=domain,
            domain_status=DomainStatus.PENDING,
            certificate_generated_at=None,
        )
        tags = store_cache_tags(store)
        if previous:
            tags.append(CacheTags.domain(previous))
        self.cache.invalidate_tags(*tags)

        await self.audit.log(
            AuditLogEntry(
                action=AuditAction.DOMAIN_UPDATED,
                actor_id=ctx.user.id,
                store_id=store.id,
                resource_type="Store",
                resource_id=store.id,
                metadata={"previousDomain": previous, "domain": domain},
                ip_address=ctx.ip_address,
            )
        )

        if domain is None:
            message = "Custom domain removed"
        else:
            message = get_status_message(DomainStatus.PENDING)
        return ActionResult(
            success=True,
            data=DomainUpdateResponse(
                domain=domain,
                status=DomainStatus.PENDING,
                message=message,
                dns_records=self._dns_records() if domain else [],
            ).model_dump(mode="json"),
        )


class ShippingActions:
    """Shipping destinations of a store."""

    def __init__(
        self,
        stores: StoreRepository,
        locations: ShippingLocationRepository,
        audit: AuditLogger,
        cache: TagCache,
    ) -> None:
        self.stores = stores
        self.locations = locations
        self.audit = audit
        self.cache = cache

    async def _owned_location(self, location_id: str, user: AuthUser):
        location = await self.locations.get(location_id)
        if location is None or await self.stores.get_owned(location.store_id, user.id) is None:
            raise RouteError(404, LOCATION_NOT_FOUND)
        return location

    async def _record(
        self,
        ctx: ActionContext,
        action: AuditAction,
        store_id: str,
        location_id: str | None = None,
        metadata: dict | None = None,
    ) -> None:
        self.cache.invalidate_tags(CacheTags.shipping_locations(store_id))
        await self.audit.log(
            AuditLogEntry(
                action=action,
                actor_id=ctx.user.id,
                store_id=store_id,
                resource_type="ShippingLocation",
                resource_id=location_id,
                metadata=metadata or {},
                ip_address=ctx.ip_address,
            )
        )

    async def create(
        self, ctx: ActionContext, store_id: str, data: ShippingLocationRequest
    ) -> ActionResult:
        store = await require_owned_store(self.stores, store_id, ctx.user)
        location = await self.locations.create(store.id, data.country, data.cities)
        await self._record(
            ctx,
            AuditAction.SHIPPING_LOCATION_CREATED,
            store.id,
            location.id,
            {"country": location.country},
        )
        return ActionResult(
            success=True,
            data=ShippingLocationResponse.from_location(location).model_dump(mode="json"),
        )

    async def update(
        self, ctx: ActionContext, location_id: str, data: ShippingLocationRequest
    ) -> ActionResult:
        location = await self._owned_location(location_id, ctx.user)
        location = await self.locations.update(location.id, data.country, data.cities)
        await self._record(
            ctx,
            AuditAction.SHIPPING_LOCATION_UPDATED,
            location.store_id,
            location.id,
            {"country": location.country},
        )
        return ActionResult(
            success=True,
            data=ShippingLocationResponse.from_location(location).model_dump(mode="json"),
        )

    async def delete(self, ctx: ActionContext, location_id: str) -> ActionResult:
        location = await self._owned_location(location_id, ctx.user)
        await self.locations.delete(location.id)
        await self._record(
            ctx,
            AuditAction.SHIPPING_LOCATION_DELETED,
            location.store_id,
            location.id,
            {"country": location.country},
        )
        return ActionResult(success=True)

    async def reorder(
        self, ctx: ActionContext, store_id: str, location_ids: list[str]
    ) -> ActionResult:
        store = await require_owned_store(self.stores, store_id, ctx.user)
        await self.locations.reorder(store.id, location_ids)
        await self._record(
            ctx,
            AuditAction.SHIPPING_LOCATIONS_REORDERED,
            store.id,
            metadata={"count": len(location_ids)},
        )
        locations = await self.locations.list_for_store(store.id)
        return ActionResult(
            success=True,
            data=[
                ShippingLocationResponse.from_location(location).model_dump(mode="json")
                for location in locations
            ],
        )


class ProductActions:
    """Product catalog of a store."""

    def __init__(
        self,
        stores: StoreRepository,
        products: ProductRepository,
        audit: AuditLogger,
        cache: TagCache,
    ) -> None:
        self.stores = stores
        self.products = products
        self.audit = audit
        self.cache = cache

    async def _owned_product(self, product_id: str, user: AuthUser):
        product = await self.products.get(product_id)
        if product is None or await self.stores.get_owned(product.store_id, user.id) is None:
            raise RouteError(404, PRODUCT_NOT_FOUND)
        return product

    async def _record(
        self, ctx: ActionContext, action: AuditAction, store_id: str, product_id: str, name: str
    ) -> None:
        self.cache.invalidate_tags(CacheTags.products(store_id))
        await self.audit.log(
            AuditLogEntry(
                action=action,
                actor_id=ctx.user.id,
                store_id=store_id,
                resource_type="Product",
                resource_id=product_id,
                metadata={"name": name},
                ip_address=ctx.ip_address,
            )
        )

    async def create(
        self, ctx: ActionContext, store_id: str, data: ProductRequest
    ) -> ActionResult:
        store = await require_owned_store(self.stores, store_id, ctx.user)
        product = await self.products.create(
            store.id, data.name, data.price, data.image_url
        )
        await self._record(
            ctx, AuditAction.PRODUCT_CREATED, store.id, product.id, product.name
        )
        return ActionResult(
            success=True, data=ProductResponse.from_product(product).model_dump(mode="json")
        )

    async def update(
        self, ctx: ActionContext, product_id: str, data: ProductRequest
    ) -> ActionResult:
        product = await self._owned_product(product_id, ctx.user)
        product = await self.products.update(
            product.id, data.name, data.price, data.image_url
        )
        await self._record(
            ctx, AuditAction.PRODUCT_UPDATED, product.store_id, product.id, product.name
        )
        return ActionResult(
            success=True, data=ProductResponse.from_product(product).model_dump(mode="json")
        )

    async def delete(self, ctx: ActionContext, product_id: str) -> ActionResult:
        product = await self._owned_product(product_id, ctx.user)
        await self.products.delete(product.id)
        await self._record(
            ctx, AuditAction.PRODUCT_DELETED, product.store_id, product.id, product.name
        )
        return ActionResult(success=True)


class StripeActions:
    def __init__(
        self,
        stores: StoreRepository,
        payments: PaymentProcessorBase,
        audit: AuditLogger,
        cache: TagCache,
    ) -> None:
        self.stores = stores
        self.payments = payments
        self.audit = audit
        self.cache = cache

    async def disconnect(self, ctx: ActionContext) -> ActionResult:
        """
        Unlink the user's Stripe account.

        Revoking access on Stripe's side is attempted first; the store is
        cleared even when that fails.
        """
        store = await require_user_store(self.stores, ctx.user)
        account_id = store.stripe_connect_id
        if not account_id:
            return ActionResult(success=False, error="No Stripe account connected")

        try:
            if not await self.payments.deauthorize(account_id):
                logger.warning(f"Stripe did not confirm deauthorization of {account_id}")
        except PaymentProviderError as e:
            logger.warning(f"Error deauthorizing Stripe account {account_id}: {e}")

        store = await self.stores.update(
            store.id,
            stripe_connect_id=None,
            stripe_connect_status=STRIPE_NOT_CONNECTED,
            stripe_connected_at=None,
        )
        self.cache.invalidate_tags(*store_cache_tags(store))
        await self.audit.log(
            AuditLogEntry(
                action=AuditAction.STRIPE_DISCONNECTED,
                actor_id=ctx.user.id,
                store_id=store.id,
                resource_type="Store",
                resource_id=store.id,
                metadata={"stripeAccountId": account_id},
                ip_address=ctx.ip_address,
            )
        )
        logger.info(f"Disconnected Stripe account {account_id} from store {store.id}")
        return ActionResult(success=True)


class OrderQueries:
    """Read-only order views for the dashboard."""

    def __init__(
        self, stores: StoreRepository, orders: OrderRepository, cache: TagCache
    ) -> None:
        self.stores = stores
        self.orders = orders
        self.cache = cache

    async def list_orders(
        self, user: AuthUser, date_range: OrderRange, limit: int
    ) -> OrdersResponse:
        store = await require_user_store(self.stores, user)

        since = None
        if date_range != "all":
            days = 7 if date_range == "7days" else 30
            since = datetime.now(UTC).replace(tzinfo=None) - timedelta(days=days)

        async def load() -> OrdersResponse:
            rows = await self.orders.list_for_store(store.id, since=since, limit=limit)
            return OrdersResponse(orders=[OrderResponse.from_order(row) for row in rows])

        return await self.cache.get_or_load(
            f"orders:{store.id}:{date_range}:{limit}",
            [CacheTags.orders(store.id)],
            load,
        )

    async def stats(self, user: AuthUser) -> OrderStatsResponse:
        store = await require_user_store(self.stores, user)

        async def load() -> OrderStatsResponse:
            stats = await self.orders.stats_for_store(
                store.id, datetime.now(UTC).replace(tzinfo=None)
            )
            return OrderStatsResponse.from_stats(stats)

        return await self.cache.get_or_load(
            f"order-stats:{store.id}", [CacheTags.orders(store.id)], load
        )
