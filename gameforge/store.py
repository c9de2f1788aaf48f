# gameforge/store.py — asset catalog, bundles, cart, purchases
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from .deps import get_storage, invalid_reference
from .models import CartItem, Purchase
from .schemas import (
    AssetOut,
    BundleOut,
    CartItemCreate,
    CartItemOut,
    MessageOut,
    PurchaseCreate,
    PurchaseOut,
)
from .storage import Storage

log = logging.getLogger(__name__)
router = APIRouter()


def _check_refs(storage: Storage, body) -> None:
    """user_id and the asset/bundle of a cart item or purchase must exist."""
    if storage.get_user(body.user_id) is None:
        raise invalid_reference("userId", "User does not exist")
    if body.asset_id and storage.get_asset(body.asset_id) is None:
        raise invalid_reference("assetId", "Asset does not exist")
    if body.bundle_id and storage.get_bundle(body.bundle_id) is None:
        raise invalid_reference("bundleId", "Bundle does not exist")


# ---------- Catalog ----------
@router.get("/api/assets", response_model=List[AssetOut])
def list_assets(category: Optional[str] = None, storage: Storage = Depends(get_storage)):
    if category:
        return storage.get_assets_by_category(category)
    return storage.get_all_assets()


@router.get("/api/assets/{asset_id}", response_model=AssetOut)
def get_asset(asset_id: str, storage: Storage = Depends(get_storage)):
    asset = storage.get_asset(asset_id)
    if asset is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Asset not found")
    return asset


@router.get("/api/bundles", response_model=List[BundleOut])
def list_bundles(storage: Storage = Depends(get_storage)):
    return storage.get_all_bundles()


@router.get("/api/bundles/{bundle_id}", response_model=BundleOut)
def get_bundle(bundle_id: str, storage: Storage = Depends(get_storage)):
    bundle = storage.get_bundle(bundle_id)
    if bundle is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Bundle not found")
    return bundle


# ---------- Cart ----------
# No session check on cart/purchase routes: any caller may act on any userId.
@router.get("/api/cart/{user_id}", response_model=List[CartItemOut])
def list_cart(user_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_cart_items(user_id)


@router.post("/api/cart", status_code=status.HTTP_201_CREATED, response_model=CartItemOut)
def add_to_cart(body: CartItemCreate, storage: Storage = Depends(get_storage)):
    _check_refs(storage, body)
    return storage.add_to_cart(CartItem(**body.model_dump()))


@router.delete("/api/cart/{user_id}/{item_id}", response_model=MessageOut)
def remove_from_cart(user_id: str, item_id: str, storage: Storage = Depends(get_storage)):
    if not storage.remove_from_cart(user_id, item_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Cart item not found")
    return {"message": "Item removed from cart"}


@router.delete("/api/cart/{user_id}", response_model=MessageOut)
def clear_cart(user_id: str, storage: Storage = Depends(get_storage)):
    storage.clear_cart(user_id)
    return {"message": "Cart cleared"}


@router.post(
    "/api/cart/{user_id}/checkout",
    status_code=status.HTTP_201_CREATED,
    response_model=List[PurchaseOut],
)
def checkout(user_id: str, storage: Storage = Depends(get_storage)):
    items = storage.get_cart_items(user_id)
    if not items:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Cart is empty")

    # price everything first so a missing catalog entry leaves the cart untouched
    pending = []
    for item in items:
        product = storage.get_asset(item.asset_id) if item.asset_id else storage.get_bundle(item.bundle_id)
        if product is None:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Cart item {item.id} is no longer available")
        pending.append(
            Purchase(
                user_id=user_id,
                asset_id=item.asset_id,
                bundle_id=item.bundle_id,
                amount=product.price * item.quantity,
            )
        )

    purchases = [storage.create_purchase(p) for p in pending]
    storage.clear_cart(user_id)
    log.info("Checkout for %s: %d purchase(s)", user_id, len(purchases))
    return purchases


# ---------- Purchases ----------
@router.post("/api/purchases", status_code=status.HTTP_201_CREATED, response_model=PurchaseOut)
def create_purchase(body: PurchaseCreate, storage: Storage = Depends(get_storage)):
    _check_refs(storage, body)
    return storage.create_purchase(Purchase(**body.model_dump()))


@router.get("/api/purchases/{user_id}", response_model=List[PurchaseOut])
def list_purchases(user_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_purchases_by_user_id(user_id)
