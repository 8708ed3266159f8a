from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_NAME = "Unknown"
UNKNOWN_PRICE = "N/A"


class CatalogModel(BaseModel):
    """Base for upstream payloads: every field optional, unknown fields kept."""

    model_config = ConfigDict(extra="allow")

    def to_payload(self) -> Dict[str, Any]:
        """Dump only what upstream actually sent."""
        return self.model_dump(exclude_unset=True)


class Product(CatalogModel):
    """
    Domain model for a catalog entry as returned by the upstream search API.

    Only ``name`` and ``salePrice`` are read here; every other field is
    relayed untouched, whatever type upstream sends it as.
    """

    itemId: Any = None
    parentItemId: Any = None
    name: Optional[str] = None
    salePrice: Optional[Union[int, float]] = None
    msrp: Any = None
    upc: Any = None
    categoryPath: Any = None
    categoryNode: Any = None
    shortDescription: Any = None
    longDescription: Any = None
    brandName: Any = None
    thumbnailImage: Any = None
    mediumImage: Any = None
    largeImage: Any = None
    productTrackingUrl: Any = None
    affiliateAddToCartUrl: Any = None
    ninetySevenCentShipping: Any = None
    standardShipRate: Any = None
    freeShippingOver35Dollars: Any = None
    isTwoDayShippingEligible: Any = None
    marketplace: Any = None
    shipToStore: Any = None
    freeShipToStore: Any = None
    availableOnline: Any = None
    modelNumber: Any = None
    sellerInfo: Any = None
    customerRating: Any = None
    numReviews: Any = None
    rhid: Any = None
    bundle: Any = None
    clearance: Any = None
    preOrder: Any = None
    stock: Any = None
    freight: Any = None
    maxItemsInOrder: Any = None
    offerType: Any = None
    offerId: Any = None
    color: Any = None
    gender: Any = None
    size: Any = None
    attributes: Any = None
    giftOptions: Any = None
    imageEntities: Any = None
    warnings: Any = None
    variants: Any = None
    bestMarketplacePrice: Any = None

    def display_price(self) -> str:
        """Sale price as text; whole amounts print without a decimal part."""
        price = self.salePrice
        if price is None:
            return UNKNOWN_PRICE
        if isinstance(price, float) and price.is_integer():
            return str(int(price))
        return str(price)

    def name_and_price(self) -> str:
        """One-line ``"{name} - {salePrice}"`` summary."""
        return f"{self.name or UNKNOWN_NAME} - {self.display_price()}"


class UpstreamResponse(CatalogModel):
    """Search payload returned by the upstream catalog API."""

    query: Any = None
    sort: Any = None
    responseGroup: Any = None
    totalResults: Optional[int] = None
    start: Any = None
    numItems: Any = None
    items: List[Product] = Field(default_factory=list)
