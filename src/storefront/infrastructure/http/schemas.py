"""Wire schemas for the HTTP surface.

The browser speaks camelCase JSON. These models only fix the types; the
business rules on cart shape live in the application layer so the CLI
gets them too.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront.application.dto import CartItemSpec, CheckoutRequest, ShippingAddressSpec


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartItemPayload(CamelModel):
    product_id: Optional[str] = None
    product_title: Optional[str] = None
    product_slug: Optional[str] = None
    variant_id: Optional[str] = None
    variant_title: Optional[str] = None
    quantity: Optional[int] = None
    price: Optional[Decimal] = None
    product_image_url: Optional[str] = None


class ShippingAddressPayload(CamelModel):
    name: str
    address: str
    city: str
    country: str
    postal_code: Optional[str] = None
    phone: Optional[str] = None


class CheckoutPayload(CamelModel):
    cart_items: Optional[List[CartItemPayload]] = None
    currency_code: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_phone: Optional[str] = None
    shipping_address: Optional[ShippingAddressPayload] = None
    shipping_fee: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
    subtotal: Optional[Decimal] = None
    success_url_path: Optional[str] = None
    cancel_url_path: Optional[str] = None
    allow_coupon_code: Optional[bool] = None
    allow_quantity: Optional[bool] = None

    def to_request(self) -> CheckoutRequest:
        address = self.shipping_address
        return CheckoutRequest(
            cart_items=None
            if self.cart_items is None
            else [
                CartItemSpec(
                    product_id=item.product_id,
                    product_title=item.product_title,
                    quantity=item.quantity,
                    price=item.price,
                    product_slug=item.product_slug,
                    variant_id=item.variant_id,
                    variant_title=item.variant_title,
                    product_image_url=item.product_image_url,
                )
                for item in self.cart_items
            ],
            user_name=self.user_name,
            user_email=self.user_email,
            currency_code=self.currency_code,
            user_phone=self.user_phone,
            shipping_address=None
            if address is None
            else ShippingAddressSpec(
                name=address.name,
                address=address.address,
                city=address.city,
                country=address.country,
                postal_code=address.postal_code,
                phone=address.phone,
            ),
            shipping_fee=self.shipping_fee,
            tax_amount=self.tax_amount,
            discount_amount=self.discount_amount,
            subtotal=self.subtotal,
            success_url_path=self.success_url_path,
            cancel_url_path=self.cancel_url_path,
            allow_coupon_code=self.allow_coupon_code,
            allow_quantity=self.allow_quantity,
        )


class CheckoutResponse(BaseModel):
    checkout_url: str
    order_id: str
