"""Shared plumbing for services bound to a RecordStore."""

from visitman.exceptions import MemberNotFound, ShopNotFound
from visitman.gates import Gates
from visitman.models import Member, Shop


class StoreService:
    """
    Base for services that read and write through one RecordStore.

    Arguments named `customer`, `member` or `shop` accept either a model
    instance or its code.
    """

    def __init__(self, store=None):
        if store is None:
            from visitman.apps import get_store

            store = get_store()
        self.store = store

    def _shop(self, shop: Shop | str) -> Shop:
        if isinstance(shop, Shop):
            return shop
        found = self.store.get_shop(shop)
        Gates.shop_exists(found, shop)
        return found

    def _member(self, member: Member | str) -> Member:
        if isinstance(member, Member):
            return member
        found = self.store.get_member(member)
        if found is None:
            raise MemberNotFound(member_code=member)
        return found
