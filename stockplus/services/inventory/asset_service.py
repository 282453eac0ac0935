"""
Asset Service
Stock valuation for the assets page.
"""

from stockplus.buisness.inventory.valuation import AssetValuation, value_assets
from stockplus.data.inventory.item import Item


class AssetService:

    @staticmethod
    def get_valuation() -> AssetValuation:
        """Items ordered by price, most expensive first, with per-kind totals"""
        items = Item.query.order_by(Item.price.desc(), Item.name).all()
        return value_assets(items)
