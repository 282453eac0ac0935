"""
Stock and asset reductions over an already-loaded list of items.

Nothing here is cached: callers load the rows and recompute on every
request, so figures always reflect the latest committed stock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from stockplus.data.inventory.item import KIND_FINISHED_GOOD, KIND_RAW_MATERIAL, Item
from stockplus.utils.formatting import format_percentage


@dataclass
class StockSummary:
    total_items: int = 0
    raw_material_count: int = 0
    finished_good_count: int = 0
    total_units: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0
    total_asset_value: float = 0.0
    low_stock_items: List[Item] = field(default_factory=list)

    @property
    def safe_count(self) -> int:
        return self.total_items - self.low_stock_count

    def to_dict(self) -> dict:
        return {
            'total_items': self.total_items,
            'raw_material_count': self.raw_material_count,
            'finished_good_count': self.finished_good_count,
            'total_units': self.total_units,
            'low_stock_count': self.low_stock_count,
            'out_of_stock_count': self.out_of_stock_count,
            'safe_count': self.safe_count,
            'total_asset_value': self.total_asset_value,
            'low_stock_items': [
                {
                    'id': item.id,
                    'name': item.name,
                    'kind': item.kind,
                    'stock': item.stock,
                    'minimum_stock': item.minimum_stock,
                }
                for item in self.low_stock_items
            ],
        }


@dataclass
class AssetLine:
    item: Item
    total_value: float


@dataclass
class AssetValuation:
    lines: List[AssetLine] = field(default_factory=list)
    total_asset_value: float = 0.0
    raw_material_value: float = 0.0
    finished_good_value: float = 0.0

    @property
    def total_items(self) -> int:
        return len(self.lines)

    @property
    def raw_material_share(self) -> str:
        return format_percentage(self.raw_material_value, self.total_asset_value)

    @property
    def finished_good_share(self) -> str:
        return format_percentage(self.finished_good_value, self.total_asset_value)

    def share_of_total(self, value: float) -> str:
        return format_percentage(value, self.total_asset_value)

    def to_dict(self) -> dict:
        return {
            'summary': {
                'total_asset_value': self.total_asset_value,
                'raw_material_value': self.raw_material_value,
                'finished_good_value': self.finished_good_value,
                'total_items': self.total_items,
                'raw_material_share': self.raw_material_share,
                'finished_good_share': self.finished_good_share,
            },
            'items': [
                {
                    'id': line.item.id,
                    'name': line.item.name,
                    'kind': line.item.kind,
                    'stock': line.item.stock,
                    'price': line.item.price,
                    'total_value': line.total_value,
                    'share': self.share_of_total(line.total_value),
                }
                for line in self.lines
            ],
        }


def summarize_stock(items: Iterable[Item]) -> StockSummary:
    summary = StockSummary()
    for item in items:
        summary.total_items += 1
        if item.kind == KIND_RAW_MATERIAL:
            summary.raw_material_count += 1
        elif item.kind == KIND_FINISHED_GOOD:
            summary.finished_good_count += 1
        summary.total_units += item.stock or 0
        summary.total_asset_value += item.total_value
        if item.is_low_stock:
            summary.low_stock_count += 1
            summary.low_stock_items.append(item)
        if item.is_out_of_stock:
            summary.out_of_stock_count += 1
    return summary


def value_assets(items: Iterable[Item]) -> AssetValuation:
    """Per-item stock value, keeping the caller's ordering (price descending on the assets page)"""
    valuation = AssetValuation()
    for item in items:
        line = AssetLine(item=item, total_value=item.total_value)
        valuation.lines.append(line)
        valuation.total_asset_value += line.total_value
        if item.kind == KIND_RAW_MATERIAL:
            valuation.raw_material_value += line.total_value
        elif item.kind == KIND_FINISHED_GOOD:
            valuation.finished_good_value += line.total_value
    return valuation
