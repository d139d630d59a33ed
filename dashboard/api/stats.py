from typing import List

from fastapi import APIRouter, Depends

from dashboard.api.deps import get_settings, get_store
from dashboard.core.config import Settings
from dashboard.models.schemas import CategoryStat, Envelope, OrderStat, SummaryStats
from dashboard.store import Store

router = APIRouter()


@router.get("", response_model=Envelope[SummaryStats])
def stats(store: Store = Depends(get_store), settings: Settings = Depends(get_settings)):
    summary = store.summary_stats(settings.low_stock_threshold)
    summary["totalRevenue"] = f"{summary['totalRevenue']:.2f}"
    return {"data": summary}


@router.get("/categories", response_model=Envelope[List[CategoryStat]])
def category_stats(store: Store = Depends(get_store)):
    return {"data": store.category_stats()}


@router.get("/orders", response_model=Envelope[List[OrderStat]])
def order_stats(store: Store = Depends(get_store)):
    return {"data": store.order_stats()}
