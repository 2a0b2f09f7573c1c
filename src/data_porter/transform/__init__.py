from data_porter.transform.base import AsyncTransformer, PorterAware, Transformer
from data_porter.transform.filter import FilterTransformer
from data_porter.transform.mapping import MapTransformer

__all__ = [
    "AsyncTransformer",
    "FilterTransformer",
    "MapTransformer",
    "PorterAware",
    "Transformer",
]
