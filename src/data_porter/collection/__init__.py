from data_porter.collection.async_records import (
    AsyncPorterRecords,
    AsyncProviderRecords,
    AsyncRecordCollection,
    CountableAsyncPorterRecords,
    CountableAsyncProviderRecords,
    CountableAsyncRecordCollection,
)
from data_porter.collection.records import (
    CountablePorterRecords,
    CountableProviderRecords,
    CountableRecordCollection,
    PorterRecords,
    ProviderRecords,
    RecordCollection,
)
from data_porter.collection.wrap import (
    create_async_porter_records,
    create_async_provider_records,
    create_porter_records,
    create_provider_records,
)

__all__ = [
    "AsyncPorterRecords",
    "AsyncProviderRecords",
    "AsyncRecordCollection",
    "CountableAsyncPorterRecords",
    "CountableAsyncProviderRecords",
    "CountableAsyncRecordCollection",
    "CountablePorterRecords",
    "CountableProviderRecords",
    "CountableRecordCollection",
    "PorterRecords",
    "ProviderRecords",
    "RecordCollection",
    "create_async_porter_records",
    "create_async_provider_records",
    "create_porter_records",
    "create_provider_records",
]
