from .records import PRICE_FIELDS, ChangeRecord  # noqa
from .recorder import ChangeCollector, ChangeRecorder, QueueChangeSink  # noqa
