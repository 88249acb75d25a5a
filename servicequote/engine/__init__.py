from .aggregator import aggregate  # noqa
from .area_state import AreaState  # noqa
from .billing import monthly_multiplier, visits_in_contract  # noqa
from .config_resolver import ConfigResolver, Resolution  # noqa
from .context import AreaQuote, QuoteResult, QuoteTerms  # noqa
from .effective_config import ConfigTier, EffectiveConfig  # noqa
from .minimums import enforce_minimum  # noqa
from .quote_engine import QuoteSession  # noqa
