from .config_client import ServiceConfigClient  # noqa
from .pricing_context import ServicePricingContext  # noqa
