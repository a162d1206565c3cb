"""Order number, tracking and customer-name extraction from storefront emails."""
from shipmail.config import EXTRACTOR_VERSION, ExtractorConfig

__version__ = EXTRACTOR_VERSION

__all__ = ["ExtractorConfig", "EXTRACTOR_VERSION", "__version__"]
