"""Central location for constants shared across the application.

Enums replace magic strings for values that travel between the CLI,
configuration and the formatting layer.
"""

from enum import Enum


class MessageFormatType(str, Enum):
    """Output formats available for archived messages."""

    DEFAULT = "default"
    COMPACT = "compact"
    VERBOSE = "verbose"
    # Deprecated: kept so old configs still load; resolves to GOOGLE_DOCS.
    MARKDOWN_DOCUMENT = "markdown_document"
    GOOGLE_DOCS = "google_docs"


class Grammar(str, Enum):
    """Timestamp grammars recognized in WhatsApp text exports."""

    TWENTY_FOUR_HOUR = "24h"  # [DD/MM/YYYY, HH:mm:ss]
    TWELVE_HOUR = "12h"  # [M/D/YY, h:mm:ss AM]
