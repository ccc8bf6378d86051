from babel import Locale

import logging
import re

logger = logging.getLogger(__name__)

NEUTRAL_LANGUAGE = ""


def get_language_name(culture_code: str) -> str:
    """
    Get a display name for a .NET culture code using Babel.

    Handles the culture names used in .resx file suffixes:
      - Neutral culture (empty string)
      - Language code (e.g., 'tr', 'de')
      - Language with region (e.g., 'en-US', 'pt-BR')
      - Language with script (e.g., 'zh-Hans', 'sr-Latn-RS')

    Args:
        culture_code: The culture suffix used in the .resx file name

    Returns:
        A string with the display name of the language in English, including
        script and region if available. Returns the original code if parsing fails.
    """
    if culture_code == NEUTRAL_LANGUAGE:
        return "Neutral"

    try:
        normalized_code = re.sub(r"-", "_", culture_code.strip())
        locale = Locale.parse(normalized_code)
        return locale.get_display_name(locale="en")
    except Exception as e:
        logger.warning(
            f"Could not determine language name for culture '{culture_code}': {e}"
        )
        return culture_code


def is_known_language(culture_code: str) -> bool:
    """Return True when Babel recognizes the culture code (neutral counts as known)."""
    if culture_code == NEUTRAL_LANGUAGE:
        return True
    try:
        Locale.parse(culture_code.strip().replace("-", "_"))
        return True
    except Exception:
        return False
