"""
Sensor reading validation against a device profile
"""
import logging
from typing import Any, List, Mapping

from hydromon.models.profile import ReadingProfile

logger = logging.getLogger(__name__)

def is_valid_reading(data: Mapping[str, Any], profile: ReadingProfile) -> bool:
    """
    A reading is valid when every core field of the profile is present.

    Only key absence fails; None or 0 values count as present. Missing
    optional fields are logged and never affect the result.
    """
    for key in profile.required_fields:
        if key not in data:
            logger.warning(f"Missing core field: {key}")
            return False

    for key in missing_optional_fields(data, profile):
        logger.info(f"Optional field missing: {key}")

    return True

def missing_optional_fields(data: Mapping[str, Any], profile: ReadingProfile) -> List[str]:
    return [key for key in profile.optional_fields if key not in data]
