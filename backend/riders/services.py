import logging

from django.utils import timezone

from riders.models import RiderProfile

logger = logging.getLogger(__name__)


# RIDER STATUS UPDATE
def set_online(profile: RiderProfile, is_online: bool):
    """
    Toggle rider availability.
    Offline riders are never offered to stores by matching.
    """
    profile.is_online = is_online
    profile.save(update_fields=["is_online"])

    logger.info("Rider %s is now %s", profile.user_id, "online" if is_online else "offline")
    return profile


def update_rider_location(profile: RiderProfile, lat, lon):
    """
    Update rider location reported by the rider app.
    Matching reads the stored location; it is never locked.
    """
    profile.current_latitude = lat
    profile.current_longitude = lon
    profile.last_location_update = timezone.now()
    profile.save(update_fields=["current_latitude", "current_longitude", "last_location_update"])

    logger.debug("Rider %s location updated to (%s, %s)", profile.user_id, lat, lon)
    return profile
