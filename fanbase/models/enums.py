from enum import Enum


class ProfileField(str, Enum):
    """
    Profile fields tracked in the change history.
    Declaration order is the canonical order of proposed changes.
    """

    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    EMAIL = "email"
    PROFILE_PICTURE = "profilePicture"


# Sentinel stored/compared for a profile without a picture
NO_PICTURE = "none"
