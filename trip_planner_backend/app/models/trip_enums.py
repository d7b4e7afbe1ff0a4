"""
Trip-related enumerations.
"""

import enum


class VehicleType(int, enum.Enum):
    """
    Transport mode used to reach a stop.

    Persisted inside the encoded day itinerary as its integer code.
    """
    UNSPECIFIED = 0
    WALKING = 1
    BICYCLE = 2
    MOTORBIKE = 3
    CAR = 4
    BUS = 5
    TRAIN = 6
