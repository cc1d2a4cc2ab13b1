"""Caronas Models Package"""

from caronas.models.ride import Direction, GroupRides, Ride, RideState, RideUser

__all__ = [
    "Direction", "GroupRides", "Ride", "RideState", "RideUser",
]
