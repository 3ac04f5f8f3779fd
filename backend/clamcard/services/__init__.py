"""Services package for the ClamCard system."""

from .fare_calculator import (
    get_fare_calculator,
    FareCalculatorInterface,
    ZoneCappedFareCalculator
)

__all__ = [
    'get_fare_calculator',
    'FareCalculatorInterface',
    'ZoneCappedFareCalculator'
]
