"""
Catalog Entries
===============
Parses near-Earth-object records (NASA NeoWs JSON shape) that the catalog
collaborator has already fetched, into the launch parameters the engine
needs. No network access happens here.

Fields read:
    estimated_diameter.meters.estimated_diameter_max           -> diameter (m)
    close_approach_data[0].relative_velocity.kilometers_per_second  -> speed (km/s)
    close_approach_data[0].miss_distance.kilometers            -> miss distance (km)
"""

import numpy as np
from dataclasses import dataclass


class CatalogError(ValueError):
    """A catalog record that is missing or has malformed fields."""


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    name: str
    diameter: float           # m
    velocity_kms: float       # km/s relative velocity at close approach
    miss_distance_km: float

    @property
    def velocity_si(self) -> float:
        """Relative speed in m/s."""
        return self.velocity_kms * 1000.0

    @classmethod
    def from_neo(cls, record: dict) -> 'CatalogEntry':
        try:
            diameter = float(record['estimated_diameter']['meters']['estimated_diameter_max'])
            approach = record['close_approach_data'][0]
            velocity = float(approach['relative_velocity']['kilometers_per_second'])
            miss = float(approach['miss_distance']['kilometers'])
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise CatalogError(
                f"Malformed catalog record {record.get('id', '?') if isinstance(record, dict) else record!r}: {exc!r}"
            ) from exc

        if not (np.isfinite(diameter) and diameter > 0):
            raise CatalogError(f"Invalid diameter {diameter!r}")
        if not (np.isfinite(velocity) and velocity >= 0):
            raise CatalogError(f"Invalid relative velocity {velocity!r}")

        return cls(
            id=str(record.get('id', '')),
            name=str(record.get('name', 'Unknown')),
            diameter=diameter,
            velocity_kms=velocity,
            miss_distance_km=miss,
        )

    def describe(self) -> str:
        return (f"{self.name}: {self.diameter:.1f} m, "
                f"{self.velocity_kms:.1f} km/s, miss {self.miss_distance_km:.0f} km")
