"""GPS coordinate conversion.

EXIF stores latitude and longitude as three unsigned rationals (degrees,
minutes, seconds) plus a one-letter reference giving the hemisphere. This
module turns that pair into signed decimal degrees.
"""

import math
from dataclasses import dataclass
from enum import Enum


class Hemisphere(Enum):
    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def sign(self) -> int:
        return -1 if self in (Hemisphere.SOUTH, Hemisphere.WEST) else 1

    @classmethod
    def from_ref(cls, ref) -> "Hemisphere":
        """Parse an EXIF GPSLatitudeRef/GPSLongitudeRef value.

        Pillow usually hands back a str ("N"), but some writers leave a
        trailing NUL or store bytes.

        Raises:
            ValueError: If ref is not one of N, S, E, W
        """
        if isinstance(ref, bytes):
            ref = ref.decode("ascii", errors="replace")
        letter = str(ref).strip("\x00 ").upper()
        try:
            return cls(letter)
        except ValueError:
            raise ValueError(f"invalid hemisphere reference {ref!r}") from None


@dataclass(frozen=True)
class RawCoordinate:
    """Degrees/minutes/seconds with hemisphere, as stored in EXIF."""

    degrees: float
    minutes: float
    seconds: float
    hemisphere: Hemisphere

    @classmethod
    def from_exif(cls, dms, ref) -> "RawCoordinate":
        """Build from an EXIF rational triple and reference letter.

        Args:
            dms: (degrees, minutes, seconds) - IFDRational, Fraction or float
            ref: Hemisphere reference ("N", "S", "E", "W")

        Raises:
            ValueError: If dms is not a triple of finite non-negative numbers
                or ref is not a hemisphere letter
        """
        try:
            degrees, minutes, seconds = (float(part) for part in dms)
        except (TypeError, ValueError, ZeroDivisionError):
            raise ValueError(f"expected (degrees, minutes, seconds), got {dms!r}") from None

        # IFDRational with a zero denominator converts to nan
        for part in (degrees, minutes, seconds):
            if not math.isfinite(part) or part < 0:
                raise ValueError(f"invalid coordinate component {part!r}")

        return cls(degrees, minutes, seconds, Hemisphere.from_ref(ref))


def to_decimal_degrees(raw: RawCoordinate) -> float:
    """Convert GPS DMS (degrees, minutes, seconds) to signed decimal degrees.

    Args:
        raw: RawCoordinate - e.g., (37, 50, 4.8, SOUTH)

    Returns:
        float: Decimal degrees - e.g., -37.834667
    """
    magnitude = raw.degrees + (raw.minutes / 60.0) + (raw.seconds / 3600.0)
    return raw.hemisphere.sign * magnitude
