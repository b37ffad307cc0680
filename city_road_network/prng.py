"""
Deterministic 64-bit linear congruential generator used by the city generator.

Layouts are reproducibility fixtures keyed by seed, so every draw here must
stay bit-for-bit stable. ``range_int`` is modulo-biased and must stay that way.
"""

MASK_64 = (1 << 64) - 1
MASK_32 = (1 << 32) - 1

LCG_MULTIPLIER = 6364136223846793005
LCG_INCREMENT = 1442695040888963407


class CityRandom:
    """LCG with a folded 32-bit output."""

    def __init__(self, seed: int):
        """
        Initialize generator state.

        Args:
            seed: Any integer; reduced mod 2**64, and 0 is remapped to 1
        """
        seed &= MASK_64
        self.state = seed if seed != 0 else 1

    def next_u32(self) -> int:
        """Advance the state and return high32(state) xor low32(state)."""
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) & MASK_64
        return (self.state >> 32) ^ (self.state & MASK_32)

    def range_int(self, low: int, high: int) -> int:
        """
        Draw an integer in [low, high] inclusive.

        Args:
            low: Inclusive minimum
            high: Inclusive maximum (must be >= low)

        Returns:
            low + next_u32() % (high - low + 1)
        """
        span = high - low + 1
        if span <= 0:
            raise ValueError(f"empty range [{low}, {high}]")
        return low + self.next_u32() % span

    def coin(self) -> bool:
        """True when the low bit of the next draw is set."""
        return (self.next_u32() & 1) != 0
