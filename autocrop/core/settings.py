"""
Ray casting settings.

A Settings value is frozen and passed explicitly into every detection run.
"""

from dataclasses import dataclass, fields

from autocrop.core.color import clamp, clamp8

POLARITIES = ("auto", "dark", "light")

# camelCase names accepted by from_config, as used in JSON payloads.
CONFIG_ALIASES = {
    "rayAmount": "ray_amount",
    "rayAmountMin": "ray_amount_min",
    "rayMargin": "ray_margin",
    "rayMaxDepth": "ray_max_depth",
    "rayThreshold": "ray_threshold",
    "rayBlack": "ray_black",
    "rayWhite": "ray_white",
    "rayGamma": "ray_gamma",
    "rayPolarity": "ray_polarity",
}


@dataclass(frozen=True)
class Settings:
    # Number of rays cast per side, as a fraction of the scan length.
    ray_amount: float = 0.025
    # Minimum number of rays per side.
    ray_amount_min: int = 15
    # Inset from the ends of a side where rays start, as a fraction of the scan length.
    ray_margin: float = 0.1
    # How deep rays search, as a fraction of the canvas (0.5 is the center).
    ray_max_depth: float = 0.4
    # Normalized brightness above which a pixel counts as a hit.
    ray_threshold: float = 15
    # Normalization points; the background brightness is added to the black point.
    ray_black: float = 6
    ray_white: float = 60
    ray_gamma: float = 1
    # "dark" finds content brighter than the border, "light" the reverse.
    ray_polarity: str = "auto"

    def __post_init__(self):
        if float(self.ray_gamma) <= 0:
            raise ValueError(f"ray_gamma must be positive, got {self.ray_gamma}")
        black = clamp8(float(self.ray_black))
        clamped = {
            "ray_amount": max(0.0, float(self.ray_amount)),
            "ray_amount_min": max(1, int(self.ray_amount_min)),
            "ray_margin": clamp(float(self.ray_margin), 0.0, 0.5),
            "ray_max_depth": clamp(float(self.ray_max_depth), 0.0, 0.5),
            "ray_threshold": clamp8(float(self.ray_threshold)),
            "ray_black": black,
            "ray_white": clamp(clamp8(float(self.ray_white)), black, 255.0),
            "ray_gamma": float(self.ray_gamma),
        }
        for name, value in clamped.items():
            object.__setattr__(self, name, value)
        if self.ray_polarity not in POLARITIES:
            raise ValueError(f"ray_polarity must be one of {POLARITIES}, got {self.ray_polarity!r}")

    @classmethod
    def from_config(cls, config=None):
        """
        Build settings from a config dict.

        Keys may be snake_case or camelCase; unknown keys are ignored and
        missing keys keep their defaults.
        """
        config = config or {}
        names = {f.name for f in fields(cls)}
        values = {}
        for key, value in config.items():
            name = CONFIG_ALIASES.get(key, key)
            if name in names and value is not None:
                values[name] = value
        return cls(**values)


DEFAULT_SETTINGS = Settings()
