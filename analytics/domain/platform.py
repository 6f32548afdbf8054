from enum import Enum


class Platform(str, Enum):
    YOUTUBE = "youtube"
    INSTAGRAM = "instagram"
    TIKTOK = "tiktok"
    VIMEO = "vimeo"

    @classmethod
    def parse(cls, value: "str | Platform") -> "Platform":
        if isinstance(value, Platform):
            return value
        return cls(str(value).strip().lower())


# Ordered: the first marker found in the URL wins.
PLATFORM_MARKERS: tuple[tuple[str, Platform], ...] = (
    ("youtube.com", Platform.YOUTUBE),
    ("youtu.be", Platform.YOUTUBE),
    ("instagram.com", Platform.INSTAGRAM),
    ("tiktok.com", Platform.TIKTOK),
    ("vimeo.com", Platform.VIMEO),
)
