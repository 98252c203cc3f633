"""TIM2 image reading, LZSS archive unpacking, tile sheets and tilemaps."""

__version__ = "0.1.0"