"""Exceptions raised while reading TIM2 images, archives and tilemaps."""

from __future__ import annotations


class Tim2Error(ValueError):
    """A TIM2 image could not be read."""


class InvalidIdentifierError(Tim2Error):
    def __init__(self, identifier: int) -> None:
        super().__init__(f"invalid TIM2 identifier: {identifier:#010x}")
        self.identifier = identifier


class InvalidAlignmentError(Tim2Error):
    def __init__(self, align: int) -> None:
        super().__init__(f"invalid TIM2 alignment: {align}")
        self.align = align


class InvalidBppError(Tim2Error):
    def __init__(self, bpp: int) -> None:
        super().__init__(f"invalid bits per pixel: {bpp}")
        self.bpp = bpp


class InvalidBppFormatError(Tim2Error):
    def __init__(self, value: int) -> None:
        super().__init__(f"invalid pixel format code: {value}")
        self.value = value


class InvalidPixelSizeError(Tim2Error):
    def __init__(self, size: int) -> None:
        super().__init__(f"invalid pixel size: {size} bytes")
        self.size = size


class TrueColorAndPaletteError(Tim2Error):
    def __init__(self) -> None:
        super().__init__("true-color image also carries a palette")


class UnpackError(ValueError):
    """An archive could not be unpacked."""


class NoBasePathError(UnpackError):
    def __init__(self) -> None:
        super().__init__("path has no file name to strip")


class InvalidNodeKindError(UnpackError):
    def __init__(self) -> None:
        super().__init__("metadata root is not a directory")


class InvalidFileNumError(UnpackError):
    def __init__(self, file_num: int, index: int) -> None:
        super().__init__(f"invalid file num: {file_num} should be: {index}")
        self.file_num = file_num
        self.index = index


class InvalidDecodeLengthError(UnpackError):
    def __init__(self, offset: int, length: int) -> None:
        super().__init__(f"mismatch decoding: {offset} / {length}")
        self.offset = offset
        self.length = length


class InvalidCellKindError(ValueError):
    def __init__(self, index: int) -> None:
        super().__init__(f"invalid cell kind index: {index}")
        self.index = index