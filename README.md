# tm2kit

Tools for TIM2 (`.tm2`) images and the `PAC0.BIN`/`PAC1.BIN` data archives that
carry them.

- `tm2kit.image` / `tm2kit.frame` / `tm2kit.pixel`: a TIM2 reader for paletted
  (4 and 8 bit) and true-colour (16, 24 and 32 bit) frames, with the 16×8 tile
  swizzle and 256-colour palette interleaving undone, and pixels returned as RGBA bytes.
- `tm2kit.lzss`: an LZSS decoder (4096-byte window, 18-byte matches).
- `tm2kit.metadata`, `tm2kit.extract`, `tm2kit.checks`, `tm2kit.decode`,
  `tm2kit.png`: reading the archive's directory table, copying files out of the
  archive, hashing them, decompressing and splitting packed files, and writing PNGs.
- `tm2kit.tilesets`: gathers every distinct 32×32 tile of a tile set into one PNG sheet.
- `tm2kit.tilemap`: reads `.cn2` maps and `_hit.cns` collision data into cells,
  triggers, vertex and index lists and an RGBA texture atlas.

## Install

```
pip install tm2kit
```

Tests need the `test` extra: `pip install tm2kit[test]`.

## Reading TIM2 images

```python
from tm2kit.image import load
from tm2kit.pixel import Pixel

image = load("picture.tm2")
for frame in image.frames:
    print(frame.header.width, frame.header.height, frame.header.pixel_format())

# RGBA bytes; pixels equal to pure green become fully transparent
raw = image.get_frame(0).to_raw(Pixel(0, 255, 0, 255))
```

`tm2kit.image.from_buffer(data)` reads from bytes already in memory.
`Frame.pixels()` gives the colours as `Pixel` objects, resolved through the first
palette for indexed frames. Malformed images raise subclasses of
`tm2kit.errors.Tim2Error` (itself a `ValueError`); a truncated file raises `EOFError`.

## Commands

Convert every `.tm2` file in a directory (default `../assets`) to PNG. An image
with several frames is written as `name_0.png`, `name_1.png`, …; frames with
mipmaps are reported and skipped, and images that fail to read are reported:

```
tm2kit-png [directory]
```

Unpack the archives held in a directory (default `../iso`) that contains
`PAC0.BIN` and `PAC1.BIN`:

```
tm2kit-unpack [base_dir]
```

It extracts `PAC1.BIN` into `base_dir/extracted` using the directory table in
`PAC0.BIN`, computes the SHA-256 of every extracted file, decodes everything into
`base_dir/decoded` (compressed TIM2 images are decompressed, `.lzs` files are
decompressed and split into the files they pack), and writes a PNG of the first
frame of every decoded `.tm2` into `base_dir/images`. Images that cannot be
converted are copied to `base_dir/images/errors`. It exits with status 1 on an
unreadable archive.

## LZSS

```python
from tm2kit.lzss import decode

plain = decode(compressed)
```

A back reference cut off by the end of the input raises
`tm2kit.errors.InvalidDecodeLengthError`.

## Archive table

```python
from tm2kit.metadata import DirectoryNode, Metadata

metadata = Metadata.load("PAC0.BIN")
for node in metadata.root():
    kind = "dir " if isinstance(node, DirectoryNode) else "file"
    print(kind, node.name)
```

`tm2kit.checks.hash_files(nodes, path)` returns a dict of path to hex digest;
the digests are computed, not compared with anything.

## Tile sheets

```python
from tm2kit.tilesets import process

process("work", "out", "castle1_b")   # writes out/tilemap_castle1_b.png
```

It looks in `work/output/data` for directories named `CN_*` (leaving out
`*_char` and names containing `_d_`) and reads every `*_castle1_b.tm2` there
that does not start with `dtown_`.

## Tilemaps

```python
from tm2kit.tilemap import Tilemap, load

tilemap = Tilemap.from_buffers(map_bytes, collision_bytes)
print(tilemap.px_width(), tilemap.px_height())
print(tilemap.format_collision(0))
print(tilemap.format_triggers(1))

tilemap.update(elapsed_seconds)   # moves animated cells to the current frame
lower, upper = tilemap.layers
print(len(lower.static_vertices), len(lower.animated_vertices))
```

`load(directory, map_name, set_name)` reads `map_name.cn2`, `map_name_hit.cns`
and the `set_name_base.tm2`, `set_name_var.tm2` and `set_name_anm.tm2` textures,
composing the textures into a 1024×1024 RGBA atlas stored in `Tilemap.atlas`.

## What it does not do

- It does not open disc images: `PAC0.BIN` and `PAC1.BIN` must already be in a
  directory on disk.
- Tilemaps are turned into vertex, index and atlas data only; nothing is drawn,
  and there is no window, renderer or sound playback.