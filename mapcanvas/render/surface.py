"""
Drawing surfaces

The renderer only talks to the DrawingSurface protocol. PillowSurface
paints into an in-memory RGB image that can be saved as PNG.
"""

from typing import List, Optional, Protocol, Sequence, Tuple

from PIL import Image, ImageChops, ImageColor, ImageDraw, ImageFont


PixelPath = Sequence[Tuple[float, float]]


class DrawingSurface(Protocol):
    """Canvas-like drawing capability"""

    width: int
    height: int

    def fill_background(self, color: str) -> None: ...

    def draw_polygons(
        self,
        rings: List[PixelPath],
        fill: Optional[str],
        stroke: Optional[str],
        width: float,
        even_odd: bool = True,
    ) -> None: ...

    def draw_line(self, points: PixelPath, stroke: str, width: float) -> None: ...

    def draw_text(self, x: float, y: float, text: str, fill: str) -> None: ...

    def text_size(self, text: str) -> Tuple[float, float]: ...


class PillowSurface:
    """DrawingSurface backed by a Pillow image"""

    def __init__(self, width: int, height: int, background: str = "#ffffff"):
        self.width = width
        self.height = height
        self.image = Image.new("RGB", (width, height), ImageColor.getrgb(background))
        self._draw = ImageDraw.Draw(self.image)
        self._font = ImageFont.load_default()

    def fill_background(self, color: str) -> None:
        self._draw.rectangle([0, 0, self.width, self.height], fill=ImageColor.getrgb(color))

    def draw_polygons(
        self,
        rings: List[PixelPath],
        fill: Optional[str],
        stroke: Optional[str],
        width: float,
        even_odd: bool = True,
    ) -> None:
        """
        Fill and outline a set of rings as one shape

        With even_odd, every ring toggles coverage, so holes drawn inside an
        outer ring are left unpainted. Each ring is rasterized to its own
        1-bit mask and the masks are XOR-combined.
        """
        rings = [[(float(x), float(y)) for x, y in ring] for ring in rings if len(ring) >= 3]
        if not rings:
            return

        if fill:
            color = ImageColor.getrgb(fill)
            if even_odd:
                mask = Image.new("1", self.image.size, 0)
                for ring in rings:
                    ring_mask = Image.new("1", self.image.size, 0)
                    ImageDraw.Draw(ring_mask).polygon(ring, fill=1)
                    mask = ImageChops.logical_xor(mask, ring_mask)
                self.image.paste(color, (0, 0, self.width, self.height), mask)
            else:
                for ring in rings:
                    self._draw.polygon(ring, fill=color)

        if stroke:
            for ring in rings:
                self._draw.line(ring + [ring[0]], fill=ImageColor.getrgb(stroke), width=_line_width(width))

    def draw_line(self, points: PixelPath, stroke: str, width: float) -> None:
        if len(points) < 2:
            return
        self._draw.line(
            [(float(x), float(y)) for x, y in points],
            fill=ImageColor.getrgb(stroke),
            width=_line_width(width)
        )

    def draw_text(self, x: float, y: float, text: str, fill: str) -> None:
        """Draw text centered on (x, y)"""
        text_width, text_height = self.text_size(text)
        self._draw.text(
            (x - text_width / 2, y - text_height / 2),
            text,
            fill=ImageColor.getrgb(fill),
            font=self._font
        )

    def text_size(self, text: str) -> Tuple[float, float]:
        left, top, right, bottom = self._draw.textbbox((0, 0), text, font=self._font)
        return right - left, bottom - top

    def save(self, path: str) -> None:
        self.image.save(path)


def _line_width(width: float) -> int:
    return max(1, int(round(width)))
