"""A simple 8-bit indexed-colour bitmap with the drawing primitives the emulator needs."""

from __future__ import annotations


class Bitmap:
    """A width x height grid of palette indices stored row by row."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"bitmap size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} bitmap")
        return y * self.width + x

    def __getitem__(self, position: tuple[int, int]) -> int:
        x, y = position
        return self.pixels[self._index(x, y)]

    def __setitem__(self, position: tuple[int, int], color: int) -> None:
        x, y = position
        self.pixels[self._index(x, y)] = color & 0xFF

    def row(self, y: int) -> memoryview:
        """Return a writable view of one row of pixels."""
        if not 0 <= y < self.height:
            raise IndexError(f"row {y} outside bitmap of height {self.height}")
        start = y * self.width
        return memoryview(self.pixels)[start:start + self.width]

    def _plot(self, index: int, color: int) -> None:
        # Drawing works on the linear buffer, so x past the right edge wraps.
        if not 0 <= index < len(self.pixels):
            raise IndexError(f"pixel offset {index} outside bitmap")
        self.pixels[index] = color & 0xFF

    def clear(self) -> None:
        """Set every pixel to colour 0."""
        self.pixels[:] = bytes(len(self.pixels))

    def rect(self, x: int, y: int, x2: int, y2: int, color: int) -> None:
        """Draw the outline of a rectangle spanning (x, y) to (x2, y2)."""
        dx = abs(x2 - x)
        dy = abs(y2 - y)
        width = self.width
        for i in range(x, x + dx):
            self._plot(i + y * width, color)
            self._plot(i + (y + dy) * width, color)
        for j in range(y, y + dy):
            self._plot(x + j * width, color)
            self._plot(x + dx + j * width, color)

    def rectfill(self, x: int, y: int, x2: int, y2: int, color: int) -> None:
        """Fill the rectangle whose corner is (x, y) and whose size is |x2-x| by |y2-y|."""
        dx = abs(x2 - x)
        dy = abs(y2 - y)
        width = self.width
        for i in range(x, x + dx):
            for j in range(y, y + dy):
                self._plot(i + j * width, color)

    def hline(self, x: int, y: int, length: int, color: int) -> None:
        """Draw ``length`` pixels to the right starting at (x, y)."""
        base = y * self.width
        for i in range(x, x + length):
            self._plot(i + base, color)

    def vline(self, x: int, y: int, length: int, color: int) -> None:
        """Draw ``length`` pixels downwards starting at (x, y)."""
        for j in range(y, y + length):
            self._plot(x + j * self.width, color)

    def line(self, x1: int, y1: int, x2: int, y2: int, color: int) -> None:
        """Draw a line from (x1, y1) to (x2, y2) with Bresenham's algorithm.

        Purely horizontal and vertical lines stop one pixel short of the end point.
        """
        width = self.width
        dx = x2 - x1
        dy = y2 - y1
        sx = 1 if dx >= 0 else -1
        sy = 1 if dy >= 0 else -1

        if dx == 0:
            if dy > 0:
                self.vline(x1, y1, dy, color)
            elif dy < 0:
                self.vline(x1, y2, -dy, color)
            else:
                self._plot(x1 + y1 * width, color)
            return
        if dy == 0:
            if dx > 0:
                self.hline(x1, y1, dx, color)
            else:
                self.hline(x2, y1, -dx, color)
            return

        major = sx * dx + 1
        minor = sy * dy + 1
        step_major = sx
        step_minor = width * sy
        if major < minor:
            major, minor = minor, major
            step_major, step_minor = step_minor, step_major

        error = 0
        index = x1 + y1 * width
        for _ in range(major):
            self._plot(index, color)
            error += minor
            if error >= major:
                error -= major
                index += step_minor
            index += step_major