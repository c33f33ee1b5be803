import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "surface"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "toolkit"))

from PIL import Image

from glyphgrid_core import Runner
from glyphgrid_surface import ManualHost
from glyphgrid_toolkit import BLACK, WHITE, Canvas, Pixel
from glyphgrid_toolkit import image as image_loader
from glyphgrid_toolkit.canvas import to_gray


def half_white(width, height):
    # Left half white, right half black.
    img = Image.new("RGB", (width, height), "black")
    img.paste((255, 255, 255), (0, 0, width // 2, height))
    return img


def row_of(*colors):
    img = Image.new("RGB", (len(colors), 1))
    for x, color in enumerate(colors):
        img.putpixel((x, 0), color)
    return img


class CanvasPlacementTests(unittest.TestCase):
    def test_new_canvas_is_one_transparent_pixel(self):
        canvas = Canvas()
        self.assertEqual((canvas.width, canvas.height), (1, 1))
        self.assertEqual(canvas.get(0, 0), Pixel(0, 0, 0, 0.0, 0.0))
        self.assertIs(canvas.get(1, 0), BLACK)
        self.assertIs(canvas.get(0, -1), BLACK)

    def test_draw_image_takes_source_size(self):
        canvas = Canvas().draw_image(Image.new("RGB", (3, 2), "red"))
        self.assertEqual((canvas.width, canvas.height), (3, 2))
        self.assertEqual(len(canvas.pixels), 6)
        self.assertEqual(canvas.get(2, 1), Pixel(255, 0, 0, 1.0, to_gray(255, 0, 0)))

    def test_resize_clears_pixels(self):
        canvas = Canvas().draw_image(Image.new("RGB", (3, 2), "red")).resize(5, 4)
        self.assertEqual(canvas.pixels, [])
        self.assertIs(canvas.get(0, 0), BLACK)

    def test_copy_region(self):
        canvas = Canvas(2, 1)
        canvas.copy(row_of((255, 0, 0), (0, 0, 255)), 1, 0, 1, 1, 0, 0, 1, 1)
        self.assertEqual((canvas.get(0, 0).r, canvas.get(0, 0).b), (0, 255))
        self.assertEqual(canvas.get(1, 0).a, 0.0)

    def test_cover_crops_overflow_evenly(self):
        canvas = Canvas(2, 2).cover(half_white(4, 2))
        for y in (0, 1):
            self.assertGreater(canvas.get(0, y).v, 0.9)
            self.assertLess(canvas.get(1, y).v, 0.1)

    def test_fit_letterboxes_with_black(self):
        canvas = Canvas(4, 4).fit(Image.new("RGB", (4, 2), "white"))
        self.assertEqual(canvas.get(0, 0), BLACK)
        self.assertEqual(canvas.get(3, 3), BLACK)
        self.assertEqual(canvas.get(0, 1), WHITE)
        self.assertEqual(canvas.get(3, 2), WHITE)

    def test_fit_applies_cell_aspect(self):
        # A square image on half-height cells needs half as many rows.
        canvas = Canvas(4, 4).fit(Image.new("RGB", (2, 2), "white"), aspect=0.5)
        self.assertLess(canvas.get(0, 0).v, 0.01)
        self.assertGreater(canvas.get(0, 1).v, 0.99)
        self.assertGreater(canvas.get(3, 2).v, 0.99)
        self.assertLess(canvas.get(3, 3).v, 0.01)

    def test_center_places_source_at_own_size(self):
        canvas = Canvas(4, 4).center(Image.new("RGB", (2, 2), "white"))
        self.assertEqual(canvas.get(1, 1), WHITE)
        self.assertEqual(canvas.get(2, 2), WHITE)
        self.assertEqual(canvas.get(0, 0), BLACK)
        self.assertEqual(canvas.get(3, 1), BLACK)

    def test_center_scales_source(self):
        canvas = Canvas(4, 4).center(Image.new("RGB", (2, 2), "white"), scale_x=2)
        self.assertGreater(canvas.get(0, 1).v, 0.99)
        self.assertGreater(canvas.get(3, 2).v, 0.99)
        self.assertLess(canvas.get(0, 0).v, 0.01)

    def test_transparent_source_shows_black(self):
        source = Image.new("RGBA", (2, 2), (255, 255, 255, 0))
        canvas = Canvas(2, 2).cover(source)
        self.assertEqual(canvas.get(1, 1), BLACK)


class CanvasPixelTests(unittest.TestCase):
    def test_mirror_x_reverses_each_row_only_in_pixels(self):
        img = Image.new("RGB", (2, 2))
        img.putpixel((0, 0), (255, 0, 0))
        img.putpixel((1, 0), (0, 0, 255))
        img.putpixel((0, 1), (255, 255, 255))
        img.putpixel((1, 1), (0, 0, 0))
        canvas = Canvas().draw_image(img).mirror_x()

        self.assertEqual(canvas.get(0, 0).b, 255)
        self.assertEqual(canvas.get(1, 0).r, 255)
        self.assertEqual(canvas.get(0, 1).v, 0.0)
        self.assertEqual(canvas.get(1, 1).v, 1.0)
        self.assertEqual(canvas.image.getpixel((0, 0)), (255, 0, 0, 255))

    def test_normalize_stretches_gray_levels(self):
        canvas = Canvas().draw_image(row_of((50, 50, 50), (100, 100, 100), (150, 150, 150))).normalize()
        self.assertAlmostEqual(canvas.get(0, 0).v, 0.0)
        self.assertAlmostEqual(canvas.get(1, 0).v, 0.5)
        self.assertAlmostEqual(canvas.get(2, 0).v, 1.0)
        self.assertEqual(canvas.get(1, 0).r, 100)

    def test_normalize_uniform_image_unchanged(self):
        canvas = Canvas().draw_image(Image.new("RGB", (2, 1), (80, 80, 80))).normalize()
        self.assertAlmostEqual(canvas.get(0, 0).v, 80 / 255)

    def test_quantize_snaps_to_palette_and_keeps_gray(self):
        red = Pixel(255, 0, 0)
        canvas = Canvas().draw_image(row_of((200, 30, 30), (240, 240, 240)))
        canvas.quantize([BLACK, WHITE, red])

        first, second = canvas.get(0, 0), canvas.get(1, 0)
        self.assertEqual((first.r, first.g, first.b), (255, 0, 0))
        self.assertEqual(first.v, to_gray(200, 30, 30))
        self.assertEqual((second.r, second.g, second.b), (255, 255, 255))
        self.assertAlmostEqual(second.v, 240 / 255)

    def test_sample_interpolates_between_pixels(self):
        canvas = Canvas().draw_image(row_of((0, 0, 0), (255, 255, 255)))
        self.assertAlmostEqual(canvas.sample(0.5, 0.5, gray=True), 0.5)
        self.assertAlmostEqual(canvas.sample(0.25, 0.5, gray=True), 0.0)
        self.assertEqual(canvas.sample(0.75, 0.5), WHITE)

    def test_write_to_copies_into_target(self):
        canvas = Canvas().draw_image(Image.new("RGB", (2, 1), "white"))
        target = [None] * 4
        canvas.write_to(target)
        self.assertEqual(target, [WHITE, WHITE, None, None])

        grown = []
        canvas.write_to(grown)
        self.assertEqual(grown, [WHITE, WHITE])


class ImageLoaderTests(unittest.TestCase):
    def test_load_fills_canvas_from_file(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "red.png"
            Image.new("RGB", (3, 2), "red").save(path)
            canvas = image_loader.load(path)
        self.assertEqual((canvas.width, canvas.height), (3, 2))
        self.assertEqual(canvas.get(0, 0).r, 255)

    def test_missing_file_gives_blank_canvas(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertLogs("glyphgrid", level="WARNING"):
                canvas = image_loader.load(Path(td) / "missing.png")
        self.assertEqual((canvas.width, canvas.height), (1, 1))
        self.assertEqual(len(canvas.pixels), 1)


class CanvasProgramTests(unittest.TestCase):
    def test_image_sampled_onto_grid(self):
        source = half_white(4, 1)
        canvas = Canvas()

        def pre(context, cursor, buffer, user_vars):
            canvas.resize(context.cols, context.rows).cover(source)

        def main(coord, context, cursor, buffer, user_vars):
            return "#" if canvas.get(coord.x, coord.y).v > 0.5 else "."

        host = ManualHost()
        runner = Runner({"pre": pre, "main": main}, {"cols": 4, "rows": 1, "once": True}, host=host)
        runner.start()
        host.advance(200, 40)

        self.assertEqual(runner.buffer.rows_as_text(), ["##.."])
        self.assertEqual(runner.surface.plain_text(), "##..")


if __name__ == "__main__":
    unittest.main()
