import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "surface"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from glyphgrid_renderer import (
    DEFAULT_SETTINGS,
    Cell,
    CellBuffer,
    Context,
    Metrics,
    RuntimeInfo,
    TextRenderer,
    merge_settings,
)
from glyphgrid_surface import CanvasSurface, TextSurface


METRICS = Metrics(cell_width=10.0, line_height=20.0, aspect=0.5, font_family="monospace", font_size=16.0)


def make_context(settings, cols, rows, frame=1):
    return Context(
        frame=frame,
        time=0.0,
        cols=cols,
        rows=rows,
        metrics=METRICS,
        width=cols * METRICS.cell_width,
        height=rows * METRICS.line_height,
        settings=settings,
        runtime=RuntimeInfo(cycle=0, fps=0.0),
    )


class TextRendererTests(unittest.TestCase):
    def setUp(self):
        self.surface = TextSurface()
        self.settings = merge_settings(DEFAULT_SETTINGS, {"element": self.surface})
        self.renderer = TextRenderer()

    def test_only_changed_row_is_rewritten(self):
        buf = CellBuffer(8, 10)
        buf.fill(".")
        ctx = make_context(self.settings, 8, 10)

        self.renderer.render(ctx, buf, self.settings)
        self.assertEqual(self.surface.line_count, 10)
        self.assertEqual(self.renderer.rows_updated, 10)

        self.surface.reset_counters()
        buf.set("#", 3, 2)
        self.renderer.render(make_context(self.settings, 8, 10, frame=2), buf, self.settings)

        self.assertEqual(self.surface.mutations, 1)
        self.assertEqual(self.renderer.rows_updated, 1)
        writes = self.surface.line_writes()
        self.assertEqual(writes[2], 1)
        self.assertEqual(sum(writes), 1)
        self.assertEqual(self.surface.plain_text().splitlines()[2], "...#....")

    def test_merged_text_bracketed_with_link_markup(self):
        buf = CellBuffer(5, 1)
        buf.fill(".")
        bounds = buf.merge_text("abc", 1, 0).wrap_info[0]
        buf.merge({"begin_markup": '<a href="#">'}, bounds.first_x, bounds.row)
        buf.merge({"end_markup": "</a>"}, bounds.last_x, bounds.row)

        self.renderer.render(make_context(self.settings, 5, 1), buf, self.settings)
        self.assertEqual(self.surface.lines[0], '.<a href="#">abc</a>.')
        self.assertEqual(self.surface.plain_text(), ".abc.")

    def test_unchanged_frame_writes_nothing(self):
        buf = CellBuffer(3, 2)
        ctx = make_context(self.settings, 3, 2)
        self.renderer.render(ctx, buf, self.settings)
        self.surface.reset_counters()
        self.renderer.render(ctx, buf, self.settings)
        self.assertEqual(self.surface.mutations, 0)

    def test_dimension_change_rebuilds_lines(self):
        buf = CellBuffer(3, 4)
        self.renderer.render(make_context(self.settings, 3, 4), buf, self.settings)
        buf.resize(5, 2)
        self.surface.reset_counters()
        self.renderer.render(make_context(self.settings, 5, 2), buf, self.settings)
        self.assertEqual(self.surface.line_count, 2)
        self.assertEqual(self.surface.line_writes(), [1, 1])

    def test_style_runs_and_escaping(self):
        buf = CellBuffer(4, 1)
        buf[0] = Cell(char="a", color="red")
        buf[1] = Cell(char="b", color="red")
        buf[2] = Cell(char="<")
        buf[3] = Cell(char="&", background_color="blue", font_weight="bold")
        self.renderer.render(make_context(self.settings, 4, 1), buf, self.settings)
        self.assertEqual(
            self.surface.lines[0],
            '<span style="color:red;">ab</span><span>&lt;</span>'
            '<span style="background:blue;font-weight:bold;">&amp;</span>',
        )
        self.assertEqual(self.surface.plain_text(), "ab<&")

    def test_default_style_is_not_repeated(self):
        settings = merge_settings(self.settings, {"color": "red"})
        buf = CellBuffer(2, 1)
        buf.fill(Cell(char="x", color="red"))
        self.renderer.render(make_context(settings, 2, 1), buf, settings)
        self.assertEqual(self.surface.lines[0], "<span>xx</span>")

    def test_raw_markup_brackets_glyph(self):
        buf = CellBuffer(3, 1)
        buf.merge_text("abc", 0, 0)
        buf.merge({"begin_markup": '<a href="#">'}, 0, 0)
        buf.merge({"end_markup": "</a>"}, 1, 0)
        self.renderer.render(make_context(self.settings, 3, 1), buf, self.settings)
        self.assertEqual(self.surface.lines[0], '<a href="#">ab</a>c')

    def test_wrong_surface_logs_error(self):
        settings = merge_settings(DEFAULT_SETTINGS, {"element": CanvasSurface()})
        with self.assertLogs("glyphgrid.renderer", level="ERROR"):
            self.renderer.render(make_context(settings, 1, 1), CellBuffer(1, 1), settings)


if __name__ == "__main__":
    unittest.main()
