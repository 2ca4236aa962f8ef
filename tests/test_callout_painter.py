from __future__ import annotations

import unittest

import torch

from leafprint_core.render.frame import new_frame
from leafprint_ui.callout import CalloutLayout, CalloutStyle, Padding, paint
from leafprint_ui.callout.painter import tail_points


STYLE = CalloutStyle(padding=Padding(left=10, right=10, top=5, bottom=5), line_height=20, tail_size=10)


def _box(left: float = 40.0, top: float = 30.0, lines: tuple[str, ...] = ("",)) -> CalloutLayout:
    width, height = 100.0, 50.0
    return CalloutLayout(
        box_left=left,
        box_top=top,
        box_width=width,
        box_height=height,
        tail_apex_x=left + width / 2.0,
        tail_apex_y=top + height + STYLE.tail_size,
        lines=lines,
        padding=STYLE.padding,
        line_height=STYLE.line_height,
    )


class CalloutPainterTests(unittest.TestCase):
    def test_box_interior_is_filled_with_background(self) -> None:
        frame = new_frame(200, 120)
        paint(frame, _box(), STYLE)
        self.assertEqual(frame[55, 90].tolist(), [255, 255, 255, 255])

    def test_outline_is_stroked_over_the_fill(self) -> None:
        frame = new_frame(200, 120)
        paint(frame, _box(), STYLE)
        # 20% black over white.
        self.assertEqual(frame[30, 90].tolist(), [204, 204, 204, 255])

    def test_tail_is_filled_below_the_box(self) -> None:
        frame = new_frame(200, 120)
        paint(frame, _box(), STYLE)
        self.assertEqual(frame[85, 90].tolist(), [255, 255, 255, 255])
        # Beside the tail only the shadow reaches; it is translucent.
        self.assertLess(int(frame[85, 70, 3]), 255)

    def test_shadow_falls_outside_the_box(self) -> None:
        frame = new_frame(200, 120)
        paint(frame, _box(), STYLE)
        below_box_edge = frame[82, 50]
        self.assertGreater(int(below_box_edge[3]), 0)
        self.assertEqual(below_box_edge[:3].tolist(), [0, 0, 0])
        self.assertEqual(frame[5, 5].tolist(), [0, 0, 0, 0])

    def test_tail_points_form_kite_ending_at_apex(self) -> None:
        points = tail_points(_box(), 10.0)
        self.assertEqual(points, [(90.0, 70.0), (100.0, 80.0), (90.0, 90.0), (80.0, 80.0)])

    def test_text_is_drawn_above_the_first_baseline(self) -> None:
        frame = new_frame(200, 120)
        paint(frame, _box(lines=("Hello",)), STYLE)
        slot = frame[20:36, 50:140, :3].to(torch.int32)
        self.assertLess(int(slot.min()), 200)
        blank = new_frame(200, 120)
        paint(blank, _box(), STYLE)
        self.assertFalse(torch.equal(frame, blank))

    def test_first_line_sits_on_top_padding_baseline(self) -> None:
        style = CalloutStyle(
            padding=Padding(left=10, right=10, top=30, bottom=10),
            line_height=20,
            tail_size=0,
            border=(0, 0, 0, 0),
            shadow=(0, 0, 0, 0),
        )
        box = CalloutLayout(
            box_left=0.0,
            box_top=0.0,
            box_width=120.0,
            box_height=60.0,
            tail_apex_x=60.0,
            tail_apex_y=60.0,
            lines=("HHHH",),
            padding=style.padding,
            line_height=style.line_height,
        )
        frame = new_frame(120, 60)

        paint(frame, box, style)

        ink_rows = torch.nonzero((frame[:, :, 0] < 128) & (frame[:, :, 3] == 255))[:, 0]
        self.assertGreater(len(ink_rows), 0)
        # Capitals rest on the baseline and rise from it.
        self.assertLessEqual(int(ink_rows.max()), 30)
        self.assertGreaterEqual(int(ink_rows.max()), 26)
        self.assertGreaterEqual(int(ink_rows.min()), 30 - 20)

    def test_box_fully_outside_raster_is_clipped_silently(self) -> None:
        frame = new_frame(50, 50)
        paint(frame, _box(left=-1000.0, top=-1000.0, lines=("off screen",)), STYLE)
        self.assertEqual(int(torch.count_nonzero(frame)), 0)

    def test_partially_visible_box_is_painted(self) -> None:
        frame = new_frame(60, 60)
        paint(frame, _box(left=-50.0, top=-20.0), STYLE)
        self.assertEqual(frame[10, 10].tolist(), [255, 255, 255, 255])


if __name__ == "__main__":
    unittest.main()
