import pytest

from videopac.bitmap import Bitmap


def lit(bitmap):
    return {
        (x, y)
        for y in range(bitmap.height)
        for x in range(bitmap.width)
        if bitmap[x, y]
    }


def test_new_bitmap_is_blank():
    bitmap = Bitmap(8, 6)
    assert len(bitmap.pixels) == 48
    assert lit(bitmap) == set()


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        Bitmap(0, 5)


def test_setitem_getitem_round_trip():
    bitmap = Bitmap(4, 4)
    bitmap[2, 3] = 9
    assert bitmap[2, 3] == 9
    assert lit(bitmap) == {(2, 3)}


def test_getitem_out_of_range():
    bitmap = Bitmap(4, 4)
    bitmap[3, 3] = 5
    assert bitmap[3, 3] == 5
    with pytest.raises(IndexError):
        bitmap[4, 0]


def test_clear():
    bitmap = Bitmap(5, 5)
    bitmap.rectfill(0, 0, 5, 5, 3)
    bitmap.clear()
    assert lit(bitmap) == set()


def test_rect_outline_leaves_far_corner():
    bitmap = Bitmap(8, 8)
    bitmap.rect(1, 1, 4, 3, 9)
    expected = {
        (1, 1), (2, 1), (3, 1),
        (1, 3), (2, 3), (3, 3),
        (1, 2),
        (4, 1), (4, 2),
    }
    assert lit(bitmap) == expected
    assert all(bitmap[x, y] == 9 for x, y in expected)


def test_rectfill_covers_width_by_height():
    bitmap = Bitmap(10, 10)
    bitmap.rectfill(2, 3, 6, 8, 1)
    pixels = lit(bitmap)
    assert len(pixels) == 4 * 5
    assert min(x for x, _ in pixels) == 2
    assert max(x for x, _ in pixels) == 5
    assert max(y for _, y in pixels) == 7


def test_rectfill_order_of_corners_does_not_matter_for_size():
    bitmap = Bitmap(10, 10)
    bitmap.rectfill(1, 1, 4, 4, 1)
    other = Bitmap(10, 10)
    other.rectfill(1, 1, -2, -2, 1)
    assert lit(bitmap) == lit(other)


def test_hline_and_vline():
    bitmap = Bitmap(6, 6)
    bitmap.hline(1, 2, 3, 5)
    assert lit(bitmap) == {(1, 2), (2, 2), (3, 2)}
    bitmap.clear()
    bitmap.vline(4, 0, 2, 5)
    assert lit(bitmap) == {(4, 0), (4, 1)}


def test_horizontal_line_stops_before_end():
    bitmap = Bitmap(8, 4)
    bitmap.line(5, 1, 1, 1, 2)
    assert lit(bitmap) == {(1, 1), (2, 1), (3, 1), (4, 1)}


def test_single_point_line():
    bitmap = Bitmap(4, 4)
    bitmap.line(2, 2, 2, 2, 7)
    assert lit(bitmap) == {(2, 2)}


def test_diagonal_line():
    bitmap = Bitmap(5, 5)
    bitmap.line(0, 0, 3, 3, 1)
    assert lit(bitmap) == {(0, 0), (1, 1), (2, 2), (3, 3)}


def test_drawing_off_buffer_raises():
    bitmap = Bitmap(4, 4)
    with pytest.raises(IndexError):
        bitmap.hline(0, 4, 2, 1)


def test_row_view_is_writable():
    bitmap = Bitmap(3, 2)
    bitmap.row(1)[0] = 4
    assert bitmap[0, 1] == 4