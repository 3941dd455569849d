from models import Cell, Placement
from render import render_svg, render_text


def _strips():
    return [Placement(0, 4, 2, Cell(0, 0)), Placement(1, 4, 2, Cell(0, 2))]


def test_render_text_draws_boxes_with_labels():
    text = render_text(4, 4, _strips(), total_blocks=2, min_side=2)
    edge = "+" + "-" * 14 + "+"
    blank = "|" + " " * 14 + "|"
    label = "|     4x2      |"
    box = [edge, label, blank, edge]
    assert text == "\n".join(["Solution!"] + box + box) + "\n"


def test_render_text_headers():
    empty = render_text(2, 1, [])
    assert empty.splitlines()[0] == "Empty target"
    assert set("".join(empty.splitlines()[1:])) == {"."}

    partial = render_text(2, 1, [Placement(0, 1, 1, Cell(0, 0))], total_blocks=2)
    lines = partial.splitlines()
    assert lines[0] == "Partially filled target"
    # unit blocks triple the row height: 3 rows of 12 characters
    assert len(lines) == 4
    assert all(len(line) == 12 for line in lines[1:])
    assert lines[1].endswith("......")


def test_render_svg_has_one_rect_per_block():
    svg, legend = render_svg(4, 4, _strips(), scale=10)
    assert svg.startswith("<svg")
    assert svg.count("<rect") == 3  # frame plus two blocks
    assert 'width="42"' in svg
    # identical labels share a colour and a legend entry
    assert legend.count("<li>") == 1
