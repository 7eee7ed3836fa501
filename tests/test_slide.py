# Tests for slides and the slide sequence
"""
Test slide defaults, partial edits and reordering.
"""

import pytest

from gifstag import SlideSequence, SlideSpec, TextStyle, TransitionKind


@pytest.fixture
def sequence(make_slide) -> SlideSequence:
    """A sequence of four slides captioned a, b, c and d."""
    return SlideSequence([make_slide(caption=name) for name in "abcd"])


def captions(sequence: SlideSequence) -> list[str]:
    return [slide.caption for slide in sequence]


class TestSlideSpec:
    """Tests for a single slide."""

    def test_defaults(self, red_image):
        slide = SlideSpec(image=red_image)
        assert slide.effect == TransitionKind.NORMAL
        assert slide.duration_seconds == 3
        assert slide.caption == ""
        assert slide.caption_style == TextStyle()
        assert len(slide.id) == 32

    def test_ids_are_unique(self, red_image):
        assert SlideSpec(image=red_image).id != SlideSpec(image=red_image).id

    def test_effect_from_string(self, red_image):
        assert SlideSpec(image=red_image, effect="fade-out").effect == TransitionKind.FADE_OUT

    def test_style_from_mapping(self, red_image):
        slide = SlideSpec(image=red_image, caption_style={"fontSize": 12})
        assert slide.caption_style.font_size == 12
        assert slide.caption_style.fill_color == "#ffffff"

    @pytest.mark.parametrize("duration", [0, 0.5, -1, 11, "3", True])
    def test_invalid_duration(self, red_image, duration):
        with pytest.raises(ValueError):
            SlideSpec(image=red_image, duration_seconds=duration)

    @pytest.mark.parametrize("duration", [1, 10, 2.5])
    def test_valid_duration(self, red_image, duration):
        slide = SlideSpec(image=red_image, duration_seconds=duration)
        assert slide.duration_seconds == duration

    def test_duration_limit(self, make_slide):
        """Slides are shown for at most ten seconds."""
        slide = make_slide()
        with pytest.raises(ValueError):
            slide.update(duration_seconds=500)
        assert slide.duration_seconds == 3

    def test_invalid_effect(self, red_image):
        with pytest.raises(ValueError):
            SlideSpec(image=red_image, effect="zoom")

    def test_partial_update(self, make_slide):
        slide = make_slide(caption="Hello", duration_seconds=5)
        slide.update(effect="fade-in")
        assert slide.effect == TransitionKind.FADE_IN
        assert slide.caption == "Hello"
        assert slide.duration_seconds == 5

    def test_style_update_merges(self, make_slide):
        slide = make_slide(caption_style=TextStyle(fill_color="#ff0000"))
        slide.update(caption_style={"fontSize": 50})
        assert slide.caption_style.font_size == 50
        assert slide.caption_style.fill_color == "#ff0000"

    def test_failed_update_changes_nothing(self, make_slide):
        """A rejected update does not apply any of its fields."""
        slide = make_slide(caption="Hello")
        with pytest.raises(ValueError):
            slide.update(caption="Changed", duration_seconds=0)
        assert slide.caption == "Hello"
        assert slide.duration_seconds == 3

    def test_unknown_field(self, make_slide):
        with pytest.raises(ValueError):
            make_slide().update(image=None)

    def test_api_dict(self, make_slide):
        data = make_slide(caption="Hi", name="red.png").to_api_dict()
        assert data["caption"] == "Hi"
        assert data["name"] == "red.png"
        assert data["effect"] == "normal"
        assert data["width"] == 40
        assert data["caption_style"]["fontSize"] == 30


class TestSlideSequence:
    """Tests for SlideSequence."""

    def test_move_forward(self, sequence):
        """Moving keeps the relative order of all other slides."""
        sequence.move(0, 2)
        assert captions(sequence) == ["b", "c", "a", "d"]

    def test_move_backward(self, sequence):
        sequence.move(3, 0)
        assert captions(sequence) == ["d", "a", "b", "c"]

    def test_move_same_index(self, sequence):
        sequence.move(1, 1)
        assert captions(sequence) == ["a", "b", "c", "d"]

    @pytest.mark.parametrize("from_index,to_index", [(-1, 0), (0, 4), (7, 1)])
    def test_move_out_of_range(self, sequence, from_index, to_index):
        with pytest.raises(IndexError):
            sequence.move(from_index, to_index)
        assert captions(sequence) == ["a", "b", "c", "d"]

    def test_edit(self, sequence):
        slide = sequence.edit(2, caption="C")
        assert slide is sequence[2]
        assert captions(sequence) == ["a", "b", "C", "d"]

    def test_edit_out_of_range(self, sequence):
        with pytest.raises(IndexError):
            sequence.edit(4, caption="x")

    def test_remove(self, sequence):
        removed = sequence.remove(1)
        assert removed.caption == "b"
        assert captions(sequence) == ["a", "c", "d"]

    def test_clear(self, sequence):
        sequence.clear()
        assert len(sequence) == 0

    def test_next_index_is_circular(self, sequence):
        assert [sequence.next_index(i) for i in range(4)] == [1, 2, 3, 0]

    def test_single_slide_transitions_into_itself(self, make_slide):
        assert SlideSequence([make_slide()]).next_index(0) == 0

    def test_index_of(self, sequence):
        assert sequence.index_of(sequence[3].id) == 3
        with pytest.raises(KeyError):
            sequence.index_of("missing")

    def test_snapshot_is_independent(self, sequence):
        snapshot = sequence.snapshot()
        sequence.edit(0, caption="changed")
        sequence.move(0, 3)
        assert [slide.caption for slide in snapshot] == ["a", "b", "c", "d"]
        assert snapshot[0].image is sequence[3].image

    def test_total_duration(self, sequence):
        sequence.edit(0, duration_seconds=10)
        assert sequence.total_duration_seconds == 19
