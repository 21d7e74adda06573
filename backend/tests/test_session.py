"""Tests for the CompositionSession orchestrator."""

import math
import os
import tempfile
import time

import pytest
from PIL import Image

from backend.app.analysis import FaceDetector
from backend.app.config import Config
from backend.app.constants import OUTPUT_FORMATS
from backend.app.exceptions import CompositionError, ValidationError
from backend.app.models import Adjustment, FocalPoint, Photo
from backend.app.session import CompositionSession

from conftest import RecordingFaceDetector, checkerboard, gradient, png_bytes


class ExplodingFaceDetector(FaceDetector):
    def detect(self, photo: Photo) -> FocalPoint:
        raise RuntimeError("detector crashed")


class SlowFaceDetector(FaceDetector):
    def detect(self, photo: Photo) -> FocalPoint:
        time.sleep(0.5)
        return FocalPoint(0.1, 0.1, True)


def _png(width: int = 120, height: int = 80) -> bytes:
    return png_bytes(gradient(width, height))


class TestLayoutSelection:
    def test_unknown_layout_rejected(self, session):
        with pytest.raises(ValidationError, match="Unknown layout"):
            session.select_layout("4-way")

    def test_select_layout_sets_panel_count(self, session):
        layout = session.select_layout("3-way")
        assert layout.name == "3-Way Split"
        assert session.panel_count == 3

    def test_changing_panel_count_clears_slots(self, session):
        session.select_layout("2-way")
        session.load_photo(0, _png())
        session.select_layout("3-way")
        assert session.slots == {}

    def test_reselecting_same_layout_keeps_slots(self, session):
        session.select_layout("2-way")
        session.load_photo(0, _png())
        session.select_layout("2-way")
        assert 0 in session.slots

    def test_load_without_layout_rejected(self, session):
        with pytest.raises(ValidationError, match="Select a layout"):
            session.load_photo(0, _png())


class TestLoadPhoto:
    def test_slot_index_validated(self, session):
        session.select_layout("2-way")
        with pytest.raises(ValidationError, match="out of range"):
            session.load_photo(2, _png())

    def test_load_from_path(self, session):
        session.select_layout("2-way")
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            gradient(64, 64).save(f, format="PNG")
            tmp_path = f.name
        try:
            slot = session.load_photo(1, tmp_path)
            assert slot.photo.size == (64, 64)
            assert session.slots[1] is slot
        finally:
            os.unlink(tmp_path)

    def test_small_photo_gets_low_resolution_warning(self, session):
        session.select_layout("2-way")
        slot = session.load_photo(0, png_bytes(checkerboard(150)))
        assert slot.quality.too_small is True
        assert session.slot_summary()[0]["warning"] == "low resolution"

    def test_flat_large_photo_may_look_soft(self, session):
        session.select_layout("2-way")
        slot = session.load_photo(0, png_bytes(Image.new("RGB", (1600, 1200), (80, 80, 80))))
        assert slot.quality.too_small is False
        assert slot.warning.value == "may look soft"

    def test_undecodable_bytes_fail_open(self, session):
        session.select_layout("2-way")
        slot = session.load_photo(0, b"\x00\x01 not an image", name="broken.jpg")
        assert slot.photo.size == (0, 0)
        assert math.isinf(slot.quality.blur_score)
        assert slot.warning is None
        assert slot.focal == FocalPoint()

    def test_detector_focal_point_used(self):
        detector = RecordingFaceDetector(FocalPoint(0.4, 0.3, True))
        session = CompositionSession(face_detector=detector)
        session.select_layout("2-way")
        slot = session.load_photo(0, _png())
        assert slot.face_found is True
        assert slot.focal == FocalPoint(0.4, 0.3, True)
        assert detector.calls == 1

    def test_supplied_focal_point_skips_detection(self):
        detector = RecordingFaceDetector()
        session = CompositionSession(face_detector=detector)
        session.select_layout("2-way")
        slot = session.load_photo(0, _png(), focal=FocalPoint(0.5, 0.2, True))
        assert slot.focal.y == 0.2
        assert detector.calls == 0

    def test_crashing_detector_falls_back(self):
        session = CompositionSession(face_detector=ExplodingFaceDetector())
        session.select_layout("2-way")
        assert session.load_photo(0, _png()).focal == FocalPoint()

    def test_slow_detector_times_out(self, monkeypatch):
        monkeypatch.setattr(Config, "ANALYSIS_TIMEOUT", 0.05)
        session = CompositionSession(face_detector=SlowFaceDetector())
        session.select_layout("2-way")
        started = time.monotonic()
        slot = session.load_photo(0, _png())
        assert time.monotonic() - started < 0.45
        assert slot.focal == FocalPoint()

    def test_paste_fills_first_empty_then_last(self, session):
        session.select_layout("3-way")
        session.load_photo(1, _png())
        assert session.next_slot() == 0
        session.paste_photo(_png(), name="pasted-1")
        session.paste_photo(_png(), name="pasted-2")
        assert session.slots[0].photo.name == "pasted-1"
        assert session.slots[2].photo.name == "pasted-2"
        session.paste_photo(_png(), name="pasted-3")
        assert session.slots[2].photo.name == "pasted-3"

    def test_remove_photo(self, session):
        session.select_layout("2-way")
        session.load_photo(0, _png())
        session.remove_photo(0)
        assert session.missing_slots() == [0, 1]


class TestCompose:
    def test_requires_layout(self, session):
        with pytest.raises(CompositionError, match="Select a layout"):
            session.compose()

    def test_requires_every_slot(self, session):
        session.select_layout("2-way")
        session.load_photo(0, _png())
        assert session.can_compose() is False
        with pytest.raises(CompositionError, match="requires 2 photos"):
            session.compose()

    def test_renders_both_formats_at_declared_size(self, session):
        session.select_layout("2-way")
        session.load_photo(0, _png())
        session.load_photo(1, _png(80, 120))
        images = session.compose()
        assert [img.size for img in images] == [(2000, 1000), (2000, 1500)]
        assert session.composed

    def test_centred_focal_points_give_middle_target(self, small_session):
        small_session.select_layout("2-way")
        small_session.load_photo(0, _png())
        small_session.load_photo(1, _png())
        small_session.compose()
        assert small_session.state.target_y == 0.5
        assert small_session.adjustment(0, 0) == Adjustment()

    def test_opposite_focal_points_average(self, small_session):
        small_session.select_layout("2-way")
        small_session.load_photo(0, _png(), focal=FocalPoint(0.5, 0.2, True))
        small_session.load_photo(1, _png(), focal=FocalPoint(0.5, 0.8, True))
        small_session.compose()
        assert small_session.state.target_y == pytest.approx(0.5)

    def test_zoom_in_one_format_only(self, small_session):
        small_session.select_layout("2-way")
        small_session.load_photo(0, _png())
        small_session.load_photo(1, _png())
        small_session.compose()
        small_session.set_zoom(1, 0, 2.0)
        assert small_session.adjustment(0, 0).scale == 1.0
        assert small_session.adjustment(1, 0).scale == 2.0

    def test_new_upload_discards_composition(self, small_session):
        small_session.select_layout("2-way")
        small_session.load_photo(0, _png())
        small_session.load_photo(1, _png())
        small_session.compose()
        small_session.drag.begin(0, 10, 10, displayed_width=200)

        small_session.load_photo(1, _png(90, 90))

        assert small_session.composed is False
        assert small_session.drag.context is None
        with pytest.raises(CompositionError):
            small_session.adjustment(0, 0)

    def test_recompose_resets_adjustments(self, small_session):
        small_session.select_layout("2-way")
        small_session.load_photo(0, _png())
        small_session.load_photo(1, _png())
        small_session.compose()
        small_session.set_pan(0, 1, 30, 30)
        small_session.compose()
        assert small_session.adjustment(0, 1) == Adjustment()

    def test_undecodable_photo_still_composes(self, small_session):
        small_session.select_layout("2-way")
        small_session.load_photo(0, b"garbage")
        small_session.load_photo(1, png_bytes(Image.new("RGB", (50, 50), (255, 0, 0))))
        wide, _ = small_session.compose()
        assert wide.getpixel((40, 50)) == (255, 255, 255)
        assert wide.getpixel((150, 50)) == (255, 0, 0)

    def test_reset_all(self, small_session):
        small_session.select_layout("2-way")
        small_session.load_photo(0, _png())
        small_session.reset_all()
        assert small_session.layout is None
        assert small_session.slots == {}
        assert small_session.composed is False


class TestSlotSummary:
    def test_reports_every_slot(self):
        session = CompositionSession(face_detector=RecordingFaceDetector())
        session.select_layout("3-way")
        session.load_photo(2, _png())
        summary = session.slot_summary()
        assert [s["loaded"] for s in summary] == [False, False, True]
        assert summary[2]["face_found"] is True
        assert summary[2]["size"] == (120, 80)

    def test_default_formats(self, session):
        assert session.formats == OUTPUT_FORMATS
