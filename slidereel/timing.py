"""Slide timing: the default uniform timeline and narration sync.

Records are immutable snapshots; every function here returns new records.
"""

import logging

from slidereel.schemas.slide_schema import SlideRecord

logger = logging.getLogger(__name__)

DEFAULT_SLIDE_DURATION = 10.0
MIN_TEXT_BASED_DURATION = 3.0
SYNC_METHODS = ("auto", "equal", "text-based")


def assign_default_timing(
    records: list[SlideRecord],
    duration: float = DEFAULT_SLIDE_DURATION,
) -> list[SlideRecord]:
    """Give every record the same duration on a contiguous zero-based timeline.

    Timing follows output position, so `start_time` of record i is
    `i * duration` even when earlier manifest slides were skipped.
    """
    return [
        record.model_copy(update={"start_time": i * duration, "duration": duration})
        for i, record in enumerate(records)
    ]


def sync_slides(
    records: list[SlideRecord],
    audio_duration: float,
    method: str = "auto",
) -> list[SlideRecord]:
    """Fit slide timing to a narration of `audio_duration` seconds.

    Methods:
        auto / equal: split the narration evenly across slides.
        text-based: allot time in proportion to each slide's text length,
            with at least MIN_TEXT_BASED_DURATION seconds per slide.
    """
    if method not in SYNC_METHODS:
        supported = ", ".join(SYNC_METHODS)
        raise ValueError(f"Unsupported sync method '{method}'. Supported: {supported}")
    if audio_duration is None or audio_duration <= 0:
        raise ValueError(f"Audio duration must be positive, got {audio_duration}")
    if not records:
        return []

    total_text = sum(len(r.text) for r in records)
    if method == "text-based" and total_text == 0:
        logger.info("No slide text for text-based sync, splitting evenly")
        method = "equal"

    if method in ("auto", "equal"):
        interval = audio_duration / len(records)
        synced = [
            r.model_copy(update={"start_time": i * interval, "duration": interval})
            for i, r in enumerate(records)
        ]
    else:
        synced = []
        current = 0.0
        for r in records:
            duration = max(MIN_TEXT_BASED_DURATION, audio_duration * len(r.text) / total_text)
            synced.append(r.model_copy(update={"start_time": current, "duration": duration}))
            current += duration

    logger.info(f"Synced {len(synced)} slides to {audio_duration}s using '{method}'")
    return synced
