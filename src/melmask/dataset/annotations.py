"""
Annotation files for saved recordings.

On disk (JSON), times are in seconds:
    {
      "name": "take 1",
      "sample_rate": 16000,
      "length": 8.0,
      "features": [{"start": 1.2, "duration": 0.4, "label": ["cough", "noise"]}]
    }
In memory they are MaskIntervals (fractions of the clip length) with the
label list joined by ", ".
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from melmask.types import AudioSignal, MaskInterval

logger = logging.getLogger(__name__)


@dataclass
class AnnotationSet:
    name: str
    sample_rate: int
    length: float
    masks: List[MaskInterval] = field(default_factory=list)


def split_labels(label):
    if not label:
        return []
    return [part.strip() for part in label.split(",") if part.strip()]


def to_research_json(name: str, signal: AudioSignal, masks) -> dict:
    duration = signal.duration
    return {
        "name": name,
        "sample_rate": signal.sample_rate,
        "length": duration,
        "features": [
            {
                "start": m.start * duration,
                "duration": m.duration * duration,
                "label": split_labels(m.label),
            }
            for m in masks
        ],
    }


def save_annotations(path, name: str, signal: AudioSignal, masks):
    path = Path(path)
    path.parent.mkdir(exist_ok=True, parents=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_research_json(name, signal, masks), f, indent=2)
    return path


def from_research_json(data: dict) -> AnnotationSet:
    try:
        length = float(data["length"])
        sample_rate = int(data["sample_rate"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed annotation data: {e}") from e
    if length <= 0:
        raise ValueError(f"Annotation length must be positive, got {length}")

    masks = []
    for feat in data.get("features", []):
        labels = feat.get("label") or []
        if isinstance(labels, str):
            labels = split_labels(labels)
        masks.append(MaskInterval(
            start=float(feat["start"]) / length,
            duration=float(feat["duration"]) / length,
            label=", ".join(labels) or None,
        ))
    return AnnotationSet(name=data.get("name", ""), sample_rate=sample_rate, length=length, masks=masks)


def load_annotations(path) -> AnnotationSet:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    ann = from_research_json(data)
    logger.debug("Loaded %d annotations from %s", len(ann.masks), path)
    return ann


def parse_mask_arg(text: str) -> MaskInterval:
    """'start:duration[:label]' with fractions, e.g. '0.25:0.1:cough'"""
    parts = text.split(":", 2)
    if len(parts) < 2:
        raise ValueError(f"Expected start:duration[:label], got {text!r}")
    try:
        start, duration = float(parts[0]), float(parts[1])
    except ValueError as e:
        raise ValueError(f"Bad mask {text!r}: {e}") from e
    label = parts[2] if len(parts) == 3 and parts[2] else None
    return MaskInterval(start=start, duration=duration, label=label)
