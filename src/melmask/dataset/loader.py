import numpy as np
import soundfile as sf
import librosa
from torch.utils.data import Dataset
from pathlib import Path

from melmask.config import PipelineConfig
from melmask.types import AudioSignal
from melmask.spectrogram import SpectrogramBuilder
from melmask.reconstruct import MaskedReconstructor
from melmask.dataset.annotations import load_annotations


def load_audio(path, sr=None):
    """
    Read an audio file as a mono AudioSignal.
    Multichannel files are averaged to mono; resampled with librosa when sr is given and differs.
    """
    audio, fs = sf.read(str(path), always_2d=False)
    if audio.ndim > 1:
        # to mono
        audio = np.mean(audio, axis=1)
    audio = audio.astype(np.float32)
    if sr is not None and fs != sr:
        audio = librosa.resample(audio, orig_sr=fs, target_sr=sr)
        fs = sr
    return AudioSignal(audio, fs)


def save_audio(path, signal, subtype="PCM_16"):
    path = Path(path)
    path.parent.mkdir(exist_ok=True, parents=True)
    # keep the written file in [-1, 1]
    data = np.clip(signal.samples, -1.0, 1.0)
    sf.write(str(path), data, signal.sample_rate, subtype=subtype)
    return path


def find_annotated_clips(data_dir):
    """(wav, json) pairs sharing a stem, e.g. take1.wav + take1.json"""
    data_dir = Path(data_dir)
    pairs = []
    for wav in sorted(data_dir.glob("*.wav")):
        ann = wav.with_suffix(".json")
        if ann.exists():
            pairs.append((wav, ann))
    return pairs


class AnnotatedClipDataset(Dataset):
    """
    Dataset over saved recordings and their annotation files.

    Each item is a dict of numpy arrays:
      clean:       original samples
      masked:      samples with annotated frames silenced and resynthesized
      frame_mask:  int8 per analysis frame (1 = inside an annotation)
      spectrogram: [num_frames, mel_bins] dB matrix of the clean clip
    """
    def __init__(self, data_dir, sr=None, config=None):
        """
        data_dir: folder holding <stem>.wav + <stem>.json pairs
        sr: target sample rate (None keeps each file's own rate)
        config: PipelineConfig for both the spectrogram and the reconstruction
        """
        self.pairs = find_annotated_clips(data_dir)
        if len(self.pairs) == 0:
            raise RuntimeError(f"No annotated clips (<stem>.wav + <stem>.json) found in {data_dir}")
        self.sr = sr
        self.config = config or PipelineConfig()
        self.builder = SpectrogramBuilder(self.config)
        self.reconstructor = MaskedReconstructor(self.config)

    def __len__(self):
        return len(self.pairs)

    def __getitem__(self, idx):
        wav_path, ann_path = self.pairs[idx]
        signal = load_audio(wav_path, sr=self.sr)
        masks = load_annotations(ann_path).masks

        masked = self.reconstructor.reconstruct(signal, masks)
        flags = self.reconstructor.frame_mask(signal, masks)
        spec = self.builder.build(signal)

        return {
            "clean": signal.samples.astype(np.float32),
            "masked": masked.samples.astype(np.float32),
            "frame_mask": flags.astype(np.int8),
            "spectrogram": spec.matrix.astype(np.float32),
        }
