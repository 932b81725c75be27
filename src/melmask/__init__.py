from melmask.config import ConfigurationError, PipelineConfig
from melmask.types import AudioSignal, MaskInterval, Spectrogram
from melmask.spectrogram import SpectrogramBuilder, compute_spectrogram
from melmask.reconstruct import MaskedReconstructor, apply_mask_and_reconstruct

__version__ = "0.1.0"
