"""
Command-line entry point.

Usage:
    melmask spectrogram take1.wav --out take1_spec.npz --image take1.png
    melmask reconstruct take1.wav --annotations take1.json --out take1_masked.wav
    melmask reconstruct take1.wav --mask 0.2:0.1:cough --out take1_masked.wav
    melmask export take1.wav --name "take 1" --mask 0.2:0.1:cough --out-dir data/clips
    melmask batch data/clips --out-dir data/masked
"""

import argparse
import logging
from pathlib import Path

import numpy as np
from tqdm import tqdm

from melmask.config import ConfigurationError, PipelineConfig
from melmask.dataset.annotations import load_annotations, parse_mask_arg, save_annotations
from melmask.dataset.loader import find_annotated_clips, load_audio, save_audio
from melmask.reconstruct import MaskedReconstructor
from melmask.render import save_spectrogram_image
from melmask.spectrogram import SpectrogramBuilder


def run_spectrogram(args, config):
    signal = load_audio(args.input, sr=args.sr)
    spec = SpectrogramBuilder(config).build(signal)
    print(f"Spectrogram: {spec.num_frames} frames x {spec.mel_bins} mel bins ({signal.duration:.2f}s @ {signal.sample_rate} Hz)")

    out = args.out or Path(args.input).with_suffix(".npz")
    np.savez(out, spectrogram=spec.matrix, times=spec.times, frequencies=spec.frequencies)
    print("Saved", out)
    if args.image:
        if spec.num_frames == 0:
            print("Skipping image: signal shorter than one window")
        else:
            save_spectrogram_image(args.image, spec)
            print("Saved", args.image)
    return spec


def _collect_masks(args):
    masks = []
    if getattr(args, "annotations", None):
        masks.extend(load_annotations(args.annotations).masks)
    for text in getattr(args, "mask", None) or []:
        masks.append(parse_mask_arg(text))
    return masks


def run_reconstruct(args, config):
    signal = load_audio(args.input, sr=args.sr)
    masks = _collect_masks(args)
    reconstructor = MaskedReconstructor(config)
    restored = reconstructor.reconstruct(signal, masks)
    n_masked = int(reconstructor.frame_mask(signal, masks).sum())
    out = args.out or Path(args.input).with_name(Path(args.input).stem + "_masked.wav")
    save_audio(out, restored)
    print(f"Silenced {n_masked} frames from {len(masks)} intervals")
    print("Saved", out)
    return restored


def run_export(args, config):
    signal = load_audio(args.input, sr=args.sr)
    masks = _collect_masks(args)
    base = (args.name or "").strip() or "untitled-recording"
    out_dir = Path(args.out_dir)
    wav_path = save_audio(out_dir / f"{base}.wav", signal)
    json_path = save_annotations(out_dir / f"{base}.json", args.name or base, signal, masks)
    print("Saved", wav_path)
    print("Saved", json_path)
    return wav_path, json_path


def run_batch(args, config):
    pairs = find_annotated_clips(args.data_dir)
    print("Found:", len(pairs), "annotated clips.")
    out_dir = Path(args.out_dir)
    out_dir.mkdir(exist_ok=True, parents=True)
    reconstructor = MaskedReconstructor(config)

    written = []
    for wav, ann in tqdm(pairs, desc="Reconstructing", unit="clip"):
        signal = load_audio(wav, sr=args.sr)
        restored = reconstructor.reconstruct(signal, load_annotations(ann).masks)
        written.append(save_audio(out_dir / f"{wav.stem}_masked.wav", restored))
    print("Masked clips ready in", out_dir)
    return written


def build_parser():
    parser = argparse.ArgumentParser(prog="melmask", description="Mel spectrograms and time-masked resynthesis")
    parser.add_argument("--window-size", type=int, default=2048, help="FFT size (power of two)")
    parser.add_argument("--hop", type=int, default=512, help="Samples between frames")
    parser.add_argument("--mel-bins", type=int, default=128)
    parser.add_argument("--sr", type=int, default=None, help="Resample input to this rate")
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("spectrogram", help="Compute a mel spectrogram")
    p.add_argument("input")
    p.add_argument("--out", type=str, default=None, help=".npz output (default: next to input)")
    p.add_argument("--image", type=str, default=None, help="Optional PNG rendering")
    p.set_defaults(func=run_spectrogram)

    p = sub.add_parser("reconstruct", help="Silence masked intervals and resynthesize")
    p.add_argument("input")
    p.add_argument("--annotations", type=str, default=None, help="Annotation JSON")
    p.add_argument("--mask", action="append", help="start:duration[:label] as fractions, repeatable")
    p.add_argument("--out", type=str, default=None)
    p.set_defaults(func=run_reconstruct)

    p = sub.add_parser("export", help="Write a clip as WAV + annotation JSON")
    p.add_argument("input")
    p.add_argument("--name", type=str, default="Untitled Recording")
    p.add_argument("--annotations", type=str, default=None)
    p.add_argument("--mask", action="append")
    p.add_argument("--out-dir", type=str, default=".")
    p.set_defaults(func=run_export)

    p = sub.add_parser("batch", help="Reconstruct every <stem>.wav + <stem>.json in a directory")
    p.add_argument("data_dir")
    p.add_argument("--out-dir", type=str, default="masked")
    p.set_defaults(func=run_batch)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        config = PipelineConfig.from_args(args)
    except ConfigurationError as e:
        parser.error(str(e))
    return args.func(args, config)


if __name__ == "__main__":
    main()
