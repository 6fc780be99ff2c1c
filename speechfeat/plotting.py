"""
speechfeat v1 Feature Charts

Renders a FeatureSet as three PNG images with matplotlib's Agg canvas
(no display or GUI backend required):

    mfcc.png     coefficient heatmap (frames on x, coefficient index on y)
    pitch.png    pitch per frame, unvoiced frames drawn faded
    voicing.png  voiced/unvoiced step plot
"""

from pathlib import Path

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from speechfeat.types import FeatureSet


FIGURE_SIZE = (12, 4)
DPI = 100


def _save(figure: Figure, path: Path) -> Path:
    FigureCanvasAgg(figure)
    figure.tight_layout()
    figure.savefig(path, dpi=DPI)
    return path


def plot_mfcc(features: FeatureSet, path: Path) -> Path:
    figure = Figure(figsize=FIGURE_SIZE)
    ax = figure.add_subplot(1, 1, 1)
    image = ax.imshow(
        features.mfcc.T,
        aspect="auto",
        origin="lower",
        interpolation="nearest",
        cmap="viridis",
    )
    figure.colorbar(image, ax=ax)
    ax.set_title("MFCC (CMVN)")
    ax.set_xlabel("Frame")
    ax.set_ylabel("Coefficient")
    return _save(figure, path)


def plot_pitch(features: FeatureSet, path: Path) -> Path:
    figure = Figure(figsize=FIGURE_SIZE)
    ax = figure.add_subplot(1, 1, 1)
    frames = np.arange(features.num_frames)
    ax.plot(frames, features.pitch, color="tab:red", alpha=0.3, label="all frames")
    voiced_pitch = np.where(features.voiced, features.pitch, np.nan)
    ax.plot(frames, voiced_pitch, color="tab:red", label="voiced")
    ax.set_ylim(0.0, float(features.pitch.max()) * 1.1)
    ax.set_title("Pitch")
    ax.set_xlabel("Frame")
    ax.set_ylabel("Hz")
    ax.legend(loc="upper right")
    return _save(figure, path)


def plot_voicing(features: FeatureSet, path: Path) -> Path:
    figure = Figure(figsize=FIGURE_SIZE)
    ax = figure.add_subplot(1, 1, 1)
    ax.step(np.arange(features.num_frames), features.voiced.astype(int), where="post", color="tab:blue")
    ax.set_yticks([0, 1], labels=["unvoiced", "voiced"])
    ax.set_ylim(-0.1, 1.1)
    ax.set_title("Voiced/unvoiced decisions")
    ax.set_xlabel("Frame")
    return _save(figure, path)


def plot_features(features: FeatureSet, out_dir: Path) -> list[Path]:
    """
    Write mfcc.png, pitch.png and voicing.png into out_dir.

    Args:
        features: Pipeline output
        out_dir: Destination directory (created if missing)

    Returns:
        Paths of the written images, in the order above.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    return [
        plot_mfcc(features, out_dir / "mfcc.png"),
        plot_pitch(features, out_dir / "pitch.png"),
        plot_voicing(features, out_dir / "voicing.png"),
    ]
