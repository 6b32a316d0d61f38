from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib import font_manager
from matplotlib.ticker import MaxNLocator

from gradechart.models import Histogram

X_AXIS_LABEL = "Grade range"
Y_AXIS_LABEL = "Number of students"


@dataclass(frozen=True, slots=True)
class ChartStyle:
    color: str = "#0f6cbf"
    font_path: str | None = None


@lru_cache(maxsize=None)
def _register_font(font_path: str) -> str:
    # addfont appends to the shared font list, so each path is added once.
    font_manager.fontManager.addfont(font_path)
    return font_manager.FontProperties(fname=font_path).get_name()


def _font_rc(font_path: str | None) -> dict[str, object]:
    rc: dict[str, object] = {"axes.unicode_minus": False}
    if font_path:
        rc["font.sans-serif"] = [_register_font(font_path)]
    return rc


def render_histogram_chart(
    output_path: Path,
    histogram: Histogram,
    title: str,
    style: ChartStyle | None = None,
) -> Path:
    style = style or ChartStyle()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    labels = histogram.labels
    values = histogram.counts
    positions = list(range(len(labels)))

    with plt.rc_context(_font_rc(style.font_path)):
        fig, ax = plt.subplots(figsize=(12, 6))
        bars = ax.bar(positions, values, color=style.color)
        ax.set_title(title)
        ax.set_xlabel(X_AXIS_LABEL)
        ax.set_ylabel(Y_AXIS_LABEL)
        ax.set_xticks(positions)
        ax.set_xticklabels(labels, rotation=45, ha="right")
        ax.set_ylim(0, max(values + [0]) + 1)
        ax.yaxis.set_major_locator(MaxNLocator(integer=True))
        for bar, value in zip(bars, values, strict=True):
            if value == 0:
                continue
            ax.text(
                bar.get_x() + bar.get_width() / 2,
                bar.get_height() + 0.05,
                str(value),
                ha="center",
                va="bottom",
                fontsize=8,
            )

        fig.tight_layout()
        fig.savefig(output_path, dpi=150)
        plt.close(fig)
    return output_path
