"""
Plotting module

Reflectance-space diagrams of a lookup table (lines of constant optical
thickness and constant effective radius), with the observation and the
path taken by a retrieval.
"""
import numpy as np
from matplotlib import pyplot as plt


def lut_axes_labels(ax):
    ax.set_xlabel("Reflectance 1")
    ax.set_ylabel("Reflectance 2")


def lut_diagram(lut, result=None, ax=None):
    """Draw the table grid in (ref1, ref2) space.

    Parameters
    ----------
    lut : LookupTable
    result : RetrievalResult, optional
        If given, the observation and the sequence of evaluated points are
        drawn on top of the grid.
    ax : matplotlib.axes.Axes, optional

    Returns
    -------
    matplotlib.axes.Axes
    """
    if ax is None:
        fig, ax = plt.subplots()

    refs = lut.reflectances
    # Lines of constant tau (varying cder)
    for i, tau in enumerate(lut.tau_axis):
        ax.plot(refs[i, :, 0], refs[i, :, 1], color="0.6", lw=0.8)
        ax.annotate(f"{tau:g}", (refs[i, -1, 0], refs[i, -1, 1]), fontsize=6)
    # Lines of constant cder (varying tau)
    for j, cder in enumerate(lut.cder_axis):
        ax.plot(refs[:, j, 0], refs[:, j, 1], color="tab:blue", lw=0.8, ls="--")
        ax.annotate(
            f"{cder:g}", (refs[-1, j, 0], refs[-1, j, 1]), fontsize=6, color="tab:blue"
        )

    if result is not None:
        path = np.array([(h.est_ref1, h.est_ref2) for h in result.history])
        if path.size:
            ax.plot(path[:, 0], path[:, 1], "o-", color="tab:orange", ms=3,
                    label="Iterations")
        ax.plot(*result.observation, "r*", ms=10, label="Observation")
        ax.set_title(
            f"tau={result.tau:.2f}, cder={result.cder:.2f} um ({result.status.value})"
        )
        ax.legend(frameon=False)

    lut_axes_labels(ax)
    return ax


def save_diagram(lut, result, path, dpi=150):
    """Render `lut_diagram` to an image file."""
    fig, ax = plt.subplots(figsize=(6, 5))
    lut_diagram(lut, result, ax=ax)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    return path
