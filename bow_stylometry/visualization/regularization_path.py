"""Plot the cross-validated regularization path of a fitted classifier."""

from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import seaborn as sns


def generate_regularization_path_figure(
    path_df,
    best_C=None,
    output_path=None,
    figsize=(8, 5),
    font='Helvetica',
    title=None
):
    """
    Plot mean fold AUC (with one standard deviation) against log(C).

    The number of non-zero coefficients at each strength is written along
    the top axis.

    Args:
        path_df: Regularization path DataFrame (C, log_C, mean_auc, std_auc, n_nonzero)
        best_C: Selected strength, marked with a dashed line (optional)
        output_path: Path to save PDF (optional)
        figsize: Figure size
        font: Font family to use
        title: Axes title (optional)

    Returns:
        matplotlib figure object

    Examples:
        >>> fig = generate_regularization_path_figure(clf.regularization_path_, clf.best_C_)
    """
    plt.rcParams['font.family'] = font
    plt.rcParams['font.sans-serif'] = [font]

    fig, ax = plt.subplots(figsize=figsize)
    color = sns.color_palette("tab10")[3]

    ax.errorbar(
        path_df['log_C'],
        path_df['mean_auc'],
        yerr=path_df['std_auc'],
        fmt='o',
        color=color,
        ecolor='gray',
        markersize=4,
        capsize=2
    )

    if best_C is not None:
        best_row = path_df.loc[(path_df['C'] - best_C).abs().idxmin()]
        ax.axvline(best_row['log_C'], color='black', linestyle='--', linewidth=1)

    # Non-zero coefficient counts along the top, like a lasso path plot
    top = ax.twiny()
    top.set_xlim(ax.get_xlim())
    top.set_xticks(path_df['log_C'].to_numpy()[::2])
    top.set_xticklabels([f"{n:.0f}" for n in path_df['n_nonzero'].to_numpy()[::2]], fontsize=8)
    top.set_xlabel("Non-zero coefficients", fontsize=10)

    ax.set_xlabel("log(C)", fontsize=12)
    ax.set_ylabel("Cross-validated AUC", fontsize=12)
    if title:
        ax.set_title(title, fontsize=12)
    sns.despine(ax=ax, top=False, right=True)

    plt.tight_layout()

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, format="pdf", bbox_inches="tight")

    return fig
