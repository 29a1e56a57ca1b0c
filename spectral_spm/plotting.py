import os

import matplotlib.pyplot as plt


def plot_voltage(series, ax=None, title='Terminal voltage'):
    """
    Plot the terminal voltage of a ResultSeries against time.

    Parameters:
    series (ResultSeries): Post-processed simulation result.
    ax (matplotlib.axes.Axes, optional): Axes to draw on; a new figure is
        created and shown if omitted.
    title (str): Plot title.

    Returns:
    matplotlib.axes.Axes: The axes that were drawn on.
    """
    return _plot_line(series.time, series.voltage, 'Voltage [V]', title, ax)


def plot_temperature(series, ax=None, title='Cell temperature'):
    """Plot the lumped cell temperature of a ResultSeries against time."""
    return _plot_line(series.time, series.temperature, 'Temperature [K]', title, ax)


def _plot_line(times, values, y_label, title, ax):
    show = ax is None
    if ax is None:
        plt.figure()
        ax = plt.gca()
    ax.plot(times, values, '.-')
    ax.set_xlabel('Time [s]')
    ax.set_ylabel(y_label)
    ax.set_title(title)
    ax.grid(True)
    if show:
        plt.show()
    return ax


def plot_concentration_profiles(series, c_max_neg, c_max_pos, sample_idx=None, axes=None):
    """
    Plot stoichiometry profiles along the particle radius at selected samples.

    Parameters:
    series (ResultSeries): Post-processed simulation result.
    c_max_neg, c_max_pos (float): Maximum concentrations used to normalise.
    sample_idx (list of int, optional): Samples to draw; four evenly spaced
        samples by default.
    axes (sequence of two Axes, optional): Anode and cathode axes; a new
        figure is created and shown if omitted.

    Returns:
    tuple: The (anode, cathode) axes.
    """
    n = len(series)
    if sample_idx is None:
        sample_idx = sorted({int(round(k)) for k in (0, (n - 1) / 3, 2 * (n - 1) / 3, n - 1)})
    show = axes is None
    if axes is None:
        _, axes = plt.subplots(1, 2, figsize=(10, 4))

    panels = (
        (axes[0], series.r_neg, series.c_neg / c_max_neg, 'Anode particle'),
        (axes[1], series.r_pos, series.c_pos / c_max_pos, 'Cathode particle'),
    )
    for ax, r, theta, title in panels:
        for k in sample_idx:
            ax.plot(r * 1e6, theta[k], 'o-', label=f't = {series.time[k]:.0f} s')
        ax.set_xlabel('Radial coordinate r [microns]')
        ax.set_ylabel('Stoichiometry [-]')
        ax.set_title(title)
        ax.grid(True)
        ax.legend(loc='best')
    if show:
        plt.show()
    return axes[0], axes[1]


def save_result_plots(series, params, outdir):
    """
    Save voltage, temperature and concentration plots as PNG files.

    Returns:
    list of str: Paths of the written files.
    """
    paths = []
    for name, plotter in (('voltage', plot_voltage), ('temperature', plot_temperature)):
        fig, ax = plt.subplots(figsize=(8, 4))
        plotter(series, ax=ax)
        fig.tight_layout()
        path = os.path.join(outdir, f'{name}.png')
        fig.savefig(path, dpi=200)
        plt.close(fig)
        paths.append(path)

    fig, axes = plt.subplots(1, 2, figsize=(10, 4))
    plot_concentration_profiles(series, params.neg.c_s_max, params.pos.c_s_max, axes=axes)
    fig.tight_layout()
    path = os.path.join(outdir, 'concentration.png')
    fig.savefig(path, dpi=200)
    plt.close(fig)
    paths.append(path)
    return paths
