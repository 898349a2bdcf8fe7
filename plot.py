# Plotting helpers. One chart per call, no styles set.
import math

import matplotlib.pyplot as plt
import numpy as np

import curve_eval as ce
import index

_COLOR_PALETTE = ['blue', 'red', 'green', 'orange', 'purple', 'brown', 'pink', 'gray', 'olive', 'cyan']


def _axis_labels(projection):
    """Return appropriate axis labels for the given projection."""
    return {
        'xy': ('X', 'Y'),
        'xz': ('X', 'Z'),
        'yz': ('Y', 'Z'),
        'iso': ('Iso-X', 'Iso-Y'),
    }.get(projection, ('X', 'Y'))


def _project_points(xyz, projection):
    """Project (N, 3) points to two (N,) coordinate arrays."""
    xyz = np.asarray(xyz, dtype=float).reshape(-1, 3)
    x, y, z = xyz[:, 0], xyz[:, 1], xyz[:, 2]
    if projection == 'xz':
        return x, z
    if projection == 'yz':
        return y, z
    if projection == 'iso':
        # rotate 45 degrees about Z, then 35.264 degrees about X, drop Z
        angle_x = math.radians(35.26438968)
        angle_z = math.radians(45)
        xr = x * math.cos(angle_z) - y * math.sin(angle_z)
        yr = x * math.sin(angle_z) + y * math.cos(angle_z)
        return xr, yr * math.cos(angle_x) - z * math.sin(angle_x)
    return x, y


def plot_curve(curve, title=None, parameters=None, samples_per_segment=30, projection='xy', show=True):
    """
    Draw a MonomialCurve segment by segment and mark the points at the given
    global parameters (e.g. a partition). Returns the figure.
    """
    fig, ax = plt.subplots()

    count = curve.segment_count()
    m = max(2, int(samples_per_segment))
    xs, ys = _project_points(curve.sample(m), projection)
    for k in range(count):
        # segment k owns samples k*m .. (k+1)*m, knots shared with its neighbours
        s = slice(k * m, (k + 1) * m + 1)
        ax.plot(xs[s], ys[s], color=_COLOR_PALETTE[k % len(_COLOR_PALETTE)], linewidth=2,
                label=f"Segment {k+1}" if count <= len(_COLOR_PALETTE) else None)

    if parameters is not None and len(parameters):
        xs, ys = _project_points([curve.evaluate(v) for v in parameters], projection)
        ax.plot(xs, ys, linestyle='none', marker='o', color='black', markersize=4,
                label=f"{len(parameters)} partition points")

    ax.legend()
    if title:
        ax.set_title(title)
    xl, yl = _axis_labels(projection)
    ax.set_xlabel(xl)
    ax.set_ylabel(yl)
    ax.axis('equal')
    if show:
        plt.show()
    return fig


def plot_entity(model, idx, name, parameters=None, samples_per_segment=30, projection='xy', show=True):
    e = index.get_entity(idx, name, 'CURVE')
    curve = ce.curve_from_entity(e)
    return plot_curve(curve, title=f"{e['name']} (CURVE)", parameters=parameters,
                      samples_per_segment=samples_per_segment, projection=projection, show=show)
