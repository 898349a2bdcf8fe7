import sys

import numpy as np

import arclength
import curve_eval as ce
import index
import reader

# Partition consistency report for every CURVE in a file
# Usage: python check_partition.py <path_to_vda> [pieces]

DEFAULT_PIECES = 10


def piece_lengths(curve, parameters):
    return np.array([curve.arc_length(a, b) for a, b in zip(parameters[:-1], parameters[1:])])


def check_curves(path, pieces=DEFAULT_PIECES):
    model = reader.read_vdafs(path)
    idx = index.build_index(model)
    names = index.list_names_by_type(idx, 'CURVE')
    if not names:
        print('No CURVE found')
        return 1

    worst = 0.0
    for name in names:
        curve = ce.curve_from_entity(idx['by_name'][name])
        total = float(curve.total_length())
        ts = arclength.partition_n(curve, pieces)
        lengths = piece_lengths(curve, ts)
        errs = np.abs(lengths - total / pieces)
        rel = errs.max() / total if total > 0 else 0.0
        worst = max(worst, rel)
        print(f'CURVE {name}: segments={curve.segment_count()} length={total:.6g} '
              f'pieces={pieces} max={errs.max():.3g} mean={errs.mean():.3g}')

    print(f'worst relative deviation {worst:.3g}')
    return 0


if __name__ == '__main__':
    if len(sys.argv) < 2:
        print('usage: check_partition.py <path_to_vda> [pieces]')
        raise SystemExit(2)
    pieces = int(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_PIECES
    raise SystemExit(check_curves(sys.argv[1], pieces))
