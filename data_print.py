# Print curve data to terminal (order, parameters, coefficients, lengths)
import curve_eval as ce
import index


def print_entity_data(model, idx, name):
    """Print the raw data of a CURVE entity followed by its segment arc lengths."""
    e = index.get_entity(idx, name)
    cmd = e['command']

    print(f"Entity: {name}")
    print(f"Type: {cmd}")
    print()

    if cmd != 'CURVE':
        print(f"Detailed data printing for entity type '{cmd}' is not implemented.")
        return

    decoded = ce.decode_curve_entity(e)
    _print_curve_data(decoded)
    _print_lengths(ce.MonomialCurve.from_decoded(decoded))


def _print_curve_data(curve):
    """Print CURVE order, parameters, and coefficients."""
    print("=== CURVE DETAILS ===")
    print(f"Number of segments: {curve['n']}")
    print(f"Global parameters: {curve['pars']}")
    print()

    for i, seg in enumerate(curve['segments']):
        print(f"--- Segment {i+1} ---")
        print(f"Order: {seg['order']}")
        print(f"Parameter range: [{seg['t0']}, {seg['t1']}]")
        print(f"X coefficients: {seg['ax']}")
        print(f"Y coefficients: {seg['ay']}")
        print(f"Z coefficients: {seg['az']}")
        print()


def _print_lengths(curve):
    lengths = curve.segment_lengths()
    print("=== ARC LENGTH ===")
    for i, length in enumerate(lengths):
        print(f"Segment {i+1}: {length:.6g}")
    print(f"Total: {lengths.sum():.6g}")
