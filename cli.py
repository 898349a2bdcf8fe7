# Tiny VDAFS arc-length CLI: list curves, solve lengths, partition by arc length.
# Usage:
#   python cli.py <file.vda> --list
#   python cli.py <file.vda> --curve CV3 --info
#   python cli.py <file.vda> --curve CV3 --solve 0.0 12.5
#   python cli.py <file.vda> --curve CV3 --partition 2.0 --plot
#   python cli.py <file.vda> --curve CV3 --partition-n 8
#
# Notes:
# - --partition and --partition-n print one parameter per line
# - --plot shows the curve with the partition points (if any)
# - --float32 evaluates the curve in single precision

import argparse
import logging
import sys
from textwrap import fill

import numpy as np

import arclength
import curve_eval as ce
import data_print
import index
import reader

logger = logging.getLogger(__name__)


def _build_parser():
    ap = argparse.ArgumentParser(description="OpenVDAFS arc-length tools")
    ap.add_argument("file", help="Path to .vda file")
    ap.add_argument("--list", action="store_true", help="List CURVE entity names")
    ap.add_argument("--curve", dest="curve_name", help='CURVE entity to work on (e.g., "CV3")')
    ap.add_argument("--info", action="store_true", help="Print order, coefficients and segment lengths of --curve")
    ap.add_argument("--length", action="store_true", help="Print the total arc length of --curve")
    ap.add_argument("--solve", nargs=2, type=float, metavar=("START", "LENGTH"),
                    help="Print the parameter reached after LENGTH of arc length from parameter START")
    ap.add_argument("--partition", type=float, metavar="LENGTH",
                    help="Print the parameters cutting --curve into pieces of LENGTH")
    ap.add_argument("--partition-n", type=int, metavar="N",
                    help="Print the N+1 parameters cutting --curve into N pieces of equal length")
    ap.add_argument("--plot", action="store_true", help="Plot --curve with the partition points")
    ap.add_argument("--projection", "-p", dest="projection", choices=["xy", "yz", "xz", "iso"], default="xy",
                    help="2D projection for plotting: xy, yz, xz, or iso (isometric)")
    ap.add_argument("--float32", action="store_true", help="Evaluate the curve in single precision")
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level (default: WARNING)")
    return ap


def _print_parameters(ts):
    for t in ts:
        print(f"{float(t):.12g}")


def main(argv=None):
    ap = _build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    needs_curve = args.info or args.length or args.solve or args.partition is not None \
        or args.partition_n is not None or args.plot
    if needs_curve and not args.curve_name:
        ap.error("--curve is required for --info, --length, --solve, --partition, --partition-n and --plot")

    try:
        model = reader.read_vdafs(args.file)
        idx = index.build_index(model)

        if args.list:
            names = index.list_names_by_type(idx, 'CURVE')
            if not names:
                print("(none)")
            else:
                print(f"CURVE ({len(names)}):")
                print('  ' + fill(', '.join(names), width=100, subsequent_indent='  '))

        if not args.curve_name:
            return 0

        entity = index.get_entity(idx, args.curve_name, 'CURVE')
        curve = ce.curve_from_entity(entity, dtype=np.float32 if args.float32 else np.float64)
        logger.info("%s: %r", args.curve_name, curve)

        if args.info:
            data_print.print_entity_data(model, idx, args.curve_name)

        if args.length:
            print(f"{float(curve.total_length()):.12g}")

        if args.solve:
            start, length = args.solve
            print(f"{float(arclength.solve_length(curve, start, length)):.12g}")

        ts = None
        if args.partition is not None:
            ts = arclength.partition(curve, args.partition)
            _print_parameters(ts)

        if args.partition_n is not None:
            ts = arclength.partition_n(curve, args.partition_n)
            _print_parameters(ts)

        if args.plot:
            import plot
            plot.plot_curve(curve, title=f"{args.curve_name} (CURVE)", parameters=ts,
                            projection=args.projection)
    except (OSError, KeyError, ValueError) as ex:
        # KeyError str() wraps the message in quotes
        msg = ex.args[0] if isinstance(ex, KeyError) and ex.args else ex
        print(f"error: {msg}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
