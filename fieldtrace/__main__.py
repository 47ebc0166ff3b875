#!/usr/bin/env python3
"""
FieldTrace command-line interface.

Usage:
    python -m fieldtrace "[-y, x]"                    # Arrow layout summary
    python -m fieldtrace --preset wave-2d --json      # Geometry as JSON
    python -m fieldtrace --list-presets               # Show preset formulas
    python -m fieldtrace --version                    # Show version
"""

import argparse
import json
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fieldtrace',
        description='FieldTrace - sample and trace vector fields given as formulas',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fieldtrace "[-y, x]"                         # Vortex, arrow mode
  python -m fieldtrace "[sin(z), cos(x), y]" -d 3        # 3D field
  python -m fieldtrace --preset saddle-2d --mode streamlines
  python -m fieldtrace "[-y, x]" --mode particles --ticks 60 --json
"""
    )

    parser.add_argument('formula', nargs='?', help='Field formula in array notation, e.g. "[-y, x]"')
    parser.add_argument('-d', '--dimension', type=int, choices=(2, 3), default=2,
                        help='Field dimension (default: 2)')
    parser.add_argument('-p', '--preset', help='Use a named preset formula instead of FORMULA')
    parser.add_argument('--list-presets', action='store_true', help='List preset formulas and exit')
    parser.add_argument('-m', '--mode', default='arrow',
                        help='arrow | streamline | particle | heatmap (default: arrow)')
    parser.add_argument('--density', type=float, help='Sampling density multiplier')
    parser.add_argument('--scale', type=float, help='Glyph scale multiplier')
    parser.add_argument('--color', help='Colour as hex, e.g. "#ff8800"')
    parser.add_argument('--ticks', type=int, default=0, help='Animation ticks to advance (particle mode)')
    parser.add_argument('--dt', type=float, default=1.0 / 60.0, help='Seconds per tick (default: 1/60)')
    parser.add_argument('--seed', type=int, help='Random seed for particle placement')
    parser.add_argument('--backend', choices=('numpy', 'jax'), help='Batch evaluation backend')
    parser.add_argument('--json', action='store_true', help='Print geometry as JSON')
    parser.add_argument('--timing', action='store_true', help='Report compile and render times')
    parser.add_argument('-v', '--verbose', action='store_true', help='Print diagnostic messages')
    parser.add_argument('--version', action='version', version=f'FieldTrace {get_version()}')
    return parser


def _list_presets() -> None:
    from fieldtrace.expression.presets import PRESETS

    width = max(len(name) for name in PRESETS)
    for name, (formula, dimension) in sorted(PRESETS.items()):
        print(f"{name:<{width}}  {dimension}D  {formula}")


def main(argv=None) -> int:
    """Command-line interface for FieldTrace. Returns the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Import here to avoid slow startup for --version
    from fieldtrace.expression.presets import get_preset
    from fieldtrace.session import FieldSession
    from fieldtrace.utils.config import configure
    from fieldtrace.utils.logging import Timer

    if args.list_presets:
        _list_presets()
        return 0

    options = {}
    if args.verbose:
        options['verbose'] = True
    if args.backend:
        options['backend'] = args.backend
    if options:
        configure(**options)

    if args.preset:
        try:
            formula, dimension = get_preset(args.preset)
        except KeyError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            return 2
    elif args.formula:
        formula, dimension = args.formula, args.dimension
    else:
        parser.print_usage(sys.stderr)
        print("Error: a FORMULA or --preset is required", file=sys.stderr)
        return 2

    style = {}
    if args.density is not None:
        style['density'] = args.density
    if args.scale is not None:
        style['scale'] = args.scale
    if args.color is not None:
        style['color'] = args.color

    try:
        session = FieldSession(dimension=dimension, mode=args.mode, style=style, rng_seed=args.seed)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    with session:
        with Timer("Compile + render", quiet=not args.timing):
            result = session.load_formula(formula, dimension)
        if not result.ok:
            print(f"Error: {result.message}", file=sys.stderr)
            return 1

        if args.ticks > 0:
            with Timer(f"{args.ticks} ticks", quiet=not args.timing):
                for _ in range(args.ticks):
                    session.tick(args.dt)

        geometry = session.geometry
        if args.json:
            print(json.dumps(geometry.to_dict()))
        else:
            bounds = session.get_bounds()
            print(f"Formula:    {session.formula}")
            print(f"Dimension:  {session.dimension}D")
            print(f"Variables:  {', '.join(session.variables) or '-'}")
            print(f"Bounds:     min={bounds.min} max={bounds.max}")
            print(f"Mode:       {session.mode_kind.value}")
            print(f"Points:     {geometry.n_points}")
            print(f"Lines:      {len(geometry.lines)}")
    return 0


def get_version():
    """Get FieldTrace version."""
    try:
        from fieldtrace import __version__
        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
