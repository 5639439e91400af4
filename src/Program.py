import sys
import logging
import argparse
from calc.input_adapter import load_parameters
from calc.projection_calculator import ProjectionCalculator
from render.renderers import RENDERER_REGISTRY, create_renderer
from spec_generator import run_generator


def main():
    parser = argparse.ArgumentParser(
        description='Compensation projection calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Summary             Print parameters, 10-year totals and exit value (default)
  YearlyCompensation  Print the year-by-year salary, equity and tax table
  ExitValue           Print the exit valuation with capital gains tax
  YearDetails         Print the income and tax breakdown of one year (--year)

Examples:
  python src/Program.py myplan
  python src/Program.py myplan --mode YearlyCompensation
  python src/Program.py myplan --mode YearDetails --year 5
  python src/Program.py myplan --mode ExitValue --no-tax
  python src/Program.py --generate
        """
    )
    parser.add_argument('program_name', nargs='?', help='Name of the plan (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Summary',
                        help='Output mode (default: Summary)')
    parser.add_argument('--year', '-y',
                        type=int,
                        default=None,
                        help='Projection year (1-10) for YearDetails')
    parser.add_argument('--no-tax',
                        action='store_true',
                        help='Ignore the plan tax rates for this run')
    parser.add_argument('--generate', '-g',
                        action='store_true',
                        help='Launch interactive wizard to create a new spec.json configuration')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    # If --generate flag is set, run the interactive generator
    if args.generate:
        program_name = run_generator()
        if program_name is None:
            sys.exit(0)
        run_plan = input("Would you like to run the plan now? [Y/n]: ").strip().lower()
        if run_plan in ('', 'y', 'yes'):
            args.program_name = program_name
        else:
            sys.exit(0)

    if not args.program_name:
        parser.error("program_name is required (or use --generate to create a new configuration)")

    try:
        params = load_parameters(args.program_name)
    except FileNotFoundError as e:
        print(e)
        sys.exit(1)
    except ValueError as e:
        print(f"Invalid plan '{args.program_name}': {e}")
        sys.exit(1)

    if args.no_tax:
        params = params.with_updates(include_tax=False)

    projection = ProjectionCalculator().calculate(params)

    if args.mode == 'YearDetails':
        year = args.year if args.year is not None else projection.first_year
        renderer = create_renderer('YearDetails', year)
    else:
        renderer = create_renderer(args.mode)
    renderer.render(projection)


if __name__ == "__main__":
    main()
